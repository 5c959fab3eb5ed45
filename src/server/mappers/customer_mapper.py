from pathlib import Path
from typing import List, Optional

from src.server.mappers.sql_mapper import SqlMapper
from src.server.schemas.customer import CustomerIn, CustomerOut, CustomerPatch


class CustomerMapper(SqlMapper):
    mapper_file = Path(__file__).with_name("customer_mapper.yaml")
    result_type = CustomerOut

    # Inline-statement ("annotation") vid sidan av YAML-filen
    statements = {
        "count_all": {
            "kind": "select",
            "sql": "SELECT COUNT(*) FROM customers",
        },
    }

    def find_all(self, skip: int = 0, limit: int = 50) -> List[CustomerOut]:
        return self.select_list("find_all", skip=skip, limit=limit)

    def find_by_id(self, customer_id: int) -> Optional[CustomerOut]:
        return self.select_one("find_by_id", id=customer_id)

    def insert_customer(self, customer: CustomerIn) -> int:
        return self.insert(
            "insert",
            first_name=customer.first_name,
            last_name=customer.last_name,
            email=customer.email,
        )

    def update_customer(self, customer_id: int, patch: CustomerPatch) -> int:
        return self.update(
            "update",
            id=customer_id,
            first_name=patch.first_name,
            last_name=patch.last_name,
            email=patch.email,
        )

    def delete_by_id(self, customer_id: int) -> int:
        return self.delete("delete_by_id", id=customer_id)

    def count_all(self) -> int:
        return int(self.select_scalar("count_all") or 0)

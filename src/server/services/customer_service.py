# fil: src/server/services/customer_service.py

from __future__ import annotations

from typing import List, Optional

from sqlmodel import Session

from src.server.mappers.customer_mapper import CustomerMapper
from src.server.schemas.customer import CustomerIn, CustomerOut, CustomerPatch


class CustomerService:
    """
    Tunn service ovanpå CustomerMapper. Äger transaktionen:
    skrivningar committas här, vid fel görs rollback och felet kastas vidare.
    """

    def __init__(self, session: Session):
        self.session = session
        self.mapper = CustomerMapper(session)

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def get_all_customers(self, skip: int = 0, limit: int = 50) -> List[CustomerOut]:
        return self.mapper.find_all(skip=skip, limit=limit)

    def get_customer_by_id(self, customer_id: int) -> Optional[CustomerOut]:
        return self.mapper.find_by_id(customer_id)

    def count_customers(self) -> int:
        return self.mapper.count_all()

    def add_customer(self, customer: CustomerIn) -> int:
        try:
            new_id = self.mapper.insert_customer(customer)
        except Exception:
            self.session.rollback()
            raise
        self._commit()
        return new_id

    def update_customer(self, customer_id: int, patch: CustomerPatch) -> Optional[CustomerOut]:
        try:
            changed = self.mapper.update_customer(customer_id, patch)
        except Exception:
            self.session.rollback()
            raise
        if not changed:
            self.session.rollback()
            return None
        self._commit()
        return self.mapper.find_by_id(customer_id)

    def delete_customer(self, customer_id: int) -> bool:
        try:
            deleted = self.mapper.delete_by_id(customer_id)
        except Exception:
            self.session.rollback()
            raise
        self._commit()
        return deleted > 0

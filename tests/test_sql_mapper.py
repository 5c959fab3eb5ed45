import pytest

from src.server.mappers.sql_mapper import (
    MapperConfigError,
    SqlMapper,
    StatementNotFoundError,
    TooManyResultsError,
    load_mapper_file,
    to_camel,
)
from src.server.mappers.customer_mapper import CustomerMapper
from src.server.schemas.customer import CustomerIn, CustomerOut, CustomerPatch


class RawCustomerMapper(SqlMapper):
    namespace = "raw"
    statements = {
        "all": {"kind": "select", "sql": "SELECT id, first_name, last_name FROM customers ORDER BY id"},
        "by_last": {"kind": "select", "sql": "SELECT id FROM customers WHERE last_name = :last_name"},
    }


def _seed(session, *names):
    mapper = CustomerMapper(session)
    for first, last in names:
        mapper.insert_customer(CustomerIn(first_name=first, last_name=last))
    session.commit()


def test_to_camel():
    assert to_camel("first_name") == "firstName"
    assert to_camel("id") == "id"
    assert to_camel("firstName") == "firstName"
    assert to_camel("_id") == "_id"
    assert to_camel("address_2_line") == "address2Line"


def test_customer_mapper_merges_file_and_inline_statements(session):
    ids = CustomerMapper(session).statement_ids()
    assert ids == ["count_all", "delete_by_id", "find_all", "find_by_id", "insert", "update"]


def test_insert_returns_generated_key_and_find_maps_to_result_type(session):
    mapper = CustomerMapper(session)
    new_id = mapper.insert_customer(CustomerIn(first_name="Ada", last_name="Lovelace", email="ada@example.com"))
    session.commit()

    customer = mapper.find_by_id(new_id)
    assert isinstance(customer, CustomerOut)
    assert customer.id == new_id
    assert customer.first_name == "Ada"
    assert customer.email == "ada@example.com"
    assert mapper.find_by_id(new_id + 100) is None


def test_find_all_pages_in_id_order(session):
    _seed(session, ("A", "One"), ("B", "Two"), ("C", "Three"))
    mapper = CustomerMapper(session)

    assert [c.first_name for c in mapper.find_all()] == ["A", "B", "C"]
    assert [c.first_name for c in mapper.find_all(skip=1, limit=1)] == ["B"]
    assert mapper.count_all() == 3


def test_update_keeps_fields_not_sent(session):
    _seed(session, ("Ada", "Lovelace"))
    mapper = CustomerMapper(session)
    customer_id = mapper.find_all()[0].id

    assert mapper.update_customer(customer_id, CustomerPatch(email="ada@example.com")) == 1
    updated = mapper.find_by_id(customer_id)
    assert updated.first_name == "Ada"
    assert updated.email == "ada@example.com"


def test_raw_rows_use_camel_case_keys(session):
    _seed(session, ("Ada", "Lovelace"))
    rows = RawCustomerMapper(session).select_list("all")
    assert rows == [{"id": 1, "firstName": "Ada", "lastName": "Lovelace"}]


def test_raw_rows_keep_column_names_when_mapping_off(session):
    _seed(session, ("Ada", "Lovelace"))
    rows = RawCustomerMapper(session, map_underscore_to_camel_case=False).select_list("all")
    assert rows == [{"id": 1, "first_name": "Ada", "last_name": "Lovelace"}]


def test_select_one_with_several_rows_raises(session):
    _seed(session, ("Ada", "Smith"), ("Bob", "Smith"))
    with pytest.raises(TooManyResultsError):
        RawCustomerMapper(session).select_one("by_last", last_name="Smith")


def test_unknown_statement_names_namespace(session):
    with pytest.raises(StatementNotFoundError) as exc:
        RawCustomerMapper(session).select_list("missing")
    assert "raw.missing" in str(exc.value)


def test_statement_used_with_wrong_kind(session):
    with pytest.raises(MapperConfigError):
        RawCustomerMapper(session).insert("all")


def test_load_mapper_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_mapper_file(tmp_path / "nope.yaml")


def test_load_mapper_file_rejects_unknown_kind(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("statements:\n  x:\n    kind: merge\n    sql: SELECT 1\n", encoding="utf-8")
    with pytest.raises(MapperConfigError):
        load_mapper_file(path)


def test_load_mapper_file_defaults_namespace_to_file_name(tmp_path):
    path = tmp_path / "orders.yaml"
    path.write_text("statements:\n  one:\n    kind: select\n    sql: SELECT 1\n", encoding="utf-8")
    loaded = load_mapper_file(path)
    assert loaded["namespace"] == "orders"
    assert loaded["statements"]["one"].kind == "select"


def test_generated_keys_with_and_without_returning(session, monkeypatch):
    mapper = CustomerMapper(session)
    assert mapper.insert_customer(CustomerIn(first_name="A", last_name="One")) == 1

    # dialekt utan INSERT ... RETURNING -> cursorns lastrowid
    monkeypatch.setattr(mapper, "_supports_returning", lambda: False)
    assert mapper.insert_customer(CustomerIn(first_name="B", last_name="Two")) == 2
    session.commit()

    assert [c.id for c in mapper.find_all()] == [1, 2]


def test_load_mapper_file_reads_key_column(tmp_path):
    path = tmp_path / "orders.yaml"
    path.write_text(
        "statements:\n"
        "  insert:\n"
        "    kind: insert\n"
        "    use_generated_keys: true\n"
        "    key_column: order_id\n"
        "    sql: INSERT INTO orders (note) VALUES (:note)\n",
        encoding="utf-8",
    )
    stmt = load_mapper_file(path)["statements"]["insert"]
    assert stmt.use_generated_keys is True
    assert stmt.key_column == "order_id"

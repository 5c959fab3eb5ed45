# file: src/server/mappers/sql_mapper.py
"""
SQL-mapper (MyBatis-stil):

- Varje mapper-klass binder namngivna SQL-statements till metoder
- Statements deklareras inline (klassattributet `statements`)
  eller i en extern YAML-fil (klassattributet `mapper_file`)
- Rader mappas till `result_type` (pydantic-modell) eller till dicts,
  där first_name -> firstName om map_underscore_to_camel_case är på

YAML-format:

    namespace: customers
    statements:
      find_by_id:
        kind: select
        sql: SELECT id, first_name FROM customers WHERE id = :id
      insert:
        kind: insert
        use_generated_keys: true   # key_column: id (default)
        sql: INSERT INTO customers (first_name) VALUES (:first_name)

Genererade nycklar hämtas med RETURNING <key_column> när dialekten
stöder det (SQLite >= 3.35, PostgreSQL, MariaDB), annars via cursorns
lastrowid (MySQL).

Mappern committar aldrig – transaktionen ägs av service-lagret.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Type, Union

import yaml
from pydantic import BaseModel
from sqlalchemy import text
from sqlmodel import Session

from src.server.settings.config import settings


STATEMENT_KINDS = ("select", "insert", "update", "delete")


class MapperConfigError(ValueError):
    """Felaktig mapper-fil eller statement använd på fel sätt."""


class StatementNotFoundError(KeyError):
    pass


class TooManyResultsError(RuntimeError):
    pass


@dataclass(frozen=True)
class MappedStatement:
    id: str
    kind: str
    sql: str
    use_generated_keys: bool = False
    key_column: str = "id"


# Bara understreck efter bokstav/siffra, så "_id" behåller sitt prefix
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])_([a-z0-9])")


def to_camel(name: str) -> str:
    """
    first_name -> firstName. Redan camelCase lämnas orört.
    """
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), name)


def _parse_statements(raw: Any, source: str) -> Dict[str, MappedStatement]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise MapperConfigError(f"Felaktig struktur i {source}: 'statements' måste vara en dict")

    out: Dict[str, MappedStatement] = {}
    for stmt_id, body in raw.items():
        if not isinstance(body, dict):
            raise MapperConfigError(f"{source}: statement '{stmt_id}' måste vara en dict")

        kind = str(body.get("kind") or "").strip().lower()
        if kind not in STATEMENT_KINDS:
            raise MapperConfigError(
                f"{source}: statement '{stmt_id}' har okänd kind '{kind}' "
                f"(tillåtna: {', '.join(STATEMENT_KINDS)})"
            )

        sql = str(body.get("sql") or "").strip()
        if not sql:
            raise MapperConfigError(f"{source}: statement '{stmt_id}' saknar sql")

        out[str(stmt_id)] = MappedStatement(
            id=str(stmt_id),
            kind=kind,
            sql=sql,
            use_generated_keys=bool(body.get("use_generated_keys", False)),
            key_column=str(body.get("key_column") or "id"),
        )
    return out


def load_mapper_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Läser en YAML-mapperfil och returnerar {"namespace": str, "statements": {...}}.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Mapper-fil saknas: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise MapperConfigError(f"Felaktig YAML-struktur i {path}: rotobjektet måste vara en dict")

    namespace = str(data.get("namespace") or path.stem)
    statements = _parse_statements(data.get("statements"), str(path))

    print(f"[mapper] Laddade {len(statements)} statements från {path.name} ({namespace})")
    return {"namespace": namespace, "statements": statements}


class SqlMapper:
    """
    Basklass för mappers. Underklasser sätter `mapper_file`, `statements`
    och/eller `result_type` och exponerar sina metoder via select_*/insert/...
    """

    namespace: ClassVar[Optional[str]] = None
    mapper_file: ClassVar[Optional[Union[str, Path]]] = None
    statements: ClassVar[Dict[str, Dict[str, Any]]] = {}
    result_type: ClassVar[Optional[Type[BaseModel]]] = None

    # Cache per klass så att YAML bara läses en gång
    _registry_cache: ClassVar[Dict[type, Dict[str, Any]]] = {}

    def __init__(self, session: Session, map_underscore_to_camel_case: Optional[bool] = None):
        self.session = session
        if map_underscore_to_camel_case is None:
            map_underscore_to_camel_case = settings.map_underscore_to_camel_case
        self.map_underscore_to_camel_case = map_underscore_to_camel_case

        registry = self._registry()
        self._namespace: str = registry["namespace"]
        self._statements: Dict[str, MappedStatement] = registry["statements"]

    @classmethod
    def _registry(cls) -> Dict[str, Any]:
        cached = SqlMapper._registry_cache.get(cls)
        if cached is not None:
            return cached

        namespace = cls.namespace or cls.__name__
        statements: Dict[str, MappedStatement] = {}

        if cls.mapper_file is not None:
            loaded = load_mapper_file(cls.mapper_file)
            statements.update(loaded["statements"])
            if cls.namespace is None:
                namespace = loaded["namespace"]

        # Inline vinner över filen vid samma id
        statements.update(_parse_statements(cls.statements, cls.__name__))

        registry = {"namespace": namespace, "statements": statements}
        SqlMapper._registry_cache[cls] = registry
        return registry

    # ------------------------------
    # Statements
    # ------------------------------

    def statement(self, stmt_id: str) -> MappedStatement:
        try:
            return self._statements[stmt_id]
        except KeyError:
            raise StatementNotFoundError(f"{self._namespace}.{stmt_id}") from None

    def statement_ids(self) -> List[str]:
        return sorted(self._statements)

    def _checked(self, stmt_id: str, *kinds: str) -> MappedStatement:
        stmt = self.statement(stmt_id)
        if stmt.kind not in kinds:
            raise MapperConfigError(
                f"{self._namespace}.{stmt_id} är en {stmt.kind}, förväntade {'/'.join(kinds)}"
            )
        return stmt

    def _execute(self, stmt: MappedStatement, params: Dict[str, Any]):
        # Gå via sessionens connection så att allt hamnar i samma transaktion
        return self.session.connection().execute(text(stmt.sql), params)

    # ------------------------------
    # Radmappning
    # ------------------------------

    def _map_row(self, row) -> Any:
        data = dict(row._mapping)
        if self.result_type is not None:
            return self.result_type.model_validate(data)
        if self.map_underscore_to_camel_case:
            return {to_camel(k): v for k, v in data.items()}
        return data

    # ------------------------------
    # Select
    # ------------------------------

    def select_list(self, stmt_id: str, **params: Any) -> List[Any]:
        stmt = self._checked(stmt_id, "select")
        result = self._execute(stmt, params)
        return [self._map_row(r) for r in result.all()]

    def select_one(self, stmt_id: str, **params: Any) -> Optional[Any]:
        rows = self.select_list(stmt_id, **params)
        if not rows:
            return None
        if len(rows) > 1:
            raise TooManyResultsError(
                f"{self._namespace}.{stmt_id} gav {len(rows)} rader, förväntade högst en"
            )
        return rows[0]

    def select_scalar(self, stmt_id: str, **params: Any) -> Any:
        stmt = self._checked(stmt_id, "select")
        return self._execute(stmt, params).scalar()

    # ------------------------------
    # Skrivningar
    # ------------------------------

    def insert(self, stmt_id: str, **params: Any) -> Optional[int]:
        stmt = self._checked(stmt_id, "insert")
        if stmt.use_generated_keys and self._supports_returning():
            sql = stmt.sql.rstrip().rstrip(";")
            returning = replace(stmt, sql=f"{sql} RETURNING {stmt.key_column}")
            return self._execute(returning, params).scalar_one()

        result = self._execute(stmt, params)
        if stmt.use_generated_keys:
            return result.lastrowid
        return result.rowcount

    def _supports_returning(self) -> bool:
        dialect = self.session.connection().dialect
        return bool(getattr(dialect, "insert_returning", False))

    def update(self, stmt_id: str, **params: Any) -> int:
        stmt = self._checked(stmt_id, "update")
        return self._execute(stmt, params).rowcount

    def delete(self, stmt_id: str, **params: Any) -> int:
        stmt = self._checked(stmt_id, "delete")
        return self._execute(stmt, params).rowcount

# tests/conftest.py
import os, sys
# lägg till projektroten (mappen som innehåller "src") först i sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# In-memory SQLite och ingen SQL-echo – måste sättas innan src.server importeras
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEBUG"] = "0"
os.environ["MAP_UNDERSCORE_TO_CAMEL_CASE"] = "1"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from src.server.db.session import engine, init_db


@pytest.fixture(autouse=True)
def fresh_db():
    SQLModel.metadata.drop_all(engine)
    init_db()
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def client():
    from src.server.main import app
    with TestClient(app) as c:
        yield c

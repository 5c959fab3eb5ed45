from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session
from src.server.settings.config import settings

connect_args = {}
engine_kwargs = {}
if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}
    # In-memory: en och samma connection, annars ser varje session en tom DB
    if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs = {"poolclass": StaticPool}

engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    connect_args=connect_args,
    **engine_kwargs,
)

def init_db() -> None:
    # Se till att modellerna laddas (EN gång, via src.server.*)
    from src.server.models import __all_models  # noqa: F401
    SQLModel.metadata.create_all(engine)

def get_session():
    with Session(engine) as session:
        yield session

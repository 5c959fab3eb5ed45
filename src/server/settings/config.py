from typing import List

from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseModel):
    app_name: str = "Customer Service (MyBatis-style mapper demo)"
    environment: str = os.getenv("ENVIRONMENT", "dev")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./customers.db")
    debug: bool = os.getenv("DEBUG", "1") == "1"
    # first_name -> firstName när rader returneras som dict
    map_underscore_to_camel_case: bool = os.getenv("MAP_UNDERSCORE_TO_CAMEL_CASE", "1") == "1"
    cors_origins: List[str] = _split_origins(
        os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )

settings = Settings()

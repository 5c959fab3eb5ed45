from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional

class _CamelModel(BaseModel):
    # Tar emot både first_name och firstName, skickar ut camelCase
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class CustomerIn(_CamelModel):
    first_name: str
    last_name: str
    email: Optional[str] = None

class CustomerOut(CustomerIn):
    id: int

class CustomerPatch(_CamelModel):
    """
    Delvis uppdatering – fält som inte skickas lämnas orörda.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ContactBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContactCreate(ContactBase):
    model_config = ConfigDict(extra="forbid")

    # Presence is checked by crud.validate_contact so every missing field is reported
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class ContactRead(ContactBase):
    id: str
    first_name: str
    last_name: str
    phone: str


class Message(BaseModel):
    message: str


class ValidationMessage(Message):
    errors: List[str] = []

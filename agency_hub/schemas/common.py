from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes the camelCase document shape."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


PreferredContact = Literal["email", "phone", "text"]


class EmailEntry(CamelModel):
    address: str
    label: str = ""
    is_primary: bool = False


class PhoneEntry(CamelModel):
    number: str
    label: str = ""
    is_primary: bool = False


class PostalAddress(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


ContactListTable = Literal["projects", "contactSubmissions", "projectRequests", "leads"]


class EmailAddRequest(CamelModel):
    table: ContactListTable
    record_id: str
    email: EmailEntry


class EmailUpdateRequest(CamelModel):
    table: ContactListTable
    record_id: str
    email_index: int
    email: EmailEntry


class PhoneAddRequest(CamelModel):
    table: ContactListTable
    record_id: str
    phone: PhoneEntry


class PhoneUpdateRequest(CamelModel):
    table: ContactListTable
    record_id: str
    phone_index: int
    phone: PhoneEntry


class ListEntryRequest(CamelModel):
    """Identifies one entry of a record's email or phone list."""

    table: ContactListTable
    record_id: str
    index: int


class ContactListResponse(CamelModel):
    record_id: str
    emails: Optional[List[EmailEntry]] = None
    phones: Optional[List[PhoneEntry]] = None

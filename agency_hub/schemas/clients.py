from typing import Any, Dict, List, Optional

from pydantic import Field

from agency_hub.schemas.common import (
    CamelModel,
    EmailEntry,
    PhoneEntry,
    PostalAddress,
    PreferredContact,
)


class ConsolidatedClient(CamelModel):
    primary_email: str
    name: str
    emails: List[EmailEntry] = Field(default_factory=list)
    phone: Optional[str] = None
    phones: List[PhoneEntry] = Field(default_factory=list)
    company: Optional[str] = None
    website: Optional[str] = None
    address: Optional[PostalAddress] = None
    tags: Optional[List[str]] = None
    preferred_contact: Optional[PreferredContact] = None
    timezone: Optional[str] = None
    referral_source: Optional[str] = None
    notes: Optional[str] = None
    project_ids: List[str] = Field(default_factory=list)
    lead_ids: List[str] = Field(default_factory=list)
    request_ids: List[str] = Field(default_factory=list)
    contact_ids: List[str] = Field(default_factory=list)
    first_seen: int
    last_activity: int
    total_interactions: int = 0


class ClientListResponse(CamelModel):
    total: int
    items: List[ConsolidatedClient]


class ClientDetailsRequest(CamelModel):
    email: str


class ClientDetails(CamelModel):
    projects: List[Dict[str, Any]] = Field(default_factory=list)
    leads: List[Dict[str, Any]] = Field(default_factory=list)
    requests: List[Dict[str, Any]] = Field(default_factory=list)
    contacts: List[Dict[str, Any]] = Field(default_factory=list)


class ClientInfoUpdate(CamelModel):
    name: Optional[str] = None
    company: Optional[str] = None
    website: Optional[str] = None
    phones: Optional[List[PhoneEntry]] = None
    address: Optional[PostalAddress] = None
    tags: Optional[List[str]] = None
    preferred_contact: Optional[PreferredContact] = None
    timezone: Optional[str] = None
    referral_source: Optional[str] = None
    notes: Optional[str] = None


class ClientUpdateRequest(CamelModel):
    primary_email: str
    updates: ClientInfoUpdate


class ClientUpdateResult(CamelModel):
    success: bool = True
    updated: Dict[str, int] = Field(default_factory=dict)

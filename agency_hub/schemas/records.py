from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from agency_hub.schemas.common import CamelModel

ContactStatus = Literal["new", "read", "replied"]
ProjectRequestStatus = Literal["new", "contacted", "quoted", "accepted", "declined"]
QuoteStatus = Literal["new", "contacted", "quoted", "closed"]
LeadStatus = Literal["new", "contacted", "qualified", "converted", "lost"]


class ContactSubmitRequest(CamelModel):
    name: str
    email: str
    service: str
    message: str


class ProjectRequestSubmit(CamelModel):
    name: str
    email: str
    business_name: Optional[str] = None
    project_types: List[str] = Field(default_factory=list)
    description: str
    timeline: str
    budget: str


class QuoteRequestCreate(CamelModel):
    name: str
    phone: str
    email: Optional[str] = None
    service_type: str
    issue_type: str
    property_type: str
    zip_code: str
    description: Optional[str] = None


class LeadCreateRequest(CamelModel):
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    source: str
    notes: Optional[str] = None


class ContactStatusUpdate(CamelModel):
    status: ContactStatus
    notes: Optional[str] = None


class ProjectRequestStatusUpdate(CamelModel):
    status: ProjectRequestStatus
    notes: Optional[str] = None


class QuoteStatusUpdate(CamelModel):
    status: QuoteStatus


class LeadStatusUpdate(CamelModel):
    status: LeadStatus
    notes: Optional[str] = None


class RecordCreatedResponse(CamelModel):
    id: str
    table: str
    status: str
    created_at: int


class RecordUpdatedResponse(CamelModel):
    id: str
    table: str
    fields: Dict[str, Any] = Field(default_factory=dict)

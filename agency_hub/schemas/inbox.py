from typing import Any, Dict, List, Literal

from pydantic import Field

from agency_hub.schemas.common import CamelModel

InboxSource = Literal["contact", "request", "quote", "lead"]
UnifiedStatus = Literal["new", "in_progress", "converted", "closed"]


class InboxItem(CamelModel):
    id: str
    source: InboxSource
    name: str
    email: str
    unified_status: UnifiedStatus
    created_at: int
    source_data: Dict[str, Any] = Field(default_factory=dict)


class InboxListResponse(CamelModel):
    total: int
    items: List[InboxItem]


class InboxCountResponse(CamelModel):
    count: int

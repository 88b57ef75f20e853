from fastapi import APIRouter, Depends

from agency_hub.dependencies.services import get_inbox_service
from agency_hub.schemas.inbox import InboxCountResponse, InboxListResponse
from agency_hub.services import InboxService
from agency_hub.services.exceptions import ServiceError
from agency_hub.tools.errors import to_http_error

router = APIRouter()


@router.get("/items", response_model=InboxListResponse)
async def list_inbox_items(
    service: InboxService = Depends(get_inbox_service),
):
    try:
        items = await service.get_inbox_items()
    except ServiceError as exc:
        raise to_http_error(exc) from exc
    return InboxListResponse(total=len(items), items=items)


@router.get("/new-count", response_model=InboxCountResponse)
async def count_new_items(
    service: InboxService = Depends(get_inbox_service),
):
    try:
        return InboxCountResponse(count=await service.get_inbox_new_count())
    except ServiceError as exc:
        raise to_http_error(exc) from exc

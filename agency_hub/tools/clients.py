from fastapi import APIRouter, Depends

from agency_hub.dependencies.services import get_client_directory_service
from agency_hub.schemas.clients import (
    ClientDetails,
    ClientDetailsRequest,
    ClientListResponse,
    ClientUpdateRequest,
    ClientUpdateResult,
)
from agency_hub.services import ClientDirectoryService
from agency_hub.services.exceptions import ServiceError
from agency_hub.tools.errors import to_http_error

router = APIRouter()


@router.get("/list", response_model=ClientListResponse)
async def list_clients(
    service: ClientDirectoryService = Depends(get_client_directory_service),
):
    try:
        clients = await service.get_all_clients()
    except ServiceError as exc:
        raise to_http_error(exc) from exc
    return ClientListResponse(total=len(clients), items=clients)


@router.post("/details", response_model=ClientDetails)
async def client_details(
    req: ClientDetailsRequest,
    service: ClientDirectoryService = Depends(get_client_directory_service),
):
    try:
        return await service.get_client_details(req.email)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/update", response_model=ClientUpdateResult)
async def update_client(
    req: ClientUpdateRequest,
    service: ClientDirectoryService = Depends(get_client_directory_service),
):
    try:
        return await service.update_client_info(req.primary_email, req.updates)
    except ServiceError as exc:
        raise to_http_error(exc) from exc

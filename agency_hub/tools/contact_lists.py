from fastapi import APIRouter, Depends

from agency_hub.dependencies.services import get_contact_list_service
from agency_hub.schemas.common import (
    ContactListResponse,
    EmailAddRequest,
    EmailUpdateRequest,
    ListEntryRequest,
    PhoneAddRequest,
    PhoneUpdateRequest,
)
from agency_hub.services import ContactListService
from agency_hub.services.exceptions import ServiceError
from agency_hub.tools.errors import to_http_error

router = APIRouter()


@router.post("/emails/add", response_model=ContactListResponse, response_model_exclude_none=True)
async def add_email(
    req: EmailAddRequest,
    service: ContactListService = Depends(get_contact_list_service),
):
    try:
        return await service.add_email(req.table, req.record_id, req.email)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/emails/update", response_model=ContactListResponse, response_model_exclude_none=True)
async def update_email(
    req: EmailUpdateRequest,
    service: ContactListService = Depends(get_contact_list_service),
):
    try:
        return await service.update_email(req.table, req.record_id, req.email_index, req.email)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/emails/remove", response_model=ContactListResponse, response_model_exclude_none=True)
async def remove_email(
    req: ListEntryRequest,
    service: ContactListService = Depends(get_contact_list_service),
):
    try:
        return await service.remove_email(req.table, req.record_id, req.index)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/emails/set-primary", response_model=ContactListResponse, response_model_exclude_none=True)
async def set_primary_email(
    req: ListEntryRequest,
    service: ContactListService = Depends(get_contact_list_service),
):
    try:
        return await service.set_primary_email(req.table, req.record_id, req.index)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/phones/add", response_model=ContactListResponse, response_model_exclude_none=True)
async def add_phone(
    req: PhoneAddRequest,
    service: ContactListService = Depends(get_contact_list_service),
):
    try:
        return await service.add_phone(req.table, req.record_id, req.phone)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/phones/update", response_model=ContactListResponse, response_model_exclude_none=True)
async def update_phone(
    req: PhoneUpdateRequest,
    service: ContactListService = Depends(get_contact_list_service),
):
    try:
        return await service.update_phone(req.table, req.record_id, req.phone_index, req.phone)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/phones/remove", response_model=ContactListResponse, response_model_exclude_none=True)
async def remove_phone(
    req: ListEntryRequest,
    service: ContactListService = Depends(get_contact_list_service),
):
    try:
        return await service.remove_phone(req.table, req.record_id, req.index)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/phones/set-primary", response_model=ContactListResponse, response_model_exclude_none=True)
async def set_primary_phone(
    req: ListEntryRequest,
    service: ContactListService = Depends(get_contact_list_service),
):
    try:
        return await service.set_primary_phone(req.table, req.record_id, req.index)
    except ServiceError as exc:
        raise to_http_error(exc) from exc

from fastapi import APIRouter, Depends

from agency_hub.dependencies.services import get_intake_service
from agency_hub.schemas.records import (
    ContactStatusUpdate,
    ContactSubmitRequest,
    LeadCreateRequest,
    LeadStatusUpdate,
    ProjectRequestStatusUpdate,
    ProjectRequestSubmit,
    QuoteRequestCreate,
    QuoteStatusUpdate,
    RecordCreatedResponse,
    RecordUpdatedResponse,
)
from agency_hub.services import IntakeService
from agency_hub.services.exceptions import ServiceError
from agency_hub.tools.errors import to_http_error

router = APIRouter()


@router.post("/contacts", response_model=RecordCreatedResponse)
async def submit_contact(
    req: ContactSubmitRequest,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.submit_contact(req)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/project-requests", response_model=RecordCreatedResponse)
async def submit_project_request(
    req: ProjectRequestSubmit,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.submit_project_request(req)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/quotes", response_model=RecordCreatedResponse)
async def create_quote_request(
    req: QuoteRequestCreate,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.create_quote_request(req)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/leads", response_model=RecordCreatedResponse)
async def create_lead(
    req: LeadCreateRequest,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.create_lead(req)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/contacts/{record_id}/status", response_model=RecordUpdatedResponse)
async def update_contact_status(
    record_id: str,
    req: ContactStatusUpdate,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.update_contact_status(record_id, req)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/project-requests/{record_id}/status", response_model=RecordUpdatedResponse)
async def update_project_request_status(
    record_id: str,
    req: ProjectRequestStatusUpdate,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.update_project_request_status(record_id, req)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/quotes/{record_id}/status", response_model=RecordUpdatedResponse)
async def update_quote_status(
    record_id: str,
    req: QuoteStatusUpdate,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.update_quote_status(record_id, req)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/quotes/{record_id}/convert", response_model=RecordCreatedResponse)
async def convert_quote(
    record_id: str,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.convert_quote_to_project(record_id)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/leads/{record_id}/status", response_model=RecordUpdatedResponse)
async def update_lead_status(
    record_id: str,
    req: LeadStatusUpdate,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.update_lead_status(record_id, req)
    except ServiceError as exc:
        raise to_http_error(exc) from exc


@router.post("/leads/{record_id}/contacted", response_model=RecordUpdatedResponse)
async def mark_lead_contacted(
    record_id: str,
    service: IntakeService = Depends(get_intake_service),
):
    try:
        return await service.mark_lead_contacted(record_id)
    except ServiceError as exc:
        raise to_http_error(exc) from exc

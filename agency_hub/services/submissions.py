from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import BaseModel

from agency_hub.clients.convex import ConvexClient
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
from agency_hub.services.exceptions import RecordNotFoundError, ServiceError
from agency_hub.services.store import (
    CONTACT_SUBMISSIONS,
    LEADS,
    PROJECT_REQUESTS,
    PROJECTS,
    QUOTE_REQUESTS,
    DocumentStore,
    now_ms,
    resolve_store,
)

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Not specified"


class IntakeService:
    """Creates source records from public forms and applies staff status changes."""

    def __init__(
        self,
        client: ConvexClient,
        *,
        store: DocumentStore | None = None,
    ) -> None:
        self._client = client
        self._store = resolve_store(client, store)

    async def _insert(self, table: str, request: BaseModel) -> RecordCreatedResponse:
        created_at = now_ms()
        document = request.model_dump(by_alias=True, exclude_none=True)
        document.update({"status": "new", "createdAt": created_at})
        if self._client.use_mock_data:
            await self._client.simulate_latency()
        try:
            record_id = await self._store.insert(table, document)
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while inserting into %s", table)
            raise ServiceError(f"Failed to create {table} record", cause=exc) from exc
        logger.info("Created %s record %s", table, record_id)
        return RecordCreatedResponse(id=record_id, table=table, status="new", created_at=created_at)

    async def _patch(self, table: str, record_id: str, fields: Dict[str, Any]) -> RecordUpdatedResponse:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
        try:
            await self._store.patch(table, record_id, fields)
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while updating %s/%s", table, record_id)
            raise ServiceError(f"Failed to update {table} record", cause=exc) from exc
        logger.info("Updated %s record %s: %s", table, record_id, sorted(fields))
        return RecordUpdatedResponse(id=record_id, table=table, fields=fields)

    async def submit_contact(self, request: ContactSubmitRequest) -> RecordCreatedResponse:
        return await self._insert(CONTACT_SUBMISSIONS, request)

    async def submit_project_request(self, request: ProjectRequestSubmit) -> RecordCreatedResponse:
        return await self._insert(PROJECT_REQUESTS, request)

    async def create_quote_request(self, request: QuoteRequestCreate) -> RecordCreatedResponse:
        return await self._insert(QUOTE_REQUESTS, request)

    async def create_lead(self, request: LeadCreateRequest) -> RecordCreatedResponse:
        return await self._insert(LEADS, request)

    async def update_contact_status(
        self, record_id: str, update: ContactStatusUpdate
    ) -> RecordUpdatedResponse:
        return await self._patch(CONTACT_SUBMISSIONS, record_id, update.model_dump(exclude_none=True))

    async def update_project_request_status(
        self, record_id: str, update: ProjectRequestStatusUpdate
    ) -> RecordUpdatedResponse:
        return await self._patch(PROJECT_REQUESTS, record_id, update.model_dump(exclude_none=True))

    async def update_quote_status(
        self, record_id: str, update: QuoteStatusUpdate
    ) -> RecordUpdatedResponse:
        return await self._patch(QUOTE_REQUESTS, record_id, update.model_dump(exclude_none=True))

    async def update_lead_status(
        self, record_id: str, update: LeadStatusUpdate
    ) -> RecordUpdatedResponse:
        return await self._patch(LEADS, record_id, update.model_dump(exclude_none=True))

    async def mark_lead_contacted(self, record_id: str) -> RecordUpdatedResponse:
        return await self._patch(LEADS, record_id, {"lastContactedAt": now_ms()})

    async def convert_quote_to_project(self, quote_id: str) -> RecordCreatedResponse:
        """Create a project from a quote request and close the quote."""

        quote = await self._store.get(QUOTE_REQUESTS, quote_id)
        if quote is None:
            raise RecordNotFoundError(QUOTE_REQUESTS, quote_id)

        issue_type = quote.get("issueType", "")
        property_type = quote.get("propertyType", "")
        # Quote forms store the budget in zipCode.
        budget = quote.get("zipCode") or NOT_SPECIFIED
        created_at = now_ms()
        project = {
            "name": quote.get("name", ""),
            "email": quote.get("email") or "",
            "projectType": issue_type,
            "description": quote.get("description") or f"{issue_type} for {property_type}",
            "status": "new",
            "notes": (
                "Converted from quote request.\n\nOriginal details:\n"
                f"- Service: {issue_type}\n"
                f"- Business Type: {property_type}\n"
                f"- Budget: {budget}"
            ),
            "createdAt": created_at,
            "updatedAt": created_at,
        }
        if quote.get("phone"):
            project["phone"] = quote["phone"]
        if budget != NOT_SPECIFIED:
            project["budget"] = budget

        try:
            project_id = await self._store.insert(PROJECTS, project)
            await self._store.patch(QUOTE_REQUESTS, quote_id, {"status": "closed"})
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while converting quote %s", quote_id)
            raise ServiceError("Failed to convert quote request", cause=exc) from exc

        logger.info("Converted quote %s into project %s", quote_id, project_id)
        return RecordCreatedResponse(id=project_id, table=PROJECTS, status="new", created_at=created_at)

"""Client identity consolidation across the agency's source collections."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import BaseModel

from agency_hub.clients.convex import ConvexClient
from agency_hub.schemas.clients import (
    ClientDetails,
    ClientInfoUpdate,
    ClientUpdateResult,
    ConsolidatedClient,
)
from agency_hub.schemas.common import EmailEntry
from agency_hub.services.exceptions import ServiceError
from agency_hub.services.profiles import (
    KIND_TABLES,
    ClientProfile,
    SourceKind,
    resolve_primary_email,
    to_common_profile,
    writable_field,
)
from agency_hub.services.store import PROJECTS, Document, DocumentStore, now_ms, resolve_store

logger = logging.getLogger(__name__)

SCALAR_ATTRIBUTES = (
    "phone",
    "company",
    "website",
    "address",
    "tags",
    "preferred_contact",
    "timezone",
    "referral_source",
    "notes",
)

_ID_LISTS: Dict[SourceKind, str] = {
    "project": "project_ids",
    "lead": "lead_ids",
    "request": "request_ids",
    "contact": "contact_ids",
}

_DETAIL_KEYS: Dict[SourceKind, str] = {
    "project": "projects",
    "lead": "leads",
    "request": "requests",
    "contact": "contacts",
}


def _copy_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_copy(deep=True)
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return value


def _seed_client(key: str, profile: ClientProfile) -> ConsolidatedClient:
    emails = _copy_value(profile.emails) or [
        EmailEntry(address=profile.email, label="Primary", is_primary=True)
    ]
    return ConsolidatedClient(
        primary_email=key,
        name=profile.name,
        emails=emails,
        phones=_copy_value(profile.phones),
        first_seen=profile.created_at,
        last_activity=profile.created_at,
        total_interactions=0,
    )


def _merge_profile(client: ConsolidatedClient, profile: ClientProfile) -> None:
    for attribute in SCALAR_ATTRIBUTES:
        incoming = getattr(profile, attribute)
        if not getattr(client, attribute) and incoming:
            setattr(client, attribute, _copy_value(incoming))

    known_addresses = {entry.address for entry in client.emails}
    for entry in profile.emails:
        if entry.address not in known_addresses:
            client.emails.append(entry.model_copy())
            known_addresses.add(entry.address)

    known_numbers = {entry.number for entry in client.phones}
    for entry in profile.phones:
        if entry.number not in known_numbers:
            client.phones.append(entry.model_copy())
            known_numbers.add(entry.number)

    getattr(client, _ID_LISTS[profile.kind]).append(profile.record_id)

    client.first_seen = min(client.first_seen, profile.created_at)
    client.last_activity = max(client.last_activity, profile.created_at)
    client.total_interactions += 1


def consolidate_profiles(profiles: Iterable[ClientProfile]) -> List[ConsolidatedClient]:
    """Group profiles by resolved primary email, first non-empty value wins.

    Profiles must arrive in consolidation order; the result is sorted by
    ``last_activity`` descending.
    """

    clients: Dict[str, ConsolidatedClient] = {}
    ordered_keys: List[str] = []

    for profile in profiles:
        key = resolve_primary_email(profile)
        if key not in clients:
            clients[key] = _seed_client(key, profile)
            ordered_keys.append(key)
        _merge_profile(clients[key], profile)

    ordered = [clients[key] for key in ordered_keys]
    return sorted(ordered, key=lambda client: client.last_activity, reverse=True)


def _patch_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_patch_value(item) for item in value]
    return value


def build_client_patch(kind: SourceKind, updates: ClientInfoUpdate) -> Document:
    """Translate common client attributes into the fields ``kind`` stores them under."""

    patch: Document = {}
    for attribute in ClientInfoUpdate.model_fields:
        value = getattr(updates, attribute)
        if value is None:
            continue
        # Clearing the company is allowed, other blank values are ignored.
        if value == "" and attribute != "company":
            continue
        field_name = writable_field(kind, attribute)
        if field_name is None:
            continue
        patch[field_name] = _patch_value(value)
    return patch


class ClientDirectoryService:
    def __init__(
        self,
        client: ConvexClient,
        *,
        store: DocumentStore | None = None,
    ) -> None:
        self._client = client
        self._store = resolve_store(client, store)

    async def _collect_profiles(self) -> List[Tuple[ClientProfile, Document]]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
        kinds = list(KIND_TABLES)
        results = await asyncio.gather(*(self._store.collect(KIND_TABLES[kind]) for kind in kinds))
        return [
            (to_common_profile(kind, document), document)
            for kind, documents in zip(kinds, results)
            for document in documents
        ]

    async def _load(self, action: str) -> List[Tuple[ClientProfile, Document]]:
        try:
            return await self._collect_profiles()
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while loading client records")
            raise ServiceError(f"Failed to {action}", cause=exc) from exc

    async def get_all_clients(self) -> List[ConsolidatedClient]:
        logger.info("Consolidating clients from source collections")
        entries = await self._load("consolidate clients")
        clients = consolidate_profiles(profile for profile, _ in entries)
        logger.debug("Consolidated %d records into %d clients", len(entries), len(clients))
        return clients

    async def get_client_details(self, email: str) -> ClientDetails:
        logger.info("Loading client details for %s", email)
        entries = await self._load("load client details")
        grouped: Dict[str, List[Document]] = {key: [] for key in _DETAIL_KEYS.values()}
        for profile, document in entries:
            if resolve_primary_email(profile) == email:
                grouped[_DETAIL_KEYS[profile.kind]].append(document)
        return ClientDetails(**grouped)

    async def update_client_info(
        self, primary_email: str, updates: ClientInfoUpdate
    ) -> ClientUpdateResult:
        logger.info("Updating client info for %s", primary_email)
        entries = await self._load("update client info")
        counts = {key: 0 for key in _DETAIL_KEYS.values()}

        try:
            for profile, _ in entries:
                if resolve_primary_email(profile) != primary_email:
                    continue
                patch = build_client_patch(profile.kind, updates)
                table = KIND_TABLES[profile.kind]
                if table == PROJECTS:
                    patch["updatedAt"] = now_ms()
                if patch:
                    await self._store.patch(table, profile.record_id, patch)
                counts[_DETAIL_KEYS[profile.kind]] += 1
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while updating client %s", primary_email)
            raise ServiceError("Failed to update client info", cause=exc) from exc

        return ClientUpdateResult(success=True, updated=counts)

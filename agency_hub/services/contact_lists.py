"""Email and phone list editing for individual source records.

Every operation returns a fresh list in which exactly one entry is primary
whenever the list is non-empty.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, Type, TypeVar

from pydantic import ValidationError

from agency_hub.clients.convex import ConvexClient
from agency_hub.schemas.common import ContactListResponse, EmailEntry, PhoneEntry
from agency_hub.services.exceptions import ContactListError, ServiceError
from agency_hub.services.profiles import parse_entries
from agency_hub.services.store import (
    CONTACT_SUBMISSIONS,
    LEADS,
    PROJECT_REQUESTS,
    PROJECTS,
    Document,
    DocumentStore,
    ListEdit,
    resolve_store,
)

logger = logging.getLogger(__name__)

Entry = TypeVar("Entry", EmailEntry, PhoneEntry)

_LIST_FIELDS = {EmailEntry: "emails", PhoneEntry: "phones"}

# Deployment module and function suffix for each list kind.
_LIST_FUNCTIONS = {EmailEntry: ("emailManagement", "Email"), PhoneEntry: ("phoneManagement", "Phone")}

LIST_TABLES = (PROJECTS, CONTACT_SUBMISSIONS, PROJECT_REQUESTS, LEADS)


def _with_primary(entries: List[Entry], primary_index: Optional[int]) -> List[Entry]:
    if not entries:
        return entries
    if primary_index is None:
        flagged = [index for index, entry in enumerate(entries) if entry.is_primary]
        primary_index = flagged[0] if flagged else 0
    return [
        entry.model_copy(update={"is_primary": index == primary_index})
        for index, entry in enumerate(entries)
    ]


def _check_index(entries: Sequence[Entry], index: int) -> None:
    if index < 0 or index >= len(entries):
        raise ContactListError(f"Entry index {index} is out of range for a list of {len(entries)}")


def stored_entries(raw: Any, model: Type[Entry]) -> List[Entry]:
    """Parse a stored list for editing, refusing to drop entries that fail validation."""

    if raw is None:
        return []
    field_name = _LIST_FIELDS[model]
    if not isinstance(raw, list):
        raise ContactListError(f"Stored {field_name} value is not a list")
    try:
        return [model.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise ContactListError(
            f"Stored {field_name} contain an invalid entry and cannot be edited", cause=exc
        ) from exc


def add_entry(entries: Sequence[Entry], new_entry: Entry) -> List[Entry]:
    updated = list(entries) + [new_entry]
    primary_index = len(updated) - 1 if new_entry.is_primary else None
    return _with_primary(updated, primary_index)


def update_entry(entries: Sequence[Entry], index: int, new_entry: Entry) -> List[Entry]:
    _check_index(entries, index)
    updated = list(entries)
    updated[index] = new_entry
    if new_entry.is_primary:
        return _with_primary(updated, index)
    if entries[index].is_primary:
        # Demoting the primary hands the flag to the first other entry.
        others = [position for position in range(len(updated)) if position != index]
        return _with_primary(updated, others[0] if others else index)
    return _with_primary(updated, None)


def remove_entry(entries: Sequence[Entry], index: int) -> List[Entry]:
    _check_index(entries, index)
    removed = entries[index]
    remaining = [entry for position, entry in enumerate(entries) if position != index]
    return _with_primary(remaining, 0 if removed.is_primary else None)


def set_primary_entry(entries: Sequence[Entry], index: int) -> List[Entry]:
    _check_index(entries, index)
    return _with_primary(list(entries), index)


class ContactListService:
    """Applies list edits to one stored record as a single read-modify-write."""

    def __init__(
        self,
        client: ConvexClient,
        *,
        store: DocumentStore | None = None,
    ) -> None:
        self._client = client
        self._store = resolve_store(client, store)

    async def _apply(
        self,
        table: str,
        record_id: str,
        model: Type[Entry],
        action: str,
        operation: Callable[[List[Entry]], List[Entry]],
        *,
        index: Optional[int] = None,
        entry: Optional[Entry] = None,
    ) -> ContactListResponse:
        field_name = _LIST_FIELDS[model]
        if table not in LIST_TABLES:
            raise ContactListError(f"Records in {table!r} do not carry contact lists")

        def update(document: Document) -> Document:
            current = stored_entries(document.get(field_name), model)
            edited = operation(current)
            return {field_name: [item.model_dump(by_alias=True) for item in edited]}

        module, noun = _LIST_FUNCTIONS[model]
        args: Document = {}
        if index is not None:
            args[f"{noun.lower()}Index"] = index
        if entry is not None:
            args[noun.lower()] = entry.model_dump(by_alias=True)
        edit = ListEdit(
            list_field=field_name,
            function=f"{module}:{action}{noun}",
            args=args,
            apply=update,
        )

        if self._client.use_mock_data:
            await self._client.simulate_latency()
        try:
            document = await self._store.edit_list(table, record_id, edit)
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while editing %s on %s", field_name, record_id)
            raise ServiceError(f"Failed to update {field_name}", cause=exc) from exc

        logger.info("Updated %s on %s/%s", field_name, table, record_id)
        entries = parse_entries(document.get(field_name), model)
        return ContactListResponse(record_id=record_id, **{field_name: entries})

    async def add_email(self, table: str, record_id: str, email: EmailEntry) -> ContactListResponse:
        return await self._apply(
            table, record_id, EmailEntry, "add", lambda entries: add_entry(entries, email), entry=email
        )

    async def update_email(
        self, table: str, record_id: str, index: int, email: EmailEntry
    ) -> ContactListResponse:
        return await self._apply(
            table,
            record_id,
            EmailEntry,
            "update",
            lambda entries: update_entry(entries, index, email),
            index=index,
            entry=email,
        )

    async def remove_email(self, table: str, record_id: str, index: int) -> ContactListResponse:
        return await self._apply(
            table, record_id, EmailEntry, "remove", lambda entries: remove_entry(entries, index), index=index
        )

    async def set_primary_email(self, table: str, record_id: str, index: int) -> ContactListResponse:
        return await self._apply(
            table,
            record_id,
            EmailEntry,
            "setPrimary",
            lambda entries: set_primary_entry(entries, index),
            index=index,
        )

    async def add_phone(self, table: str, record_id: str, phone: PhoneEntry) -> ContactListResponse:
        return await self._apply(
            table, record_id, PhoneEntry, "add", lambda entries: add_entry(entries, phone), entry=phone
        )

    async def update_phone(
        self, table: str, record_id: str, index: int, phone: PhoneEntry
    ) -> ContactListResponse:
        return await self._apply(
            table,
            record_id,
            PhoneEntry,
            "update",
            lambda entries: update_entry(entries, index, phone),
            index=index,
            entry=phone,
        )

    async def remove_phone(self, table: str, record_id: str, index: int) -> ContactListResponse:
        return await self._apply(
            table, record_id, PhoneEntry, "remove", lambda entries: remove_entry(entries, index), index=index
        )

    async def set_primary_phone(self, table: str, record_id: str, index: int) -> ContactListResponse:
        return await self._apply(
            table,
            record_id,
            PhoneEntry,
            "setPrimary",
            lambda entries: set_primary_entry(entries, index),
            index=index,
        )

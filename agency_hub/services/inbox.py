from __future__ import annotations

import asyncio
import logging
from typing import Dict, List

from agency_hub.clients.convex import ConvexClient
from agency_hub.schemas.inbox import InboxItem, InboxSource, UnifiedStatus
from agency_hub.services.exceptions import ServiceError
from agency_hub.services.store import (
    CONTACT_SUBMISSIONS,
    LEADS,
    PROJECT_REQUESTS,
    QUOTE_REQUESTS,
    Document,
    DocumentStore,
    resolve_store,
)

logger = logging.getLogger(__name__)

INBOX_TABLES: Dict[InboxSource, str] = {
    "contact": CONTACT_SUBMISSIONS,
    "request": PROJECT_REQUESTS,
    "quote": QUOTE_REQUESTS,
    "lead": LEADS,
}

STATUS_MAPS: Dict[InboxSource, Dict[str, UnifiedStatus]] = {
    "contact": {
        "new": "new",
        "read": "in_progress",
        "replied": "closed",
    },
    "request": {
        "new": "new",
        "contacted": "in_progress",
        "quoted": "in_progress",
        "accepted": "converted",
        "declined": "closed",
    },
    "quote": {
        "new": "new",
        "contacted": "in_progress",
        "quoted": "in_progress",
        "closed": "closed",
    },
    "lead": {
        "new": "new",
        "contacted": "in_progress",
        "qualified": "in_progress",
        "converted": "converted",
        "lost": "closed",
    },
}

NEW_STATUS = "new"


def map_status(source: InboxSource, status: str | None) -> UnifiedStatus:
    """Translate a source-native status into the shared inbox vocabulary."""

    unified = STATUS_MAPS[source].get(status or "")
    if unified is None:
        logger.warning("Unmapped %s status %r treated as closed", source, status)
        return "closed"
    return unified


def to_inbox_item(source: InboxSource, document: Document) -> InboxItem:
    return InboxItem(
        id=str(document.get("_id", "")),
        source=source,
        name=str(document.get("name") or ""),
        email=str(document.get("email") or ""),
        unified_status=map_status(source, document.get("status")),
        created_at=int(document.get("createdAt") or 0),
        source_data=document,
    )


class InboxService:
    """Merges the four lead-capture collections into one staff inbox."""

    def __init__(
        self,
        client: ConvexClient,
        *,
        store: DocumentStore | None = None,
    ) -> None:
        self._client = client
        self._store = resolve_store(client, store)

    async def _collect_sources(self) -> Dict[InboxSource, List[Document]]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
        sources = list(INBOX_TABLES)
        # A failure on any collection fails the whole read.
        results = await asyncio.gather(
            *(self._store.collect(INBOX_TABLES[source]) for source in sources)
        )
        return dict(zip(sources, results))

    async def get_inbox_items(self) -> List[InboxItem]:
        logger.info("Building inbox feed")
        try:
            documents = await self._collect_sources()
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while reading inbox sources")
            raise ServiceError("Failed to load inbox", cause=exc) from exc

        items = [
            to_inbox_item(source, document)
            for source, records in documents.items()
            for document in records
        ]
        items.sort(key=lambda item: item.created_at, reverse=True)
        logger.debug("Inbox feed contains %d items", len(items))
        return items

    async def get_inbox_new_count(self) -> int:
        try:
            documents = await self._collect_sources()
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while counting new inbox items")
            raise ServiceError("Failed to count inbox items", cause=exc) from exc

        return sum(
            1
            for records in documents.values()
            for document in records
            if document.get("status") == NEW_STATUS
        )

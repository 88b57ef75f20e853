"""Document store access for the agency collections.

Two implementations share one interface: an in-memory store used in mock
mode and during tests, and a Convex-backed store that forwards to the
deployment's document functions.
"""
from __future__ import annotations

import copy
import itertools
import logging
import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Dict, Iterator, List, Optional

from agency_hub.clients.convex import ConvexClient
from agency_hub.config import get_settings
from agency_hub.services.exceptions import RecordNotFoundError, ServiceError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
DocumentUpdate = Callable[[Document], Document]

CONTACT_SUBMISSIONS = "contactSubmissions"
PROJECT_REQUESTS = "projectRequests"
QUOTE_REQUESTS = "quoteRequests"
LEADS = "leads"
PROJECTS = "projects"

_ID_PREFIXES = {
    CONTACT_SUBMISSIONS: "CNT",
    PROJECT_REQUESTS: "REQ",
    QUOTE_REQUESTS: "QTE",
    LEADS: "LEAD",
    PROJECTS: "PRJ",
}

TABLES = tuple(_ID_PREFIXES)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ListEdit:
    """One operation on a document's ``emails`` or ``phones`` list.

    ``apply`` performs the edit on a document copy and returns the fields to
    patch. ``function`` and ``args`` name the deployment mutation that
    performs the same edit server-side.
    """

    list_field: str
    function: str
    args: Document
    apply: DocumentUpdate = field(compare=False, repr=False)


class DocumentStore:
    """Minimal document-store API the services are written against."""

    async def collect(self, table: str) -> List[Document]:
        raise NotImplementedError

    async def get(self, table: str, record_id: str) -> Optional[Document]:
        raise NotImplementedError

    async def insert(self, table: str, document: Document) -> str:
        raise NotImplementedError

    async def patch(self, table: str, record_id: str, fields: Document) -> None:
        raise NotImplementedError

    async def edit_list(self, table: str, record_id: str, edit: ListEdit) -> Document:
        """Apply one email/phone list edit to a document in a single write.

        The store must not let another write land between reading the list
        and writing the edited list. The patched document is returned.
        """

        raise NotImplementedError


class _TableRepository:
    def __init__(self, prefix: str) -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)
        self.documents: Dict[str, Document] = {}

    def _next_id(self) -> str:
        return f"{self._prefix}-{next(self._counter):05d}"

    def insert(self, document: Document) -> str:
        record_id = self._next_id()
        stored = copy.deepcopy(document)
        stored["_id"] = record_id
        self.documents[record_id] = stored
        return record_id


class InMemoryDocumentStore(DocumentStore):
    """Process-local store keyed by table name, preserving insertion order."""

    def __init__(self) -> None:
        self._tables = {table: _TableRepository(prefix) for table, prefix in _ID_PREFIXES.items()}
        self._lock = Lock()

    def _table(self, table: str) -> _TableRepository:
        try:
            return self._tables[table]
        except KeyError:
            raise ServiceError(f"Unknown collection {table!r}") from None

    def iter_tables(self) -> Iterator[tuple[str, List[Document]]]:
        for name, repository in self._tables.items():
            yield name, list(repository.documents.values())

    async def collect(self, table: str) -> List[Document]:
        repository = self._table(table)
        with self._lock:
            return [copy.deepcopy(document) for document in repository.documents.values()]

    async def get(self, table: str, record_id: str) -> Optional[Document]:
        repository = self._table(table)
        with self._lock:
            document = repository.documents.get(record_id)
            return copy.deepcopy(document) if document is not None else None

    async def insert(self, table: str, document: Document) -> str:
        repository = self._table(table)
        with self._lock:
            record_id = repository.insert(document)
        logger.debug("Inserted %s into %s", record_id, table)
        return record_id

    async def patch(self, table: str, record_id: str, fields: Document) -> None:
        repository = self._table(table)
        with self._lock:
            document = repository.documents.get(record_id)
            if document is None:
                raise RecordNotFoundError(table, record_id)
            document.update(copy.deepcopy(fields))

    async def transact(self, table: str, record_id: str, update: DocumentUpdate) -> Document:
        repository = self._table(table)
        with self._lock:
            document = repository.documents.get(record_id)
            if document is None:
                raise RecordNotFoundError(table, record_id)
            fields = update(copy.deepcopy(document))
            document.update(copy.deepcopy(fields))
            return copy.deepcopy(document)

    async def edit_list(self, table: str, record_id: str, edit: ListEdit) -> Document:
        return await self.transact(table, record_id, edit.apply)


class ConvexDocumentStore(DocumentStore):
    """Store backed by generic document functions deployed to Convex.

    The deployment is expected to expose ``<module>:collect``, ``<module>:get``,
    ``<module>:insert`` and ``<module>:patch``. List edits go to the
    ``emailManagement`` / ``phoneManagement`` mutations named by each
    :class:`ListEdit`. Each one must run the whole read-modify-write of one
    document and keep exactly one primary entry in a non-empty list.
    """

    def __init__(self, client: ConvexClient, *, module: str = "documents") -> None:
        self._client = client
        self._module = module

    def _path(self, name: str) -> str:
        return f"{self._module}:{name}"

    async def collect(self, table: str) -> List[Document]:
        documents = await self._client.query(self._path("collect"), {"table": table})
        return list(documents or [])

    async def get(self, table: str, record_id: str) -> Optional[Document]:
        return await self._client.query(self._path("get"), {"table": table, "id": record_id})

    async def insert(self, table: str, document: Document) -> str:
        record_id = await self._client.mutation(
            self._path("insert"), {"table": table, "document": document}
        )
        return str(record_id)

    async def patch(self, table: str, record_id: str, fields: Document) -> None:
        await self._client.mutation(
            self._path("patch"), {"table": table, "id": record_id, "fields": fields}
        )

    async def edit_list(self, table: str, record_id: str, edit: ListEdit) -> Document:
        # The mutation reads and patches inside one Convex transaction.
        await self._client.mutation(edit.function, {"table": table, "recordId": record_id, **edit.args})
        document = await self.get(table, record_id)
        if document is None:
            raise RecordNotFoundError(table, record_id)
        return document


_mock_store: Optional[InMemoryDocumentStore] = None


def get_mock_store() -> InMemoryDocumentStore:
    global _mock_store
    if _mock_store is None:
        _mock_store = InMemoryDocumentStore()
    return _mock_store


def reset_mock_store() -> None:
    global _mock_store
    _mock_store = None


def resolve_store(client: ConvexClient, store: DocumentStore | None = None) -> DocumentStore:
    """Pick the store a service should use for ``client``."""

    if store is not None:
        return store
    if client.use_mock_data:
        return get_mock_store()
    return ConvexDocumentStore(client, module=get_settings().convex_documents_module)

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from agency_hub.clients.convex import ConvexClient
from agency_hub.config import Settings, get_settings
from agency_hub.services import (
    ClientDirectoryService,
    ContactListService,
    InboxService,
    IntakeService,
)
from agency_hub.services.store import ConvexDocumentStore, DocumentStore, get_mock_store


@lru_cache(maxsize=1)
def get_convex_client_cached() -> ConvexClient:
    settings = get_settings()
    return ConvexClient(
        settings.convex_url,
        timeout=settings.convex_timeout,
        use_mock_data=settings.use_mock_data,
        token=settings.convex_deploy_key,
    )


def get_convex_client(settings: Settings = Depends(get_settings)) -> ConvexClient:
    return get_convex_client_cached()


def get_document_store(
    client: ConvexClient = Depends(get_convex_client),
    settings: Settings = Depends(get_settings),
) -> DocumentStore:
    if client.use_mock_data:
        return get_mock_store()
    return ConvexDocumentStore(client, module=settings.convex_documents_module)


def get_inbox_service(
    client: ConvexClient = Depends(get_convex_client),
    store: DocumentStore = Depends(get_document_store),
) -> InboxService:
    return InboxService(client, store=store)


def get_client_directory_service(
    client: ConvexClient = Depends(get_convex_client),
    store: DocumentStore = Depends(get_document_store),
) -> ClientDirectoryService:
    return ClientDirectoryService(client, store=store)


def get_contact_list_service(
    client: ConvexClient = Depends(get_convex_client),
    store: DocumentStore = Depends(get_document_store),
) -> ContactListService:
    return ContactListService(client, store=store)


def get_intake_service(
    client: ConvexClient = Depends(get_convex_client),
    store: DocumentStore = Depends(get_document_store),
) -> IntakeService:
    return IntakeService(client, store=store)

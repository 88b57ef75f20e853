"""Service package public API definitions.

Service implementations depend on ``agency_hub.clients.convex``, which in turn
imports ``agency_hub.services.exceptions``. Importing the implementations
eagerly here would make that a circular import, so they are resolved lazily
on first attribute access.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "ClientDirectoryService",
    "ContactListService",
    "InboxService",
    "IntakeService",
]

_SERVICE_MODULES = {
    "ClientDirectoryService": "clients",
    "ContactListService": "contact_lists",
    "InboxService": "inbox",
    "IntakeService": "submissions",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .clients import ClientDirectoryService as ClientDirectoryService
    from .contact_lists import ContactListService as ContactListService
    from .inbox import InboxService as InboxService
    from .submissions import IntakeService as IntakeService

"""Per-source adapters that turn raw documents into one client profile shape.

Each source kind stores the same client attributes under slightly different
field names. ``PROFILE_FIELD_MAP`` declares where every common attribute lives
for each kind so the consolidation code never branches on the kind itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from agency_hub.schemas.common import EmailEntry, PhoneEntry, PostalAddress
from agency_hub.services.store import (
    CONTACT_SUBMISSIONS,
    LEADS,
    PROJECT_REQUESTS,
    PROJECTS,
    Document,
)

logger = logging.getLogger(__name__)

SourceKind = Literal["project", "lead", "request", "contact"]

# Consolidation order: earlier kinds win first-non-empty ties.
KIND_TABLES: Dict[SourceKind, str] = {
    "project": PROJECTS,
    "lead": LEADS,
    "request": PROJECT_REQUESTS,
    "contact": CONTACT_SUBMISSIONS,
}

_COMMON_FIELDS: Dict[str, str] = {
    "company": "company",
    "website": "website",
    "address": "address",
    "tags": "tags",
    "preferred_contact": "preferredContact",
    "timezone": "timezone",
    "referral_source": "referralSource",
    "notes": "notes",
}

PROFILE_FIELD_MAP: Dict[SourceKind, Dict[str, str]] = {
    "project": {**_COMMON_FIELDS, "phone": "phone", "website": "socialLinks.website"},
    "lead": {**_COMMON_FIELDS, "phone": "phone", "referral_source": "source"},
    "request": {**_COMMON_FIELDS, "company": "businessName"},
    "contact": dict(_COMMON_FIELDS),
}

# Remapped attributes that are read for consolidation but never written back.
_READ_ONLY = {("project", "website"), ("lead", "referral_source")}

_PREFERRED_CONTACT_VALUES = {"email", "phone", "text"}

EntryT = TypeVar("EntryT", bound=BaseModel)


@dataclass
class ClientProfile:
    """Client attributes of one source document in the common shape."""

    kind: SourceKind
    record_id: str
    name: str
    email: str
    created_at: int
    emails: List[EmailEntry] = field(default_factory=list)
    phones: List[PhoneEntry] = field(default_factory=list)
    phone: Optional[str] = None
    company: Optional[str] = None
    website: Optional[str] = None
    address: Optional[PostalAddress] = None
    tags: Optional[List[str]] = None
    preferred_contact: Optional[str] = None
    timezone: Optional[str] = None
    referral_source: Optional[str] = None
    notes: Optional[str] = None


def _lookup(document: Mapping[str, Any], path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def parse_entries(raw: Any, model: Type[EntryT]) -> List[EntryT]:
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        return []
    entries: List[EntryT] = []
    for item in raw:
        try:
            entries.append(model.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed %s entry: %r", model.__name__, item)
    return entries


def _parse_address(raw: Any) -> Optional[PostalAddress]:
    if not isinstance(raw, Mapping):
        return None
    try:
        address = PostalAddress.model_validate(raw)
    except ValidationError:
        logger.warning("Skipping malformed address: %r", raw)
        return None
    # An address with no filled-in part counts as absent.
    if not any(address.model_dump().values()):
        return None
    return address


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def to_common_profile(kind: SourceKind, document: Document) -> ClientProfile:
    """Project ``document`` of the given kind onto :class:`ClientProfile`."""

    values = {attr: _lookup(document, path) for attr, path in PROFILE_FIELD_MAP[kind].items()}

    emails = parse_entries(document.get("emails"), EmailEntry)
    phones = parse_entries(document.get("phones"), PhoneEntry)

    phone = _text(values.get("phone"))
    if phone and all(entry.number != phone for entry in phones):
        has_primary = any(entry.is_primary for entry in phones)
        phones.append(PhoneEntry(number=phone, label="Primary", is_primary=not has_primary))

    tags = values.get("tags")
    preferred_contact = values.get("preferred_contact")
    if preferred_contact not in _PREFERRED_CONTACT_VALUES:
        preferred_contact = None

    return ClientProfile(
        kind=kind,
        record_id=str(document.get("_id", "")),
        name=str(document.get("name") or ""),
        email=str(document.get("email") or ""),
        created_at=int(document.get("createdAt") or 0),
        emails=emails,
        phones=phones,
        phone=phone,
        company=_text(values.get("company")),
        website=_text(values.get("website")),
        address=_parse_address(values.get("address")),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else None,
        preferred_contact=preferred_contact,
        timezone=_text(values.get("timezone")),
        referral_source=_text(values.get("referral_source")),
        notes=_text(values.get("notes")),
    )


def resolve_primary_email(profile: ClientProfile) -> str:
    """Return the grouping key: primary entry, else first entry, else legacy email."""

    primary = next((entry.address for entry in profile.emails if entry.is_primary), "")
    first = profile.emails[0].address if profile.emails else ""
    return primary or first or profile.email


def writable_field(kind: SourceKind, attribute: str) -> Optional[str]:
    """Document field that stores ``attribute`` for ``kind``, if it may be patched."""

    if (kind, attribute) in _READ_ONLY:
        return None
    path = PROFILE_FIELD_MAP[kind].get(attribute, _COMMON_FIELDS.get(attribute, attribute))
    if "." in path:
        return None
    return path

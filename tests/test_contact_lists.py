import asyncio

import pytest

from agency_hub.schemas.common import EmailEntry, PhoneEntry
from agency_hub.services.clients import ClientDirectoryService
from agency_hub.services.contact_lists import (
    ContactListService,
    add_entry,
    remove_entry,
    set_primary_entry,
    update_entry,
)
from agency_hub.services.exceptions import ContactListError, RecordNotFoundError


def _emails(*specs):
    return [EmailEntry(address=address, label="Work", is_primary=primary) for address, primary in specs]


def _primaries(entries):
    return [entry.address for entry in entries if entry.is_primary]


def test_removing_primary_promotes_first_remaining() -> None:
    entries = _emails(("a@x.com", True), ("b@x.com", False))

    remaining = remove_entry(entries, 0)

    assert len(remaining) == 1
    assert remaining[0].address == "b@x.com"
    assert remaining[0].is_primary is True


def test_removing_secondary_keeps_primary() -> None:
    entries = _emails(("a@x.com", False), ("b@x.com", True), ("c@x.com", False))

    remaining = remove_entry(entries, 2)

    assert _primaries(remaining) == ["b@x.com"]


def test_removing_last_entry_leaves_empty_list() -> None:
    assert remove_entry(_emails(("a@x.com", True)), 0) == []


def test_adding_primary_demotes_existing_primary() -> None:
    entries = _emails(("a@x.com", True))

    updated = add_entry(entries, EmailEntry(address="b@x.com", label="Home", is_primary=True))

    assert _primaries(updated) == ["b@x.com"]
    assert entries[0].is_primary is True


def test_first_added_entry_becomes_primary() -> None:
    updated = add_entry([], EmailEntry(address="a@x.com", label="Home", is_primary=False))

    assert _primaries(updated) == ["a@x.com"]


def test_adding_secondary_keeps_single_primary() -> None:
    updated = add_entry(_emails(("a@x.com", True)), EmailEntry(address="b@x.com", is_primary=False))

    assert _primaries(updated) == ["a@x.com"]


def test_update_can_move_primary_flag() -> None:
    entries = _emails(("a@x.com", True), ("b@x.com", False))

    updated = update_entry(entries, 1, EmailEntry(address="b2@x.com", label="Home", is_primary=True))

    assert _primaries(updated) == ["b2@x.com"]


def test_demoting_primary_hands_flag_to_another_entry() -> None:
    entries = _emails(("a@x.com", True), ("b@x.com", False))

    updated = update_entry(entries, 0, EmailEntry(address="a@x.com", label="Old", is_primary=False))

    assert _primaries(updated) == ["b@x.com"]


def test_demoting_only_entry_keeps_it_primary() -> None:
    updated = update_entry(_emails(("a@x.com", True)), 0, EmailEntry(address="z@x.com", is_primary=False))

    assert _primaries(updated) == ["z@x.com"]


def test_set_primary_clears_other_flags() -> None:
    phones = [
        PhoneEntry(number="1", label="Mobile", is_primary=True),
        PhoneEntry(number="2", label="Work", is_primary=False),
    ]

    updated = set_primary_entry(phones, 1)

    assert [phone.is_primary for phone in updated] == [False, True]


def test_lists_with_several_primaries_are_repaired() -> None:
    entries = _emails(("a@x.com", True), ("b@x.com", True))

    updated = add_entry(entries, EmailEntry(address="c@x.com", is_primary=False))

    assert _primaries(updated) == ["a@x.com"]


@pytest.mark.parametrize("index", [-1, 2])
def test_out_of_range_index_raises(index) -> None:
    entries = _emails(("a@x.com", True), ("b@x.com", False))

    with pytest.raises(ContactListError):
        remove_entry(entries, index)
    with pytest.raises(ContactListError):
        set_primary_entry(entries, index)


def test_service_edits_stored_email_list(client, store, seed) -> None:
    lead_id = seed(
        "leads",
        name="Jo",
        email="jo@x.com",
        emails=[
            {"address": "jo@x.com", "label": "Work", "isPrimary": True},
            {"address": "jo@home.com", "label": "Home", "isPrimary": False},
        ],
        createdAt=1,
    )
    service = ContactListService(client, store=store)

    response = asyncio.run(service.remove_email("leads", lead_id, 0))

    assert [entry.address for entry in response.emails] == ["jo@home.com"]
    assert response.emails[0].is_primary is True
    stored = asyncio.run(store.get("leads", lead_id))
    assert stored["emails"] == [{"address": "jo@home.com", "label": "Home", "isPrimary": True}]

    clients = asyncio.run(ClientDirectoryService(client, store=store).get_all_clients())
    assert clients[0].primary_email == "jo@home.com"


def test_service_adds_phone_to_record_without_list(client, store, seed) -> None:
    contact_id = seed("contactSubmissions", name="Jo", email="jo@x.com", createdAt=1)
    service = ContactListService(client, store=store)

    response = asyncio.run(
        service.add_phone("contactSubmissions", contact_id, PhoneEntry(number="555", label="Mobile"))
    )

    assert response.phones[0].is_primary is True
    assert response.emails is None


def test_service_rejects_missing_record(client, store) -> None:
    service = ContactListService(client, store=store)

    with pytest.raises(RecordNotFoundError):
        asyncio.run(service.set_primary_email("leads", "LEAD-99999", 0))


def test_service_rejects_tables_without_lists(client, store, seed) -> None:
    quote_id = seed("quoteRequests", name="Q", phone="1", createdAt=1)
    service = ContactListService(client, store=store)

    with pytest.raises(ContactListError):
        asyncio.run(service.add_email("quoteRequests", quote_id, EmailEntry(address="q@x.com")))


def test_service_leaves_record_untouched_on_bad_index(client, store, seed) -> None:
    lead_id = seed("leads", name="Jo", email="jo@x.com", emails=[{"address": "jo@x.com", "label": "Work", "isPrimary": True}], createdAt=1)
    service = ContactListService(client, store=store)

    with pytest.raises(ContactListError):
        asyncio.run(service.update_email("leads", lead_id, 3, EmailEntry(address="x@x.com")))

    stored = asyncio.run(store.get("leads", lead_id))
    assert stored["emails"] == [{"address": "jo@x.com", "label": "Work", "isPrimary": True}]


def test_service_refuses_to_drop_invalid_stored_entries(client, store, seed) -> None:
    stored_emails = [
        {"address": "a@x.com", "label": "Work", "isPrimary": True},
        {"label": "Home", "isPrimary": False},
    ]
    lead_id = seed("leads", name="Jo", email="a@x.com", emails=stored_emails, createdAt=1)
    service = ContactListService(client, store=store)

    with pytest.raises(ContactListError):
        asyncio.run(service.add_email("leads", lead_id, EmailEntry(address="c@x.com", label="Other")))

    stored = asyncio.run(store.get("leads", lead_id))
    assert stored["emails"] == stored_emails

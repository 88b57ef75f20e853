import asyncio

from agency_hub.schemas.clients import ClientInfoUpdate
from agency_hub.schemas.common import PhoneEntry
from agency_hub.services.clients import ClientDirectoryService
from agency_hub.services.inbox import InboxService


def _clients(client, store):
    return asyncio.run(ClientDirectoryService(client, store=store).get_all_clients())


def test_first_non_empty_value_wins_in_processing_order(client, store, seed) -> None:
    # Leads are stored first but projects are consolidated first.
    seed("leads", name="Jo", email="jo@x.com", company="Other Co", status="new", createdAt=200)
    seed("projects", name="Jo", email="jo@x.com", company="Acme", status="new", createdAt=100)

    clients = _clients(client, store)

    assert len(clients) == 1
    assert clients[0].company == "Acme"


def test_later_records_fill_only_empty_attributes(client, store, seed) -> None:
    seed("projects", name="Jo", email="jo@x.com", timezone="UTC", createdAt=1)
    seed("contactSubmissions", name="Jo", email="jo@x.com", timezone="EST", notes="Call after 5", tags=["vr"], createdAt=2)

    only = _clients(client, store)[0]

    assert only.timezone == "UTC"
    assert only.notes == "Call after 5"
    assert only.tags == ["vr"]


def test_phone_lists_union_without_duplicates(client, store, seed) -> None:
    seed(
        "projects",
        name="Jo",
        email="jo@x.com",
        phones=[{"number": "555-1111", "label": "Mobile", "isPrimary": True}],
        createdAt=1,
    )
    seed(
        "leads",
        name="Jo",
        email="jo@x.com",
        phones=[
            {"number": "555-1111", "label": "Work", "isPrimary": True},
            {"number": "555-2222", "label": "Home", "isPrimary": False},
        ],
        createdAt=2,
    )

    only = _clients(client, store)[0]

    assert [phone.number for phone in only.phones] == ["555-1111", "555-2222"]
    assert only.phones[0].label == "Mobile"


def test_legacy_phone_joins_phone_union(client, store, seed) -> None:
    seed("projects", name="Jo", email="jo@x.com", phone="555-1111", createdAt=1)
    seed(
        "leads",
        name="Jo",
        email="jo@x.com",
        phones=[
            {"number": "555-1111", "label": "Mobile", "isPrimary": True},
            {"number": "555-2222", "label": "Work", "isPrimary": False},
        ],
        createdAt=2,
    )

    only = _clients(client, store)[0]

    assert only.phone == "555-1111"
    assert len(only.phones) == 2


def test_email_lists_union_by_address(client, store, seed) -> None:
    seed(
        "projects",
        name="Jo",
        email="jo@x.com",
        emails=[{"address": "jo@x.com", "label": "Work", "isPrimary": True}],
        createdAt=1,
    )
    seed(
        "leads",
        name="Jo",
        email="jo@home.com",
        emails=[
            {"address": "jo@x.com", "label": "Primary", "isPrimary": True},
            {"address": "jo@home.com", "label": "Personal", "isPrimary": False},
        ],
        createdAt=2,
    )

    clients = _clients(client, store)

    assert len(clients) == 1
    assert [entry.address for entry in clients[0].emails] == ["jo@x.com", "jo@home.com"]


def test_lead_source_and_request_business_name_are_remapped(client, store, seed) -> None:
    seed("leads", name="Lee", email="lee@x.com", source="Referral", status="new", createdAt=1)
    seed("projectRequests", name="Ann", email="ann@x.com", businessName="Acme LLC", status="new", createdAt=2)

    by_email = {item.primary_email: item for item in _clients(client, store)}

    assert by_email["lee@x.com"].referral_source == "Referral"
    assert by_email["ann@x.com"].company == "Acme LLC"


def test_project_website_read_from_social_links(client, store, seed) -> None:
    seed("projects", name="Jo", email="jo@x.com", socialLinks={"website": "https://jo.dev"}, createdAt=1)

    assert _clients(client, store)[0].website == "https://jo.dev"


def test_empty_address_does_not_block_later_address(client, store, seed) -> None:
    seed("projects", name="Jo", email="jo@x.com", address={}, createdAt=1)
    seed("leads", name="Jo", email="jo@x.com", address={"street": "", "city": None}, createdAt=2)
    seed("contactSubmissions", name="Jo", email="jo@x.com", address={"city": "Austin"}, createdAt=3)

    only = _clients(client, store)[0]

    assert only.address is not None
    assert only.address.city == "Austin"


def test_malformed_address_is_skipped(client, store, seed) -> None:
    seed("leads", name="Jo", email="jo@x.com", address={"zip": 78701}, createdAt=1)
    seed("leads", name="Al", email="al@x.com", address={"city": "Austin"}, createdAt=2)
    seed("contactSubmissions", name="Jo", email="jo@x.com", address={"zip": "78701"}, createdAt=3)

    clients = {entry.primary_email: entry for entry in _clients(client, store)}

    assert clients["al@x.com"].address.city == "Austin"
    assert clients["jo@x.com"].address.zip == "78701"


def test_activity_tracking(client, store, seed) -> None:
    seed("leads", name="Jo", email="jo@x.com", createdAt=100)
    seed("projectRequests", name="Jo", email="jo@x.com", createdAt=500)
    contact_id = seed("contactSubmissions", name="Jo", email="jo@x.com", createdAt=300)

    only = _clients(client, store)[0]

    assert only.first_seen == 100
    assert only.last_activity == 500
    assert only.total_interactions == 3
    assert only.contact_ids == [contact_id]
    assert len(only.lead_ids) == 1 and len(only.request_ids) == 1
    assert only.project_ids == []


def test_clients_sorted_by_last_activity(client, store, seed) -> None:
    seed("leads", name="Old", email="old@x.com", createdAt=10)
    seed("leads", name="New", email="new@x.com", createdAt=30)
    seed("contactSubmissions", name="Mid", email="mid@x.com", createdAt=20)

    assert [item.name for item in _clients(client, store)] == ["New", "Mid", "Old"]


def test_primary_entry_overrides_legacy_email_as_key(client, store, seed) -> None:
    seed(
        "leads",
        name="Jo",
        email="legacy@x.com",
        emails=[
            {"address": "second@x.com", "label": "Work", "isPrimary": False},
            {"address": "main@x.com", "label": "Home", "isPrimary": True},
        ],
        createdAt=1,
    )
    seed("contactSubmissions", name="Jo", email="main@x.com", createdAt=2)

    clients = _clients(client, store)

    assert len(clients) == 1
    assert clients[0].primary_email == "main@x.com"
    assert clients[0].total_interactions == 2


def test_legacy_email_seeds_single_entry_list(client, store, seed) -> None:
    seed("contactSubmissions", name="Jo", email="jo@x.com", emails=[], createdAt=1)

    only = _clients(client, store)[0]

    assert len(only.emails) == 1
    assert only.emails[0].address == "jo@x.com"
    assert only.emails[0].is_primary is True


def test_keys_are_case_sensitive(client, store, seed) -> None:
    seed("leads", name="Jo", email="Jo@X.com", createdAt=1)
    seed("leads", name="Jo", email="jo@x.com", createdAt=2)

    assert len(_clients(client, store)) == 2


def test_blank_email_is_still_grouped(client, store, seed) -> None:
    seed("contactSubmissions", name="Anon", email="", createdAt=1)
    seed("projectRequests", name="Anon 2", createdAt=2)

    clients = _clients(client, store)

    assert len(clients) == 1
    assert clients[0].primary_email == ""
    assert clients[0].total_interactions == 2


def test_consolidation_does_not_mutate_stored_records(client, store, seed) -> None:
    lead_id = seed(
        "leads",
        name="Jo",
        email="jo@x.com",
        phones=[{"number": "1", "label": "Mobile", "isPrimary": True}],
        createdAt=1,
    )
    seed("contactSubmissions", name="Jo", email="jo@x.com", phones=[{"number": "2", "label": "Work", "isPrimary": True}], createdAt=2)

    _clients(client, store)
    stored = asyncio.run(store.get("leads", lead_id))

    assert stored["phones"] == [{"number": "1", "label": "Mobile", "isPrimary": True}]


def test_contact_and_lead_end_to_end(client, store, seed) -> None:
    seed("contactSubmissions", name="A", email="a@x.com", status="read", createdAt=10)
    lead_id = seed("leads", name="A", email="a@x.com", status="qualified", source="Website", createdAt=20)

    items = asyncio.run(InboxService(client, store=store).get_inbox_items())
    clients = _clients(client, store)

    assert [item.unified_status for item in items] == ["in_progress", "in_progress"]
    assert items[0].id == lead_id
    assert len(clients) == 1
    assert clients[0].primary_email == "a@x.com"
    assert clients[0].total_interactions == 2
    assert clients[0].referral_source == "Website"


def test_details_match_the_list_view_key(client, store, seed) -> None:
    lead_id = seed(
        "leads",
        name="Jo",
        email="legacy@x.com",
        emails=[{"address": "main@x.com", "label": "Work", "isPrimary": True}],
        createdAt=1,
    )
    contact_id = seed("contactSubmissions", name="Jo", email="main@x.com", createdAt=2)
    seed("contactSubmissions", name="Other", email="other@x.com", createdAt=3)
    seed("quoteRequests", name="Jo", email="main@x.com", phone="1", createdAt=4)

    service = ClientDirectoryService(client, store=store)
    details = asyncio.run(service.get_client_details("main@x.com"))

    assert [record["_id"] for record in details.leads] == [lead_id]
    assert [record["_id"] for record in details.contacts] == [contact_id]
    assert details.projects == [] and details.requests == []
    assert asyncio.run(service.get_client_details("MAIN@x.com")).contacts == []


def test_update_client_info_writes_through_field_map(client, store, seed) -> None:
    project_id = seed("projects", name="Jo", email="jo@x.com", createdAt=1)
    lead_id = seed("leads", name="Jo", email="jo@x.com", source="Website", createdAt=2)
    request_id = seed("projectRequests", name="Jo", email="jo@x.com", createdAt=3)
    other_id = seed("contactSubmissions", name="Sam", email="sam@x.com", createdAt=4)

    updates = ClientInfoUpdate(
        company="Acme",
        referral_source="Referral",
        phones=[PhoneEntry(number="555-1111", label="Mobile", is_primary=True)],
        name="",
    )
    service = ClientDirectoryService(client, store=store)
    result = asyncio.run(service.update_client_info("jo@x.com", updates))

    assert result.updated == {"projects": 1, "leads": 1, "requests": 1, "contacts": 0}
    project = asyncio.run(store.get("projects", project_id))
    lead = asyncio.run(store.get("leads", lead_id))
    request = asyncio.run(store.get("projectRequests", request_id))
    other = asyncio.run(store.get("contactSubmissions", other_id))

    assert project["company"] == "Acme"
    assert project["referralSource"] == "Referral"
    assert "updatedAt" in project
    assert lead["company"] == "Acme"
    assert lead["source"] == "Website"
    assert "referralSource" not in lead
    assert request["businessName"] == "Acme"
    assert "company" not in request
    assert request["phones"] == [{"number": "555-1111", "label": "Mobile", "isPrimary": True}]
    assert request["name"] == "Jo"
    assert "company" not in other

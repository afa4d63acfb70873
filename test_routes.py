import json

import pytest
from fastapi.testclient import TestClient

from app.store import ContactStore
from main import app, get_store


@pytest.fixture
def store(tmp_path):
    return ContactStore(tmp_path / "contacts.json")


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_list_contacts_empty(client):
    response = client.get("/api/contacts")
    assert response.status_code == 200
    assert response.json() == []


def test_list_contacts_malformed_file(client, store):
    store.path.write_text("[{broken", encoding="utf-8")

    response = client.get("/api/contacts")
    assert response.status_code == 200
    assert response.json() == []


def test_create_contact_normalizes_phone(client):
    response = client.post("/api/contacts", json={"firstName": "Juan", "lastName": "Perez", "phone": "809-123-4567"})
    assert response.status_code == 201
    assert response.json() == {"message": "Contact added successfully"}

    contacts = client.get("/api/contacts").json()
    assert len(contacts) == 1
    assert contacts[0]["firstName"] == "Juan"
    assert contacts[0]["lastName"] == "Perez"
    assert contacts[0]["phone"] == "8091234567"
    assert contacts[0]["id"]


def test_create_contact_missing_first_name(client):
    response = client.post("/api/contacts", json={"firstName": "", "lastName": "Perez", "phone": "8091234567"})
    assert response.status_code == 400
    assert "First name is required" in response.json()["message"]
    assert response.json()["errors"] == ["First name is required"]

    assert client.get("/api/contacts").json() == []


@pytest.mark.parametrize("payload", [
    {"lastName": "Perez", "phone": "8091234567"},
    {"firstName": "Juan", "phone": "8091234567"},
    {"firstName": "Juan", "lastName": "Perez"},
    {"firstName": "Juan", "lastName": "Perez", "phone": "12"},
    {"firstName": "Juan", "lastName": "Perez", "phone": 8091234567},
    {"firstName": "Juan", "lastName": "Perez", "phone": "8091234567", "email": "juan@example.com"},
])
def test_create_contact_invalid_has_no_side_effect(client, store, payload):
    response = client.post("/api/contacts", json=payload)
    assert response.status_code == 400
    assert response.json()["message"]
    assert not store.path.exists()


def test_create_contact_invalid_json(client):
    response = client.post("/api/contacts", content="not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert "message" in response.json()


def test_create_contacts_in_sequence(client):
    client.post("/api/contacts", json={"firstName": "Juan", "lastName": "Perez", "phone": "8091234567"})
    client.post("/api/contacts", json={"firstName": "Ana", "lastName": "Gomez", "phone": "8297654321"})

    contacts = client.get("/api/contacts").json()
    assert [c["firstName"] for c in contacts] == ["Juan", "Ana"]
    assert contacts[0]["id"] != contacts[1]["id"]


def test_search_contacts(client):
    client.post("/api/contacts", json={"firstName": "Juan", "lastName": "Perez", "phone": "8091234567"})
    client.post("/api/contacts", json={"firstName": "Ana", "lastName": "Gomez", "phone": "8297654321"})

    response = client.get("/api/contacts/search", params={"query": "gom"})
    assert response.status_code == 200
    assert [c["firstName"] for c in response.json()] == ["Ana"]


def test_store_read_failure_is_generic(tmp_path):
    # A directory in place of the document makes every read fail
    app.dependency_overrides[get_store] = lambda: ContactStore(tmp_path)
    try:
        client = TestClient(app)

        response = client.get("/api/contacts")
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error while reading contacts."}

        response = client.post("/api/contacts", json={"firstName": "Juan", "lastName": "Perez", "phone": "8091234567"})
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error while adding contact."}
    finally:
        app.dependency_overrides.clear()


def test_store_write_failure_is_generic(client, store, monkeypatch):
    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("app.store.os.replace", fail_replace)

    response = client.post("/api/contacts", json={"firstName": "Juan", "lastName": "Perez", "phone": "8091234567"})
    assert response.status_code == 500
    assert "disk full" not in response.json()["message"]


def test_unknown_route(client):
    response = client.get("/api/unknown")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


def test_list_contacts_returns_stored_records_unchanged(client, store):
    records = [
        {"id": 1700000000000, "firstName": "Ana", "lastName": "Gomez", "phone": "8297654321", "note": "x"},
        {"firstName": "Luis"},
        "not a contact",
    ]
    store.path.write_text(json.dumps(records), encoding="utf-8")

    response = client.get("/api/contacts")
    assert response.status_code == 200
    assert response.json() == records

    response = client.get("/api/contacts/search", params={"query": "ana"})
    assert response.status_code == 200
    assert response.json() == [records[0]]

"""API tests over a temporary SQLite database."""

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from phonebook.config import AppSettings, DatabaseConfig


@pytest.fixture
def client(tmp_path):
    settings = AppSettings(
        database=DatabaseConfig(adapter="sqlite", sqlite_path=str(tmp_path / "api.db")),
        phone_default_region="US",
    )
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def _create(client, **overrides):
    body = {"first_name": "John", "last_name": "Doe", "phone_number": "(202) 555-1234"}
    body.update(overrides)
    return client.post("/api/contacts", json=body)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_create_contact(client):
    r = _create(client, email="john@example.com")
    assert r.status_code == 201
    data = r.json()
    assert data["id"]
    assert data["phone_number"] == "2025551234"
    assert data["display_phone"] == "(202) 555-1234"
    assert data["phone_e164"] == "+12025551234"
    assert data["full_name"] == "John Doe"
    assert data["email"] == "john@example.com"
    assert data["created_at"] == data["updated_at"]


@pytest.mark.parametrize(
    "overrides",
    [{"first_name": ""}, {"last_name": "  "}, {"phone_number": "12"}],
)
def test_create_invalid_returns_400(client, overrides):
    r = _create(client, **overrides)
    assert r.status_code == 400
    assert r.json()["detail"]


def test_create_missing_field_returns_422(client):
    r = client.post("/api/contacts", json={"first_name": "John"})
    assert r.status_code == 422


def test_create_duplicate_phone_returns_400(client):
    assert _create(client).status_code == 201
    r = _create(client, first_name="Other", phone_number="202-555-1234")
    assert r.status_code == 400
    assert "already exists" in r.json()["detail"]
    assert client.get("/api/contacts").json()["total"] == 1


def test_get_contact(client):
    created = _create(client).json()
    r = client.get(f"/api/contacts/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created


def test_get_unknown_returns_404(client):
    r = client.get("/api/contacts/missing")
    assert r.status_code == 404
    assert r.json() == {"detail": "Contact not found"}


def test_list_and_search(client):
    _create(client, first_name="John", last_name="Doe", phone_number="1111111111")
    _create(client, first_name="alice", last_name="Johnson", phone_number="2222222222")
    _create(client, first_name="Bob", last_name="Ray", phone_number="3333333333")

    everything = client.get("/api/contacts").json()
    assert [c["first_name"] for c in everything["contacts"]] == ["alice", "Bob", "John"]
    assert everything["total"] == 3

    found = client.get("/api/contacts", params={"q": "JOHN"}).json()
    assert [c["first_name"] for c in found["contacts"]] == ["alice", "John"]
    assert found["total"] == 3


def test_update_contact(client):
    created = _create(client).json()
    r = client.put(f"/api/contacts/{created['id']}", json={"last_name": "Smith", "notes": "VIP"})
    assert r.status_code == 200
    data = r.json()
    assert data["last_name"] == "Smith"
    assert data["notes"] == "VIP"
    assert data["first_name"] == "John"
    assert data["created_at"] == created["created_at"]


def test_update_unknown_returns_404(client):
    r = client.put("/api/contacts/missing", json={"first_name": "X"})
    assert r.status_code == 404


def test_update_duplicate_phone_returns_400(client):
    _create(client, phone_number="1111111111")
    other = _create(client, first_name="Jane", phone_number="2222222222").json()
    r = client.put(f"/api/contacts/{other['id']}", json={"phone_number": "111-111-1111"})
    assert r.status_code == 400


def test_update_own_phone_is_allowed(client):
    created = _create(client).json()
    r = client.put(f"/api/contacts/{created['id']}", json={"phone_number": "202 555 1234"})
    assert r.status_code == 200
    assert r.json()["phone_number"] == "2025551234"


def test_delete_contact(client):
    created = _create(client).json()
    r = client.delete(f"/api/contacts/{created['id']}")
    assert r.status_code == 204
    assert client.get(f"/api/contacts/{created['id']}").status_code == 404


def test_delete_unknown_returns_404(client):
    _create(client)
    r = client.delete("/api/contacts/missing")
    assert r.status_code == 404
    assert client.get("/api/contacts").json()["total"] == 1


class _UnreachableStorage:
    def get_item(self, key):
        raise OSError("connection refused")

    def set_item(self, key, value):
        raise OSError("connection refused")

    def remove_item(self, key):
        raise OSError("connection refused")


def test_storage_failure_returns_500(client):
    from phonebook.application import ContactService
    from phonebook.infrastructure import LocalStorageContactRepository

    client.app.state.service = ContactService(
        LocalStorageContactRepository(_UnreachableStorage())
    )
    r = client.get("/api/contacts")
    assert r.status_code == 500
    assert r.json() == {"detail": "Storage unavailable"}
    assert _create(client).status_code == 500


def test_list_renders_stored_numbers_that_no_longer_validate(client):
    import json

    from phonebook.application import ContactService
    from phonebook.infrastructure import (
        STORAGE_KEY,
        LocalStorageContactRepository,
        MemoryStorage,
    )

    storage = MemoryStorage(
        {
            STORAGE_KEY: json.dumps(
                [
                    {
                        "id": "1",
                        "firstName": "John",
                        "lastName": "Doe",
                        "phoneNumber": "12345",
                        "createdAt": "2024-01-01T00:00:00.000Z",
                        "updatedAt": "2024-01-01T00:00:00.000Z",
                    }
                ]
            )
        }
    )
    client.app.state.service = ContactService(LocalStorageContactRepository(storage))

    r = client.get("/api/contacts")
    assert r.status_code == 200
    (record,) = r.json()["contacts"]
    assert record["display_phone"] == "12345"
    assert record["phone_e164"] is None

"""
Tests for gift ledger endpoints.
"""
import pytest
from sqlalchemy import text
from sqlalchemy.orm import Query

from app.models.event import Event
from app.models.gift import Gift
from app.services.audit_service import AuditLog


def add_gift(client, headers, **gift):
    response = client.post("/api/gifts", json=gift, headers=headers)
    assert response.status_code == 200, response.text
    return response


def list_gifts(client, headers):
    response = client.get("/api/gifts", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.mark.parametrize("method, path", [
    ("get", "/api/gifts"),
    ("post", "/api/gifts"),
    ("post", "/api/gifts/clear"),
    ("delete", "/api/gifts/1"),
])
def test_endpoints_require_token(client, method, path):
    response = client.request(method.upper(), path)
    assert response.status_code == 401
    assert response.json()["code"] == -1


def test_create_gift(client, login, test_settings):
    """Test gift creation with defaults."""
    headers, _ = login()

    response = add_gift(client, headers, name="Bob", amount=100)
    assert response.json() == {"code": 0, "message": "Added successfully"}

    gifts = list_gifts(client, headers)
    assert len(gifts) == 1
    assert gifts[0]["name"] == "Bob"
    assert gifts[0]["amount"] == 100
    assert gifts[0]["type"] == test_settings.DEFAULT_GIFT_TYPE
    assert gifts[0]["remark"] == ""
    assert gifts[0]["created_at"]


def test_create_gift_with_type_and_remark(client, login):
    headers, _ = login()

    add_gift(client, headers, name="Carol", amount="88.50", type="transfer", remark="college friend")

    gift = list_gifts(client, headers)[0]
    assert gift["amount"] == 88.5
    assert gift["type"] == "transfer"
    assert gift["remark"] == "college friend"


@pytest.mark.parametrize("payload", [
    {"amount": 100},
    {"name": "", "amount": 100},
    {"name": "Bob"},
    {"name": "Bob", "amount": None},
    {"name": "Bob", "amount": ""},
])
def test_create_gift_requires_name_and_amount(client, login, db, payload):
    headers, _ = login()

    response = client.post("/api/gifts", json=payload, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"code": -1, "message": "Name and amount are required"}
    assert db.query(Gift).count() == 0


def test_create_gift_non_numeric_amount(client, login):
    headers, _ = login()

    response = client.post("/api/gifts", json={"name": "Bob", "amount": "a lot"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["code"] == -1


def test_list_gifts_newest_first(client, login):
    headers, _ = login()
    for name in ("first", "second", "third"):
        add_gift(client, headers, name=name, amount=10)

    names = [gift["name"] for gift in list_gifts(client, headers)]
    assert names == ["third", "second", "first"]


def test_list_gifts_is_per_user(client, login):
    alice, _ = login("alice", "secret1")
    bob, _ = login("bob", "secret1")
    add_gift(client, alice, name="from alice's guest", amount=10)

    assert list_gifts(client, bob) == []
    assert len(list_gifts(client, alice)) == 1


def test_default_event_created_once(client, login, db, test_settings):
    headers, user_id = login()

    list_gifts(client, headers)
    list_gifts(client, headers)
    add_gift(client, headers, name="Bob", amount=100)

    events = db.query(Event).filter(Event.user_id == user_id).all()
    assert len(events) == 1
    assert events[0].title == test_settings.DEFAULT_EVENT_TITLE


def test_delete_gift(client, login):
    """Test gift deletion."""
    headers, _ = login()
    add_gift(client, headers, name="Bob", amount=100)
    gift_id = list_gifts(client, headers)[0]["id"]

    response = client.delete(f"/api/gifts/{gift_id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["code"] == 0
    assert list_gifts(client, headers) == []


def test_delete_unknown_gift(client, login):
    headers, _ = login()

    response = client.delete("/api/gifts/9999", headers=headers)
    assert response.status_code == 404
    assert response.json() == {"code": -1, "message": "Record not found"}


def test_delete_gift_removed_after_ownership_check(client, login, db, monkeypatch):
    headers, user_id = login()
    add_gift(client, headers, name="Bob", amount=100)
    gift_id = list_gifts(client, headers)[0]["id"]

    # Another request deletes the row between the ownership read and our delete
    monkeypatch.setattr(Query, "delete", lambda self, synchronize_session="auto": 0)

    response = client.delete(f"/api/gifts/{gift_id}", headers=headers)
    assert response.status_code == 404
    assert response.json() == {"code": -1, "message": "Record not found"}

    entries = AuditLog(db).entries(user_id)
    assert [entry.action for entry in entries] == ["Added gift record: Bob - 100"]


def test_delete_unparseable_gift_id(client, login):
    headers, _ = login()

    response = client.delete("/api/gifts/abc", headers=headers)
    assert response.status_code == 404
    assert response.json() == {"code": -1, "message": "Record not found"}


def test_delete_someone_elses_gift(client, login):
    alice, _ = login("alice", "secret1")
    bob, _ = login("bob", "secret1")
    add_gift(client, bob, name="for bob", amount=50)
    gift_id = list_gifts(client, bob)[0]["id"]

    response = client.delete(f"/api/gifts/{gift_id}", headers=alice)
    assert response.status_code == 403
    assert response.json()["code"] == -1

    assert [gift["id"] for gift in list_gifts(client, bob)] == [gift_id]


def test_clear_gifts(client, login):
    headers, _ = login()
    add_gift(client, headers, name="Bob", amount=100)
    add_gift(client, headers, name="Carol", amount=200)

    response = client.post("/api/gifts/clear", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"code": 0, "message": "Cleared successfully"}
    assert list_gifts(client, headers) == []

    again = client.post("/api/gifts/clear", headers=headers)
    assert again.status_code == 400
    assert again.json() == {"code": -1, "message": "Ledger is already empty"}


def test_clear_before_any_ledger_access(client, login, db, test_settings):
    headers, user_id = login()

    response = client.post("/api/gifts/clear", headers=headers)
    assert response.status_code == 400
    assert response.json() == {"code": -1, "message": "No records to clear"}
    # Clearing never creates the default event
    assert db.query(Event).filter(Event.user_id == user_id).count() == 0


def test_clear_leaves_other_users_alone(client, login):
    alice, _ = login("alice", "secret1")
    bob, _ = login("bob", "secret1")
    add_gift(client, alice, name="a", amount=1)
    add_gift(client, bob, name="b", amount=2)

    client.post("/api/gifts/clear", headers=alice)

    assert [gift["name"] for gift in list_gifts(client, bob)] == ["b"]


def test_every_mutation_is_logged(client, login, db):
    headers, user_id = login()
    add_gift(client, headers, name="Bob", amount=100)
    add_gift(client, headers, name="Carol", amount=200)
    gift_id = list_gifts(client, headers)[0]["id"]
    client.delete(f"/api/gifts/{gift_id}", headers=headers)
    client.post("/api/gifts/clear", headers=headers)

    event = db.query(Event).filter(Event.user_id == user_id).one()
    entries = AuditLog(db).entries(user_id)

    assert len(entries) == 4
    assert all(entry.event_id == event.id for entry in entries)
    assert entries[0].action == "Added gift record: Bob - 100"
    assert entries[2].action == f"Deleted gift record ID: {gift_id}"
    assert entries[3].action == "Cleared all gift records (1)"


def test_failed_mutations_are_not_logged(client, login, db):
    alice, alice_id = login("alice", "secret1")
    bob, _ = login("bob", "secret1")
    add_gift(client, bob, name="for bob", amount=50)
    gift_id = list_gifts(client, bob)[0]["id"]

    client.delete(f"/api/gifts/{gift_id}", headers=alice)
    client.delete("/api/gifts/9999", headers=alice)
    client.post("/api/gifts/clear", headers=alice)
    client.post("/api/gifts", json={"name": "no amount"}, headers=alice)

    assert AuditLog(db).entries(alice_id) == []


def test_storage_failure_envelope(client, login, app):
    headers, _ = login()
    with app.state.engine.begin() as conn:
        conn.execute(text("DROP TABLE gifts"))

    response = client.get("/api/gifts", headers=headers)
    assert response.status_code == 500
    body = response.json()
    assert body["code"] == -1
    assert body["message"].startswith("Server error:")

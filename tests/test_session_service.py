from __future__ import annotations

from expense_client.services.session_service import TOKEN_KEY, SessionManager


def test_storage_roundtrip(storage):
    assert storage.get_item("theme") is None
    storage.set_item("theme", "dark")
    storage.set_item("theme", "light")
    assert storage.get_item("theme") == "light"
    storage.remove_item("theme")
    storage.remove_item("theme")
    assert storage.get_item("theme") is None


def test_token_survives_a_new_manager(storage):
    SessionManager(storage).set("abc")
    restored = SessionManager(storage)
    assert restored.get() == "abc"
    assert restored.is_active
    assert storage.get_item(TOKEN_KEY) == "abc"


def test_clear_notifies_only_when_a_session_existed(session):
    reasons = []
    session.subscribe(reasons.append)
    session.subscribe(reasons.append)

    session.clear()
    assert reasons == []

    session.set("abc")
    session.clear(reason="unauthorized")
    session.clear(reason="unauthorized")
    assert reasons == ["unauthorized"]
    assert not session.is_active


def test_unsubscribe(session):
    reasons = []
    session.subscribe(reasons.append)
    session.unsubscribe(reasons.append)
    session.set("abc")
    session.clear()
    assert reasons == []

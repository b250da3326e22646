"""Tests for the Flask JSON API."""

import pytest

from keypad_calc.webapp import app, sessions


@pytest.fixture
def client():
    app.config["TESTING"] = True
    sessions.clear_sessions()
    with app.test_client() as c:
        yield c
    sessions.clear_sessions()
    sessions.configure(1000)


@pytest.fixture
def session_id(client):
    resp = client.post("/api/sessions")
    assert resp.status_code == 201
    return resp.get_json()["session_id"]


def _command(client, session_id, action, value=None):
    payload = {"action": action}
    if value is not None:
        payload["value"] = value
    return client.post(f"/api/sessions/{session_id}/commands", json=payload)


def _key(client, session_id, key):
    return client.post(f"/api/sessions/{session_id}/keys", json={"key": key})


def test_index_page(client):
    """The keypad page renders."""
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"calc-grid" in resp.data


def test_new_session_starts_at_zero(client):
    """A new session starts at 0."""
    data = client.post("/api/sessions").get_json()
    assert data["state"]["display"] == "0"
    assert data["state"]["expression"] == ""
    assert data["state"]["error"] is False
    assert data["created_at"]


def test_commands_chain(client, session_id):
    """Commands chain left to right over the API."""
    _command(client, session_id, "digit", "5")
    _command(client, session_id, "operator", "+")
    _command(client, session_id, "digit", "3")
    data = _command(client, session_id, "operator", "×").get_json()
    assert data["state"]["display"] == "8"
    assert data["state"]["expression"] == "8 ×"

    _command(client, session_id, "digit", "2")
    data = _command(client, session_id, "equals").get_json()
    assert data["state"]["display"] == "16"
    assert data["state"]["expression"] == ""


def test_division_by_zero_and_recovery(client, session_id):
    """Division by zero shows Error and a digit recovers."""
    for key in ["7", "/", "0", "Enter"]:
        resp = _key(client, session_id, key)
    state = resp.get_json()["state"]
    assert state["display"] == "Error"
    assert state["error"] is True
    assert state["operator"] is None

    state = _key(client, session_id, "4").get_json()["state"]
    assert state["display"] == "4"
    assert state["error"] is False


def test_unmapped_key_is_ignored(client, session_id):
    """Unmapped keys return the unchanged state."""
    _key(client, session_id, "9")
    resp = _key(client, session_id, "Shift")
    assert resp.status_code == 200
    assert resp.get_json()["state"]["display"] == "9"


def test_get_session(client, session_id):
    """GET returns the current state."""
    _command(client, session_id, "digit", "4")
    _command(client, session_id, "decimal")
    _command(client, session_id, "digit", "2")
    data = client.get(f"/api/sessions/{session_id}").get_json()
    assert data["session_id"] == session_id
    assert data["state"]["display"] == "4.2"


def test_sessions_are_independent(client, session_id):
    """Sessions do not share state."""
    other = client.post("/api/sessions").get_json()["session_id"]
    _command(client, session_id, "digit", "8")
    assert client.get(f"/api/sessions/{other}").get_json()["state"]["display"] == "0"


def test_reset(client, session_id):
    """Reset clears the session."""
    _command(client, session_id, "digit", "8")
    _command(client, session_id, "operator", "-")
    data = client.post(f"/api/sessions/{session_id}/reset").get_json()
    assert data["state"]["display"] == "0"
    assert data["state"]["previous_value"] is None


def test_delete_session(client, session_id):
    """Deleted sessions are gone."""
    assert client.delete(f"/api/sessions/{session_id}").status_code == 200
    assert client.get(f"/api/sessions/{session_id}").status_code == 404
    assert client.delete(f"/api/sessions/{session_id}").status_code == 404


def test_unknown_session(client):
    """Unknown sessions answer 404."""
    assert client.get("/api/sessions/nope").status_code == 404
    assert _command(client, "nope", "digit", "1").status_code == 404
    assert _key(client, "nope", "1").status_code == 404
    assert client.post("/api/sessions/nope/reset").status_code == 404


def test_bad_requests(client, session_id):
    """Malformed requests answer 400 and leave the state alone."""
    resp = _command(client, session_id, "sqrt")
    assert resp.status_code == 400
    assert "Unknown action" in resp.get_json()["error"]

    assert _command(client, session_id, "digit", "12").status_code == 400
    assert _command(client, session_id, "operator", "^").status_code == 400
    assert client.post(f"/api/sessions/{session_id}/commands").status_code == 400
    assert client.post(f"/api/sessions/{session_id}/commands", json={}).status_code == 400
    assert client.post(f"/api/sessions/{session_id}/keys", json={"key": ""}).status_code == 400

    # rejected requests leave the state alone
    assert client.get(f"/api/sessions/{session_id}").get_json()["state"]["display"] == "0"


def test_oldest_session_is_evicted(client):
    """The oldest session is evicted at the cap."""
    sessions.configure(2)
    first = client.post("/api/sessions").get_json()["session_id"]
    second = client.post("/api/sessions").get_json()["session_id"]
    third = client.post("/api/sessions").get_json()["session_id"]

    assert client.get(f"/api/sessions/{first}").status_code == 404
    assert client.get(f"/api/sessions/{second}").status_code == 200
    assert client.get(f"/api/sessions/{third}").status_code == 200
    assert len(sessions.list_sessions()) == 2


def test_evicted_session_reports_error_for_page_recovery(client):
    """An evicted session answers 404 with an error and the page opens a new one."""
    sessions.configure(1)
    first = client.post("/api/sessions").get_json()["session_id"]
    client.post("/api/sessions")

    resp = _command(client, first, "digit", "1")
    assert resp.status_code == 404
    data = resp.get_json()
    assert "error" in data
    assert "state" not in data

    page = client.get("/").data
    assert b"reply.status === 404" in page
    assert b"await start()" in page

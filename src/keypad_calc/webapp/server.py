"""
Flask server for the calculator web UI.

Serves the keypad page and a JSON API that feeds commands and key presses
into per-session calculator state.
"""

from flask import Flask, jsonify, render_template, request

from ..commands import CommandError, command_from_payload
from . import sessions

app = Flask(__name__)


def _session_not_found():
    return jsonify({"error": "Session not found"}), 404


@app.route("/")
def index():
    """Render the calculator keypad."""
    return render_template("index.html")


@app.route("/api/sessions", methods=["POST"])
def create_session():
    """
    Create a new calculator session.

    Returns:
        {
            "session_id": "...",
            "created_at": "...",
            "state": {"display": "0", "expression": "", ...}
        }
    """
    return jsonify(sessions.create_session()), 201


@app.route("/api/sessions/<session_id>", methods=["GET"])
def get_session(session_id: str):
    """Get the current display and pending expression of a session."""
    info = sessions.get_session(session_id)

    if not info:
        return _session_not_found()

    return jsonify(info)


@app.route("/api/sessions/<session_id>", methods=["DELETE"])
def delete_session(session_id: str):
    if not sessions.delete_session(session_id):
        return _session_not_found()
    return jsonify({"ok": True})


@app.route("/api/sessions/<session_id>/commands", methods=["POST"])
def apply_command(session_id: str):
    """
    Apply a calculator command.

    Expected JSON payload:
        {
            "action": "digit|decimal|operator|equals|clear|backspace|toggle_sign|percent",
            "value": "..."  // digit or operator symbol, when needed
        }

    Returns:
        Session info with the updated state
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not data:
        return jsonify({"error": "No JSON data provided"}), 400

    action = data.get("action")
    if not isinstance(action, str) or not action:
        return jsonify({"error": "action is required"}), 400

    try:
        command = command_from_payload(action, data.get("value"))
    except CommandError as e:
        return jsonify({"error": str(e)}), 400

    info = sessions.apply_to_session(session_id, command)
    if not info:
        return _session_not_found()

    return jsonify(info)


@app.route("/api/sessions/<session_id>/keys", methods=["POST"])
def press_key(session_id: str):
    """
    Apply a keyboard key, e.g. {"key": "Enter"}.

    Keys without a keypad meaning are ignored and return the unchanged state.
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not data:
        return jsonify({"error": "No JSON data provided"}), 400

    key = data.get("key")
    if not isinstance(key, str) or not key:
        return jsonify({"error": "key is required"}), 400

    info = sessions.press_key(session_id, key)
    if not info:
        return _session_not_found()

    return jsonify(info)


@app.route("/api/sessions/<session_id>/reset", methods=["POST"])
def reset_session(session_id: str):
    """Reset a session to the initial state."""
    info = sessions.press_key(session_id, "Escape")
    if not info:
        return _session_not_found()
    return jsonify(info)

"""
In-memory session registry for the calculator web UI.

Each session owns one Evaluator. All reads and transitions go through a
single lock so concurrent requests for a session are applied one at a time.
"""

import logging
import threading
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, List, Optional, TypedDict

from ..commands import Command
from ..evaluator import Evaluator

logger = logging.getLogger(__name__)


class SessionInfo(TypedDict):
    """Session state information."""
    session_id: str
    created_at: str
    state: Dict


# In-memory session storage, oldest first
_sessions: "OrderedDict[str, Evaluator]" = OrderedDict()
_created: Dict[str, str] = {}
_sessions_lock = threading.Lock()
_max_sessions = 1000


def configure(max_sessions: int) -> None:
    """Set the session cap; existing sessions over the cap are evicted."""
    global _max_sessions

    with _sessions_lock:
        _max_sessions = max_sessions
        _evict_locked()


def _evict_locked() -> None:
    while len(_sessions) > _max_sessions:
        session_id, _ = _sessions.popitem(last=False)
        _created.pop(session_id, None)
        logger.info("Evicted calculator session %s", session_id)


def _info(session_id: str) -> SessionInfo:
    return SessionInfo(
        session_id=session_id,
        created_at=_created[session_id],
        state=_sessions[session_id].state.to_dict(),
    )


def create_session() -> SessionInfo:
    """
    Create a new calculator session in the initial state.

    Returns:
        Session info including the new session ID
    """
    session_id = str(uuid.uuid4())

    with _sessions_lock:
        _sessions[session_id] = Evaluator()
        _created[session_id] = datetime.now(timezone.utc).isoformat()
        _evict_locked()
        info = _info(session_id)

    logger.info("Created calculator session %s", session_id)
    return info


def get_session(session_id: str) -> Optional[SessionInfo]:
    """
    Get the current state of a session.

    Args:
        session_id: Session identifier

    Returns:
        Session info or None if not found
    """
    with _sessions_lock:
        if session_id not in _sessions:
            return None
        return _info(session_id)


def apply_to_session(session_id: str, command: Command) -> Optional[SessionInfo]:
    """
    Apply one command to a session.

    Args:
        session_id: Session identifier
        command: Command to apply

    Returns:
        Updated session info or None if not found
    """
    with _sessions_lock:
        evaluator = _sessions.get(session_id)
        if evaluator is None:
            return None
        evaluator.dispatch(command)
        return _info(session_id)


def press_key(session_id: str, key: str) -> Optional[SessionInfo]:
    with _sessions_lock:
        evaluator = _sessions.get(session_id)
        if evaluator is None:
            return None
        evaluator.press(key)
        return _info(session_id)


def delete_session(session_id: str) -> bool:
    with _sessions_lock:
        if _sessions.pop(session_id, None) is None:
            return False
        _created.pop(session_id, None)

    logger.info("Deleted calculator session %s", session_id)
    return True


def list_sessions() -> List[SessionInfo]:
    with _sessions_lock:
        return [_info(session_id) for session_id in _sessions]


def clear_sessions() -> None:
    """Drop every session."""
    with _sessions_lock:
        _sessions.clear()
        _created.clear()

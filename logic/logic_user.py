from typing import Any, Dict, Optional

from journal_config import DEMO_USER_ID
from logging_config import get_logger
from .logic_state import default_dashboard_state

logger = get_logger(__name__)


def resolve_user_id(is_demo: bool, username: Optional[str]) -> str:
    """
    Pick the identity every read and write is scoped to.

    Demo mode always uses the fixed demo identity. Otherwise the username
    handed over by the identity provider is used, falling back to the demo
    identity when there is none.
    """
    if is_demo:
        return DEMO_USER_ID
    return username or DEMO_USER_ID


def display_name_for(is_demo: bool, first_name: Optional[str]) -> str:
    if is_demo:
        return "Demo User"
    return first_name or "Writer"


def start_session(
    state: Dict[str, Any],
    is_demo: bool,
    username: Optional[str],
    first_name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Bind the session to a user. Once bound, the identity does not change
    until end_session().
    """
    if state.get("user_id"):
        return state

    new_state = dict(state)
    new_state["user_id"] = resolve_user_id(is_demo, username)
    new_state["is_demo"] = is_demo
    new_state["display_name"] = display_name_for(is_demo, first_name)
    logger.info("Session started", extra={"user_id": new_state["user_id"], "demo": is_demo})
    return new_state


def end_session(state: Dict[str, Any]) -> Dict[str, Any]:
    """Drop all session data. Results of jobs and chat requests issued before are discarded."""
    new_state = default_dashboard_state()
    new_state["session_epoch"] = int(state.get("session_epoch", 0)) + 1
    logger.info("Session ended", extra={"user_id": state.get("user_id")})
    return new_state

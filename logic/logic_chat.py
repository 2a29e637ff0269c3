from typing import Any, Dict, List, Optional, Tuple

from clients.base import JournalAPIError
from clients.journal_api import JournalAPI, journal_api
from journal_config import CHAT_CONTEXT_SEPARATOR, CHAT_CONTEXT_WINDOW
from logging_config import get_logger

logger = get_logger(__name__)


def build_chat_context(
    entries: List[Dict[str, Any]],
    window: int = CHAT_CONTEXT_WINDOW,
    separator: str = CHAT_CONTEXT_SEPARATOR,
) -> str:
    """Contents of the most recent entries, in the order the API returned them."""
    return separator.join(e.get("content", "") for e in entries[:window])


def begin_chat_message(
    state: Dict[str, Any], message: str
) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """
    Show the user's message right away and prepare the request for the API.

    The context is frozen here, from the entries loaded at the time of
    sending. Returns (state, None) for a blank message.
    """
    if not message or not message.strip():
        return state, None

    new_state = dict(state)
    new_state["chat_history"] = list(state.get("chat_history", [])) + [
        {"role": "user", "content": message}
    ]
    request = {
        "message": message,
        "context": build_chat_context(state.get("entries", [])),
        "epoch": state.get("session_epoch", 0),
    }
    return new_state, request


def fetch_chat_reply(request: Optional[Dict[str, Any]], api: JournalAPI = journal_api) -> Optional[str]:
    if not request:
        return None
    try:
        return api.chat(request["message"], request["context"])
    except JournalAPIError:
        logger.exception("Chat request failed")
        return None


def apply_chat_reply(
    state: Dict[str, Any], request: Optional[Dict[str, Any]], reply: Optional[str]
) -> Dict[str, Any]:
    """
    Append the assistant's reply.

    Replies for a session that was reset after the request went out are
    dropped. A closed chat panel still receives its reply.
    """
    if not request or reply is None:
        return state
    if request.get("epoch") != state.get("session_epoch", 0):
        logger.info("Discarding chat reply for a reset session")
        return state

    new_state = dict(state)
    new_state["chat_history"] = list(state.get("chat_history", [])) + [
        {"role": "assistant", "content": reply}
    ]
    return new_state


def send_chat_message(state: Dict[str, Any], message: str, api: JournalAPI = journal_api) -> Dict[str, Any]:
    state, request = begin_chat_message(state, message)
    reply = fetch_chat_reply(request, api)
    return apply_chat_reply(state, request, reply)


def open_chat(state: Dict[str, Any]) -> Dict[str, Any]:
    new_state = dict(state)
    new_state["chat_open"] = True
    return new_state


def close_chat(state: Dict[str, Any]) -> Dict[str, Any]:
    new_state = dict(state)
    new_state["chat_open"] = False
    return new_state

"""
Per-session dashboard state and server synchronisation.

Every action that talks to the Journal API is split into three steps so the
UI can run the network call between two reads of the live session state:

    begin  -> reads the live state, issues a reload ticket, returns a job
    run    -> network only; takes the job, returns {"entries", "goals"}
    finish -> reads the live state again and applies the result

finish_job() drops a result whose job belongs to another user or to a
session that was ended after the job was issued.
"""

from typing import Any, Dict, List, Optional, Tuple

from clients.base import JournalAPIError
from clients.journal_api import JournalAPI, journal_api
from logging_config import get_logger

logger = get_logger(__name__)

BUSY_ACTIONS = ("create_entry", "batch_analyze", "create_goal")


def default_dashboard_state() -> Dict[str, Any]:
    return {
        "user_id": None,
        "is_demo": False,
        "display_name": "",
        "entries": [],
        "goals": [],
        "selected_ids": [],
        "busy": {name: False for name in BUSY_ACTIONS},
        "pending_delete_id": None,
        "reload_seq": 0,
        "applied_seq": 0,
        "chat_history": [],
        "chat_open": False,
        "session_epoch": 0,
        "expanded_note": None,
    }


def set_busy(state: Dict[str, Any], action: str, value: bool) -> Dict[str, Any]:
    new_state = dict(state)
    busy = dict(state.get("busy") or {})
    busy[action] = value
    new_state["busy"] = busy
    return new_state


def is_busy(state: Dict[str, Any], action: str) -> bool:
    return bool((state.get("busy") or {}).get(action))


# ================== Reload sequencing ==================


def begin_reload(state: Dict[str, Any]) -> Tuple[Dict[str, Any], int]:
    """Issue a new reload ticket. Tickets increase monotonically per session."""
    new_state = dict(state)
    seq = int(state.get("reload_seq", 0)) + 1
    new_state["reload_seq"] = seq
    return new_state, seq


def apply_reload(
    state: Dict[str, Any],
    seq: int,
    entries: Optional[List[Dict[str, Any]]],
    goals: Optional[List[Dict[str, Any]]],
) -> Dict[str, Any]:
    """
    Replace entries/goals with a reload response.

    A response whose ticket is not newer than the last applied one is stale
    and dropped. None for either list keeps the current value.
    """
    if seq <= int(state.get("applied_seq", 0)):
        logger.debug(
            "Dropping stale reload response",
            extra={"seq": seq, "applied_seq": state.get("applied_seq")},
        )
        return state

    new_state = dict(state)
    new_state["applied_seq"] = seq
    if entries is not None:
        new_state["entries"] = list(entries)
    if goals is not None:
        new_state["goals"] = list(goals)
    return new_state


def fetch_user_data(
    user_id: str, api: JournalAPI = journal_api
) -> Tuple[Optional[List[Dict[str, Any]]], Optional[List[Dict[str, Any]]]]:
    """
    Fetch entries then goals. A failed fetch yields None for that list
    (and for goals too when entries already failed).
    """
    try:
        entries = api.get_entries(user_id)
    except JournalAPIError:
        logger.exception("Failed to load entries", extra={"user_id": user_id})
        return None, None

    try:
        goals = api.get_goals(user_id)
    except JournalAPIError:
        logger.exception("Failed to load goals", extra={"user_id": user_id})
        return entries, None

    return entries, goals


# ================== Jobs ==================


def begin_job(
    state: Dict[str, Any],
    kind: str,
    busy: Optional[str] = None,
    **payload: Any,
) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """
    Issue a job for the session user. `busy` names the flag to raise now
    and release in finish_job(). Extra keyword arguments travel with the job
    to its runner; `clear_selection=True` empties the selection on finish.
    Returns (state, None) without a user.
    """
    if not state.get("user_id"):
        return state, None

    new_state, seq = begin_reload(state)
    if busy:
        new_state = set_busy(new_state, busy, True)
    job = {
        "kind": kind,
        "user_id": state["user_id"],
        "epoch": state.get("session_epoch", 0),
        "seq": seq,
        "busy": busy,
    }
    job.update(payload)
    return new_state, job


def job_is_current(state: Dict[str, Any], job: Dict[str, Any]) -> bool:
    return (
        job.get("user_id") == state.get("user_id")
        and job.get("epoch") == state.get("session_epoch", 0)
    )


def reload_result(user_id: str, api: JournalAPI = journal_api) -> Dict[str, Any]:
    entries, goals = fetch_user_data(user_id, api)
    return {"entries": entries, "goals": goals}


def run_load(job: Dict[str, Any], api: JournalAPI = journal_api) -> Dict[str, Any]:
    return reload_result(job["user_id"], api)


def finish_job(
    state: Dict[str, Any],
    job: Optional[Dict[str, Any]],
    result: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    """Apply a job's reload result to the live state and release its busy flag."""
    if not job:
        return state
    if not job_is_current(state, job):
        logger.info(
            "Discarding result for an ended session",
            extra={"kind": job.get("kind"), "job_user_id": job.get("user_id")},
        )
        return state

    result = result or {}
    new_state = dict(apply_reload(state, job["seq"], result.get("entries"), result.get("goals")))
    if job.get("busy"):
        new_state = set_busy(new_state, job["busy"], False)
    if job.get("clear_selection"):
        new_state["selected_ids"] = []
    return new_state


def load_data(state: Dict[str, Any], api: JournalAPI = journal_api) -> Dict[str, Any]:
    """Re-synchronise entries and goals with the server for the session user."""
    state, job = begin_job(state, "load")
    if job is None:
        return state
    return finish_job(state, job, run_load(job, api))

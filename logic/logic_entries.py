from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd

from clients.base import JournalAPIError
from clients.journal_api import JournalAPI, journal_api
from logging_config import get_logger
from .logic_state import begin_job, finish_job, is_busy, reload_result
from .logic_time import format_date_display, format_time_display

logger = get_logger(__name__)

DELETE_ENTRY_PROMPT = "Delete this entry?"

FEED_COLUMNS = ["✓", "Date", "Time", "Entry", "Mood", "Score", "AI note"]
NOTE_COLUMN = FEED_COLUMNS.index("AI note")

Job = Optional[Dict[str, Any]]


# ================== Create ==================


def begin_create_entry(state: Dict[str, Any], content: str) -> Tuple[Dict[str, Any], Job]:
    """
    Accept a new entry for submission.

    Returns (state, job). Blank content and a submission while another one
    is in flight are rejected with job None and state untouched.
    """
    if not content or not content.strip():
        return state, None
    if is_busy(state, "create_entry"):
        return state, None
    return begin_job(state, "create_entry", busy="create_entry", content=content)


def run_create_entry(job: Dict[str, Any], api: JournalAPI = journal_api) -> Dict[str, Any]:
    try:
        api.create_entry(job["user_id"], job["content"])
    except JournalAPIError:
        logger.exception("Failed to create entry", extra={"user_id": job["user_id"]})
    return reload_result(job["user_id"], api)


def create_entry(state: Dict[str, Any], content: str, api: JournalAPI = journal_api) -> Dict[str, Any]:
    state, job = begin_create_entry(state, content)
    if job is None:
        return state
    return finish_job(state, job, run_create_entry(job, api))


# ================== Delete (confirmation gated) ==================


def request_delete_entry(state: Dict[str, Any], entry_id: Any) -> Dict[str, Any]:
    """Open the yes/no gate for deleting one entry. Selection is left alone."""
    if entry_id is None:
        return state
    new_state = dict(state)
    new_state["pending_delete_id"] = entry_id
    return new_state


def resolve_delete_entry(state: Dict[str, Any], confirmed: bool) -> Tuple[Dict[str, Any], Job]:
    """
    Close the gate. On confirmation the entry leaves the selection right
    away and a delete job is returned.
    """
    entry_id = state.get("pending_delete_id")
    new_state = dict(state)
    new_state["pending_delete_id"] = None
    if entry_id is None or not confirmed:
        return new_state, None

    new_state["selected_ids"] = [i for i in state.get("selected_ids", []) if i != entry_id]
    return begin_job(new_state, "delete_entry", entry_id=entry_id)


def run_delete_entry(job: Dict[str, Any], api: JournalAPI = journal_api) -> Dict[str, Any]:
    try:
        api.delete_entry(job["entry_id"])
    except JournalAPIError:
        logger.exception("Failed to delete entry", extra={"entry_id": job["entry_id"]})
    return reload_result(job["user_id"], api)


def delete_entry(
    state: Dict[str, Any],
    entry_id: Any,
    confirm: Callable[[str], bool],
    api: JournalAPI = journal_api,
) -> Dict[str, Any]:
    state = request_delete_entry(state, entry_id)
    state, job = resolve_delete_entry(state, bool(confirm(DELETE_ENTRY_PROMPT)))
    if job is None:
        return state
    return finish_job(state, job, run_delete_entry(job, api))


# ================== Selection & batch analysis ==================


def toggle_select(state: Dict[str, Any], entry_id: Any) -> Dict[str, Any]:
    selected = list(state.get("selected_ids", []))
    if entry_id in selected:
        selected = [i for i in selected if i != entry_id]
    else:
        selected.append(entry_id)
    new_state = dict(state)
    new_state["selected_ids"] = selected
    return new_state


def begin_batch_analyze(state: Dict[str, Any]) -> Tuple[Dict[str, Any], Job]:
    selected = list(state.get("selected_ids", []))
    if not selected or is_busy(state, "batch_analyze"):
        return state, None
    return begin_job(
        state,
        "batch_analyze",
        busy="batch_analyze",
        clear_selection=True,
        entry_ids=selected,
    )


def run_batch_analyze(job: Dict[str, Any], api: JournalAPI = journal_api) -> Dict[str, Any]:
    try:
        api.analyze_batch(job["entry_ids"])
    except JournalAPIError:
        # The selection is cleared regardless; the user has to reselect.
        logger.warning(
            "Batch analysis failed, selection cleared anyway",
            exc_info=True,
            extra={"entry_ids": job["entry_ids"]},
        )
    return reload_result(job["user_id"], api)


def batch_analyze(state: Dict[str, Any], api: JournalAPI = journal_api) -> Dict[str, Any]:
    state, job = begin_batch_analyze(state)
    if job is None:
        return state
    return finish_job(state, job, run_batch_analyze(job, api))


# ================== Views ==================


def is_analyzed(entry: Dict[str, Any]) -> bool:
    return (entry.get("mood_score") or 0) > 0


def feed_rows(state: Dict[str, Any]) -> List[List[Any]]:
    selected = set(state.get("selected_ids", []))
    rows: List[List[Any]] = []
    for entry in state.get("entries", []):
        created_at = entry.get("created_at")
        analyzed = is_analyzed(entry)
        note = entry.get("goal_analysis") or ""
        rows.append(
            [
                "●" if entry.get("id") in selected else "",
                format_date_display(created_at),
                format_time_display(created_at),
                entry.get("content", ""),
                (entry.get("mood_label") or "") if analyzed else "UNANALYZED",
                f"{entry['mood_score']}/10" if analyzed else "",
                note,
            ]
        )
    return rows


def chart_frame(entries: List[Dict[str, Any]]) -> pd.DataFrame:
    """Mood scores oldest first, analysed entries only."""
    points = [
        {"date": format_date_display(e.get("created_at")), "score": e.get("mood_score")}
        for e in reversed(entries)
        if is_analyzed(e)
    ]
    return pd.DataFrame(points, columns=["date", "score"])


def entry_choices(entries: List[Dict[str, Any]]) -> List[Tuple[str, Any]]:
    """(label, id) pairs for the delete picker."""
    choices = []
    for e in entries:
        content = (e.get("content") or "").strip().replace("\n", " ")
        if len(content) > 48:
            content = content[:48].rstrip() + "…"
        choices.append((f"{format_date_display(e.get('created_at'))} · {content}", e.get("id")))
    return choices

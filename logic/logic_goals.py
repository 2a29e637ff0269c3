from typing import Any, Dict, List, Optional, Tuple

from clients.base import JournalAPIError
from clients.journal_api import JournalAPI, journal_api
from logging_config import get_logger
from .logic_state import begin_job, finish_job, is_busy, reload_result

logger = get_logger(__name__)

NO_TARGETS_TXT = "// NO TARGETS SET // OPEN 'TARGETS' TO ADD"


def begin_create_goal(state: Dict[str, Any], title: str) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """Blank titles and a second add while one is in flight are rejected."""
    if not title or not title.strip():
        return state, None
    if is_busy(state, "create_goal"):
        return state, None
    return begin_job(state, "create_goal", busy="create_goal", title=title)


def run_create_goal(job: Dict[str, Any], api: JournalAPI = journal_api) -> Dict[str, Any]:
    try:
        api.create_goal(job["user_id"], job["title"])
    except JournalAPIError:
        logger.exception("Failed to create goal", extra={"user_id": job["user_id"]})
    return reload_result(job["user_id"], api)


def create_goal(state: Dict[str, Any], title: str, api: JournalAPI = journal_api) -> Dict[str, Any]:
    """Post a new goal for the session user. Blank titles are ignored."""
    state, job = begin_create_goal(state, title)
    if job is None:
        return state
    return finish_job(state, job, run_create_goal(job, api))


def begin_delete_goal(state: Dict[str, Any], goal_id: Any) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    if goal_id is None:
        return state, None
    return begin_job(state, "delete_goal", goal_id=goal_id)


def run_delete_goal(job: Dict[str, Any], api: JournalAPI = journal_api) -> Dict[str, Any]:
    try:
        api.delete_goal(job["goal_id"])
    except JournalAPIError:
        logger.exception("Failed to delete goal", extra={"goal_id": job["goal_id"]})
    return reload_result(job["user_id"], api)


def delete_goal(state: Dict[str, Any], goal_id: Any, api: JournalAPI = journal_api) -> Dict[str, Any]:
    """Delete a goal straight away. Unlike entries there is no confirmation step."""
    state, job = begin_delete_goal(state, goal_id)
    if job is None:
        return state
    return finish_job(state, job, run_delete_goal(job, api))


def goal_ticker_markdown(goals: List[Dict[str, Any]]) -> str:
    if not goals:
        return f"`{NO_TARGETS_TXT}`"
    return "  ·  ".join(f"🟠 **{g.get('title', '')}**" for g in goals)


def goal_choices(goals: List[Dict[str, Any]]) -> List[Tuple[str, Any]]:
    return [(g.get("title", ""), g.get("id")) for g in goals]

"""
Gradio callbacks for the dashboard.

Each *_action takes the per-session dashboard state (plus whatever inputs the
event carries) and returns the new state followed by the component updates
produced by render_dashboard(). Keep the tuple order in sync with
DASHBOARD_OUTPUTS in app.py.
"""

from typing import Any, Dict, Optional

import gradio as gr
import pandas as pd

from clients.base import JournalAPIError
from clients.journal_api import journal_api
from logging_config import get_logger
from .logic_chat import apply_chat_reply, begin_chat_message, close_chat, fetch_chat_reply, open_chat
from .logic_entries import (
    FEED_COLUMNS,
    NOTE_COLUMN,
    begin_batch_analyze,
    begin_create_entry,
    chart_frame,
    entry_choices,
    feed_rows,
    request_delete_entry,
    resolve_delete_entry,
    run_batch_analyze,
    run_create_entry,
    run_delete_entry,
    toggle_select,
)
from .logic_goals import (
    begin_create_goal,
    begin_delete_goal,
    goal_choices,
    goal_ticker_markdown,
    run_create_goal,
    run_delete_goal,
)
from .logic_state import begin_job, finish_job, is_busy, run_load
from .logic_user import end_session, start_session

logger = get_logger(__name__)


def render_dashboard(state: Dict[str, Any]):
    entries = state.get("entries", [])
    selected = state.get("selected_ids", [])
    chart = chart_frame(entries)
    creating = is_busy(state, "create_entry")
    analyzing = is_busy(state, "batch_analyze")
    note = state.get("expanded_note")

    return (
        f"# Hello, {state.get('display_name') or 'Writer'}.",               # greeting
        goal_ticker_markdown(state.get("goals", [])),                     # goal_ticker
        gr.update(value=chart, visible=not chart.empty),                   # mood_chart
        gr.update(value=pd.DataFrame(feed_rows(state), columns=FEED_COLUMNS)),  # feed
        gr.update(visible=not entries),                                    # feed_empty
        gr.update(visible=bool(selected)),                                 # dock
        f"**{len(selected)} SELECTED**",                                   # dock_label
        gr.update(
            value="Processing..." if analyzing else "Run Analysis",
            interactive=not analyzing,
        ),                                                                 # analyze_btn
        gr.update(
            value="Saving..." if creating else "Publish Entry",
            interactive=not creating,
        ),                                                                 # publish_btn
        gr.update(choices=entry_choices(entries), value=None),            # delete_entry_picker
        gr.update(visible=state.get("pending_delete_id") is not None),     # confirm_panel
        gr.update(choices=goal_choices(state.get("goals", [])), value=None),  # goal_picker
        list(state.get("chat_history", [])),                               # chatbot
        gr.update(visible=bool(state.get("chat_open"))),                   # chat_panel
        gr.update(visible=bool(note)),                                     # note_panel
        f'_"{note}"_' if note else "",                                     # note_text
    )


# ================== Jobs ==================
#
# Network-backed actions run as three chained events:
#   *_begin_action   live state -> (state, job, ...) with the job in its own gr.State
#   run_job_action   job -> (outcome, None); no dashboard state in or out
#   apply_job_action live state + outcome -> state
# A rejected begin answers gr.update() for the job so a pending one is kept.

JOB_RUNNERS = {
    "load": run_load,
    "create_entry": run_create_entry,
    "delete_entry": run_delete_entry,
    "batch_analyze": run_batch_analyze,
    "create_goal": run_create_goal,
    "delete_goal": run_delete_goal,
}


def _job_output(job):
    return job if job is not None else gr.update()


def run_job_action(job: Optional[Dict[str, Any]]):
    """Run the pending job, if any, and consume it."""
    if not job:
        return gr.update(), gr.update()
    result = JOB_RUNNERS[job["kind"]](job, journal_api)
    return {"job": job, "result": result}, None


def apply_job_action(state, outcome: Optional[Dict[str, Any]]):
    if not outcome:
        return (gr.update(), gr.update()) + render_dashboard(state)
    state = finish_job(state, outcome["job"], outcome["result"])
    return (state, None) + render_dashboard(state)


# ================== Session ==================


def enter_demo_action(state):
    state = start_session(state, is_demo=True, username=None)
    state, job = begin_job(state, "load")
    return (
        state,
        _job_output(job),
        "",
        gr.update(visible=False),
        gr.update(visible=True),
    ) + render_dashboard(state)


def sign_in_action(state, request: gr.Request):
    username = getattr(request, "username", None) if request is not None else None
    if not username:
        return (
            state,
            gr.update(),
            "Sign-in is not configured on this server. Launch with `--auth` or try demo mode.",
            gr.update(),
            gr.update(),
        ) + render_dashboard(state)

    state = start_session(state, is_demo=False, username=username, first_name=username)
    state, job = begin_job(state, "load")
    return (
        state,
        _job_output(job),
        "",
        gr.update(visible=False),
        gr.update(visible=True),
    ) + render_dashboard(state)


def exit_session_action(state):
    state = end_session(state)
    return (state, "", gr.update(visible=True), gr.update(visible=False)) + render_dashboard(state)


def refresh_begin_action(state):
    state, job = begin_job(state, "load")
    return (state, _job_output(job)) + render_dashboard(state)


def health_status_action() -> str:
    try:
        journal_api.check_health()
    except JournalAPIError as e:
        logger.warning("Journal API health check failed: %s", e)
        return f"🔴 Journal API unreachable ({journal_api.base_url})"
    return f"🟢 Journal API online ({journal_api.base_url})"


# ================== Entries ==================


def create_entry_begin_action(content: str, state):
    state, job = begin_create_entry(state, content)
    entry_input = gr.update(value="") if job else gr.update()
    return (state, _job_output(job), entry_input) + render_dashboard(state)


def feed_select_action(state, evt: gr.SelectData):
    """Row click toggles selection; a click on the AI note cell opens the note instead."""
    row, col = evt.index[0], evt.index[1]
    entries = state.get("entries", [])
    if row is None or row >= len(entries):
        return (state,) + render_dashboard(state)

    entry = entries[row]
    if col == NOTE_COLUMN and entry.get("goal_analysis"):
        state = dict(state)
        state["expanded_note"] = entry["goal_analysis"]
    else:
        state = toggle_select(state, entry.get("id"))
    return (state,) + render_dashboard(state)


def request_delete_action(state, entry_id):
    state = request_delete_entry(state, entry_id)
    return (state,) + render_dashboard(state)


def confirm_delete_begin_action(state):
    state, job = resolve_delete_entry(state, confirmed=True)
    return (state, _job_output(job)) + render_dashboard(state)


def cancel_delete_action(state):
    state, _ = resolve_delete_entry(state, confirmed=False)
    return (state,) + render_dashboard(state)


def batch_begin_action(state):
    state, job = begin_batch_analyze(state)
    return (state, _job_output(job)) + render_dashboard(state)


def close_note_action(state):
    state = dict(state)
    state["expanded_note"] = None
    return (state,) + render_dashboard(state)


# ================== Goals ==================


def add_goal_begin_action(title: str, state):
    state, job = begin_create_goal(state, title)
    goal_input = gr.update(value="") if job else gr.update()
    return (state, _job_output(job), goal_input) + render_dashboard(state)


def delete_goal_begin_action(state, goal_id):
    state, job = begin_delete_goal(state, goal_id)
    return (state, _job_output(job)) + render_dashboard(state)


# ================== Chat ==================


def open_chat_action(state):
    state = open_chat(state)
    return (state,) + render_dashboard(state)


def close_chat_action(state):
    state = close_chat(state)
    return (state,) + render_dashboard(state)


def chat_begin_action(message: str, state):
    state, request = begin_chat_message(state, message)
    chat_input = gr.update(value="") if request else gr.update()
    return (state, request, chat_input) + render_dashboard(state)


def chat_fetch_action(request: Optional[Dict[str, Any]]):
    return fetch_chat_reply(request)


def chat_apply_action(state, request, reply):
    state = apply_chat_reply(state, request, reply)
    return (state,) + render_dashboard(state)

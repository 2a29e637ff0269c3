"""Entry lifecycle, selection and batch analysis."""

import pytest

from conftest import make_entry

from logic.logic_entries import (
    DELETE_ENTRY_PROMPT,
    begin_batch_analyze,
    begin_create_entry,
    batch_analyze,
    chart_frame,
    create_entry,
    delete_entry,
    entry_choices,
    feed_rows,
    request_delete_entry,
    resolve_delete_entry,
    run_batch_analyze,
    run_create_entry,
    run_delete_entry,
    toggle_select,
)
from logic.logic_state import finish_job


# ==================== Create ====================


@pytest.mark.parametrize("content", ["", "   ", "\n\t "])
def test_blank_entry_is_not_posted(fake_api, session_state, content):
    state = create_entry(session_state, content, fake_api)
    assert fake_api.calls == []
    assert state["entries"] == []
    assert state is session_state


def test_create_entry_posts_and_reloads(fake_api, session_state):
    state = create_entry(session_state, "Slept badly.", fake_api)

    assert fake_api.calls[0] == ("create_entry", "demo_user", "Slept badly.")
    assert [c[0] for c in fake_api.calls[1:]] == ["get_entries", "get_goals"]
    assert [e["content"] for e in state["entries"]] == ["Slept badly."]
    assert state["busy"]["create_entry"] is False


def test_created_entry_is_unanalyzed_until_reload_says_otherwise(fake_api, session_state):
    state = create_entry(session_state, "New day", fake_api)
    assert state["entries"][0]["mood_score"] == 0


def test_reload_after_create_replaces_instead_of_merging(fake_api, session_state):
    fake_api.entries["demo_user"] = [make_entry("a", "old")]
    state = create_entry(session_state, "one", fake_api)
    state = create_entry(state, "two", fake_api)

    contents = [e["content"] for e in state["entries"]]
    assert contents == ["two", "one", "old"]
    assert len({e["id"] for e in state["entries"]}) == len(contents)


def test_second_create_while_busy_is_ignored(fake_api, session_state):
    state, job = begin_create_entry(session_state, "first")
    assert job["content"] == "first" and state["busy"]["create_entry"]

    again, second_job = begin_create_entry(state, "second")
    assert second_job is None
    assert again is state

    finish_job(again, job, run_create_entry(job, fake_api))
    assert fake_api.calls_to("create_entry") == [("create_entry", "demo_user", "first")]


def test_create_busy_does_not_block_batch(session_state):
    session_state["selected_ids"] = [1]
    state, _ = begin_create_entry(session_state, "writing")
    _, job = begin_batch_analyze(state)
    assert job is not None


def test_failed_create_still_reloads_and_releases_busy(fake_api, session_state):
    fake_api.fail.add("create_entry")
    state = create_entry(session_state, "lost", fake_api)
    assert fake_api.calls_to("get_entries")
    assert state["busy"]["create_entry"] is False


def test_hung_create_keeps_busy_flag(session_state):
    # No finish_job: the request never came back
    state, _ = begin_create_entry(session_state, "waiting")
    state, job = begin_create_entry(state, "retry")
    assert state["busy"]["create_entry"] is True
    assert job is None


# ==================== Delete ====================


def test_declined_delete_does_not_call_api(fake_api, session_state):
    prompts = []

    def decline(prompt):
        prompts.append(prompt)
        return False

    state = delete_entry(session_state, "e1", decline, fake_api)

    assert prompts == [DELETE_ENTRY_PROMPT]
    assert fake_api.calls_to("delete_entry") == []
    assert state["pending_delete_id"] is None


def test_confirmed_delete_calls_api_and_reloads(fake_api, session_state):
    fake_api.entries["demo_user"] = [make_entry("e1", "bye"), make_entry("e2", "stay")]
    state = delete_entry(session_state, "e1", lambda prompt: True, fake_api)

    assert fake_api.calls_to("delete_entry") == [("delete_entry", "e1")]
    assert [e["id"] for e in state["entries"]] == ["e2"]


def test_delete_request_leaves_selection_alone(session_state):
    session_state["selected_ids"] = ["e2"]
    state = request_delete_entry(session_state, "e1")
    assert state["selected_ids"] == ["e2"]
    assert state["pending_delete_id"] == "e1"

    state = request_delete_entry(session_state, "e2")
    assert state["selected_ids"] == ["e2"]


def test_confirmed_delete_drops_id_from_selection(fake_api, session_state):
    session_state["selected_ids"] = ["e1", "e2"]
    state = request_delete_entry(session_state, "e1")
    state, job = resolve_delete_entry(state, True)
    # Dropped before the delete goes out
    assert state["selected_ids"] == ["e2"]
    assert job["entry_id"] == "e1"

    state = finish_job(state, job, run_delete_entry(job, fake_api))
    assert fake_api.calls_to("delete_entry") == [("delete_entry", "e1")]
    assert state["selected_ids"] == ["e2"]


def test_resolve_without_request_is_noop(session_state):
    state, job = resolve_delete_entry(session_state, True)
    assert job is None
    assert state["pending_delete_id"] is None


# ==================== Selection ====================


def test_toggle_twice_restores_selection(session_state):
    session_state["selected_ids"] = ["a"]
    state = toggle_select(toggle_select(session_state, "b"), "b")
    assert state["selected_ids"] == ["a"]


def test_toggle_is_order_independent(session_state):
    one = toggle_select(toggle_select(session_state, "a"), "b")
    two = toggle_select(toggle_select(session_state, "b"), "a")
    assert set(one["selected_ids"]) == set(two["selected_ids"]) == {"a", "b"}


# ==================== Batch analysis ====================


def test_empty_batch_is_not_sent(fake_api, session_state):
    state = batch_analyze(session_state, fake_api)
    assert fake_api.calls == []
    assert state is session_state


def test_batch_sends_selected_ids_and_clears_selection(fake_api, session_state):
    session_state["selected_ids"] = ["id1", "id2"]
    state = batch_analyze(session_state, fake_api)

    assert fake_api.calls[0] == ("analyze_batch", ["id1", "id2"])
    assert state["selected_ids"] == []
    assert fake_api.calls_to("get_entries")
    assert state["busy"]["batch_analyze"] is False


def test_batch_failure_still_clears_selection(fake_api, session_state):
    session_state["selected_ids"] = ["id1", "id2"]
    fake_api.fail.add("analyze_batch")

    state = batch_analyze(session_state, fake_api)

    assert state["selected_ids"] == []
    assert fake_api.calls_to("get_entries")


def test_batch_payload_goes_through_http_client(session_state):
    from unittest.mock import MagicMock

    from clients.journal_api import JournalAPI

    client = MagicMock()
    client.get.return_value = []
    api = JournalAPI(client=client)
    session_state["selected_ids"] = ["id1", "id2"]

    batch_analyze(session_state, api)

    client.post.assert_called_once_with("/analyze/batch/", {"entry_ids": ["id1", "id2"]})


def test_second_batch_while_busy_is_ignored(fake_api, session_state):
    session_state["selected_ids"] = ["id1"]
    state, job = begin_batch_analyze(session_state)
    assert job["entry_ids"] == ["id1"]
    _, second_job = begin_batch_analyze(state)
    assert second_job is None

    finish_job(state, job, run_batch_analyze(job, fake_api))
    assert len(fake_api.calls_to("analyze_batch")) == 1


# ==================== Views ====================


def test_feed_rows_mark_selection_and_mood(session_state):
    session_state["entries"] = [
        make_entry("e1", "calm", mood_score=7, mood_label="Calm", goal_analysis="On track"),
        make_entry("e2", "raw", mood_score=0),
    ]
    session_state["selected_ids"] = ["e2"]

    rows = feed_rows(session_state)

    assert rows[0] == ["", "14 Jan", "9:30 PM", "calm", "Calm", "7/10", "On track"]
    assert rows[1][0] == "●"
    assert rows[1][4] == "UNANALYZED"
    assert rows[1][5] == ""


def test_chart_frame_is_chronological_and_skips_unanalyzed():
    entries = [
        make_entry("new", "c", created_at="2026-01-16T04:00:00", mood_score=8),
        make_entry("mid", "b", created_at="2026-01-15T04:00:00", mood_score=0),
        make_entry("old", "a", created_at="2026-01-14T04:00:00", mood_score=3),
    ]
    frame = chart_frame(entries)
    assert list(frame["date"]) == ["14 Jan", "16 Jan"]
    assert list(frame["score"]) == [3, 8]


def test_chart_frame_empty():
    assert chart_frame([]).empty


def test_entry_choices_truncate_long_content():
    entries = [make_entry("e1", "x" * 80)]
    (label, value), = entry_choices(entries)
    assert value == "e1"
    assert label.endswith("…")

from typing import Any, Dict, List

import pytest

from clients.base import JournalAPIError
from logic.logic_state import default_dashboard_state


class FakeJournalAPI:
    """In-memory stand-in for JournalAPI that records every call."""

    base_url = "http://journal.test"

    def __init__(self):
        self.calls: List[tuple] = []
        self.entries: Dict[str, List[Dict[str, Any]]] = {}
        self.goals: Dict[str, List[Dict[str, Any]]] = {}
        self.fail: set = set()
        self.reply = "You seem to be doing well."

    def _record(self, name: str, *args):
        self.calls.append((name,) + args)
        if name in self.fail:
            raise JournalAPIError(f"{name} failed")

    def calls_to(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]

    def check_health(self):
        self._record("check_health")
        return {"status": "ok"}

    def get_entries(self, user_id):
        self._record("get_entries", user_id)
        return [dict(e) for e in self.entries.get(user_id, [])]

    def create_entry(self, user_id, content):
        self._record("create_entry", user_id, content)
        entry = {"id": f"e{len(self.calls)}", "user_id": user_id, "content": content, "mood_score": 0}
        self.entries.setdefault(user_id, []).insert(0, entry)
        return entry

    def delete_entry(self, entry_id):
        self._record("delete_entry", entry_id)
        for user_id, items in self.entries.items():
            self.entries[user_id] = [e for e in items if e["id"] != entry_id]

    def analyze_batch(self, entry_ids):
        self._record("analyze_batch", list(entry_ids))
        return {"status": "queued"}

    def get_goals(self, user_id):
        self._record("get_goals", user_id)
        return [dict(g) for g in self.goals.get(user_id, [])]

    def create_goal(self, user_id, title):
        self._record("create_goal", user_id, title)
        goal = {"id": f"g{len(self.calls)}", "user_id": user_id, "title": title}
        self.goals.setdefault(user_id, []).append(goal)
        return goal

    def delete_goal(self, goal_id):
        self._record("delete_goal", goal_id)
        for user_id, items in self.goals.items():
            self.goals[user_id] = [g for g in items if g["id"] != goal_id]

    def chat(self, message, context):
        self._record("chat", message, context)
        return self.reply


def make_entry(entry_id, content, created_at="2026-01-14T16:00:00", **extra):
    entry = {"id": entry_id, "user_id": "demo_user", "content": content, "created_at": created_at}
    entry.update(extra)
    return entry


@pytest.fixture
def fake_api():
    return FakeJournalAPI()


@pytest.fixture
def session_state():
    state = default_dashboard_state()
    state["user_id"] = "demo_user"
    state["is_demo"] = True
    state["display_name"] = "Demo User"
    return state

from typing import Any, Dict, List, Optional

from clients.base import JSONHTTPClient, JournalAPIError
from journal_config import JOURNAL_API_BASE_URL


class JournalAPI:
    """
    Adapter for the Journal API.

    One method per endpoint. Every method raises JournalAPIError on failure;
    callers in logic/ decide whether to log and swallow it.
    """

    def __init__(self, base_url: str = JOURNAL_API_BASE_URL, client: Optional[JSONHTTPClient] = None):
        self.client = client or JSONHTTPClient(base_url)

    @property
    def base_url(self) -> str:
        return self.client.base_url

    def check_health(self) -> Any:
        return self.client.get("/")

    # ---- entries ----

    def get_entries(self, user_id: str) -> List[Dict[str, Any]]:
        data = self.client.get(f"/entries/{user_id}")
        return list(data or [])

    def create_entry(self, user_id: str, content: str) -> Dict[str, Any]:
        return self.client.post("/entries/", {"user_id": user_id, "content": content})

    def delete_entry(self, entry_id: Any) -> None:
        self.client.delete(f"/entries/{entry_id}")

    # ---- batch analysis ----

    def analyze_batch(self, entry_ids: List[Any]) -> Any:
        return self.client.post("/analyze/batch/", {"entry_ids": list(entry_ids)})

    # ---- goals ----

    def get_goals(self, user_id: str) -> List[Dict[str, Any]]:
        data = self.client.get(f"/goals/{user_id}")
        return list(data or [])

    def create_goal(self, user_id: str, title: str) -> Dict[str, Any]:
        return self.client.post("/goals/", {"user_id": user_id, "title": title})

    def delete_goal(self, goal_id: Any) -> None:
        self.client.delete(f"/goals/{goal_id}")

    # ---- chat ----

    def chat(self, message: str, context: str) -> str:
        data = self.client.post("/chat/", {"message": message, "context": context})
        if not isinstance(data, dict) or "reply" not in data:
            raise JournalAPIError("POST /chat/ returned no reply", None, "/chat/")
        return data["reply"]


journal_api = JournalAPI()

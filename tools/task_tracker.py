"""
task_tracker.py
Client for the Notion REST API: creates review task pages in a database and
looks up workspace users by email.
"""
import requests
import logging
from typing import Any, Dict, List, Optional

from core.interfaces import ITaskTracker

log = logging.getLogger(__name__)

NOTION_API_URL = "https://api.notion.com/v1"
MAX_CHILDREN_PER_REQUEST = 100


class TaskTrackerError(RuntimeError):
    """Raised when the tracking service is unreachable or rejects a request"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NotionTaskTracker(ITaskTracker):
    def __init__(
        self,
        token: str,
        database_id: str,
        timeout_s: float = 15.0,
        notion_version: str = "2022-06-28",
        base_url: str = NOTION_API_URL,
        session: Optional[requests.Session] = None,
    ):
        if not token or not database_id:
            raise ValueError("A Notion token and database id are required")
        self.database_id = database_id
        self.timeout_s = timeout_s
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Notion-Version": notion_version,
            "Content-Type": "application/json",
        })

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.Timeout as e:
            raise TaskTrackerError(f"Notion request timed out after {self.timeout_s}s: {method} {path}") from e
        except requests.RequestException as e:
            raise TaskTrackerError(f"Notion request failed: {method} {path}: {e}") from e

        if not 200 <= response.status_code < 300:
            try:
                body = response.json()
                detail = body.get("message", str(body))
            except ValueError:
                body = response.text
                detail = response.text or f"HTTP {response.status_code}"
            log.error("Notion %s %s returned %s: %s", method, path, response.status_code, body)
            raise TaskTrackerError(
                f"Notion returned {response.status_code}: {detail}",
                status_code=response.status_code,
                body=body,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TaskTrackerError(f"Notion returned invalid JSON for {method} {path}") from e

    def find_user_id_by_email(self, email: str) -> Optional[str]:
        """Id of the workspace person with this email, or None."""
        wanted = email.strip().lower()
        params: Dict[str, Any] = {"page_size": 100}
        while True:
            page = self._request("GET", "/users", params=params)
            for user in page.get("results", []):
                person_email = (user.get("person") or {}).get("email") or ""
                if user.get("type") == "person" and person_email.lower() == wanted:
                    return user.get("id")
            cursor = page.get("next_cursor")
            if not page.get("has_more") or not cursor or cursor == params.get("start_cursor"):
                return None
            params = {"page_size": 100, "start_cursor": cursor}

    def create_page(self, children: List[Dict[str, Any]], properties: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a page in the configured database.

        Notion accepts at most 100 blocks per request, so the remainder is
        appended to the new page in batches.
        """
        first, rest = children[:MAX_CHILDREN_PER_REQUEST], children[MAX_CHILDREN_PER_REQUEST:]
        page = self._request("POST", "/pages", json={
            "parent": {"database_id": self.database_id},
            "properties": properties,
            "children": first,
        })
        log.info("Created Notion page %s", page.get("id"))

        for start in range(0, len(rest), MAX_CHILDREN_PER_REQUEST):
            batch = rest[start:start + MAX_CHILDREN_PER_REQUEST]
            self._request("PATCH", f"/blocks/{page['id']}/children", json={"children": batch})
        return page

"""Linear GraphQL API client wrapper (cursor pagination)."""

from __future__ import annotations

import logging
from typing import Any

import requests

from .config import ISSUE_PAGE_SIZE, LINEAR_API_URL, REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

ISSUES_QUERY = """
query Issues($teamId: ID!, $first: Int!, $after: String, $filter: IssueFilter) {
  team(id: $teamId) {
    issues(first: $first, after: $after, filter: $filter) {
      nodes {
        id
        identifier
        title
        url
        createdAt
        updatedAt
        completedAt
        state { id name type }
        assignee { id name }
        creator { id name }
        priority
        labels { nodes { name } }
        team { name }
        project { id name }
        cycle { id number name }
        estimate
      }
      pageInfo { hasNextPage endCursor }
    }
  }
}
"""


class LinearAPIError(RuntimeError):
    pass


class LinearAuthError(LinearAPIError):
    pass


class LinearAPI:
    def __init__(
        self,
        token: str,
        url: str = LINEAR_API_URL,
        *,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        if not token:
            raise ValueError("Linear API key is required")
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": token, "Content-Type": "application/json"})

    def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            resp = self.session.post(
                self.url,
                json={"query": query, "variables": variables or {}},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise LinearAPIError(f"Linear request failed: {exc}") from exc
        if resp.status_code == 401:
            raise LinearAuthError("Linear authentication failed")
        if resp.status_code >= 400:
            raise LinearAPIError(f"Linear error {resp.status_code}: {resp.text[:200]}")
        payload = resp.json()
        errors = payload.get("errors") or []
        if errors:
            raise LinearAPIError(f"Linear GraphQL error: {errors[0].get('message')}")
        data = payload.get("data")
        if not data:
            raise LinearAPIError("Linear response missing data")
        return data

    def validate(self) -> bool:
        try:
            data = self.query("query { viewer { id } }")
        except LinearAPIError as exc:
            logger.warning("Linear key validation failed: %s", exc)
            return False
        return bool((data.get("viewer") or {}).get("id"))

    def teams(self) -> list[dict[str, Any]]:
        data = self.query("query { teams { nodes { id name } } }")
        return list((data.get("teams") or {}).get("nodes") or [])

    def projects(self) -> list[dict[str, Any]]:
        data = self.query("query { projects { nodes { id name teams { nodes { name } } } } }")
        out = []
        for node in (data.get("projects") or {}).get("nodes") or []:
            teams = (node.get("teams") or {}).get("nodes") or []
            team_name = teams[0].get("name") if teams else None
            out.append({"id": node.get("id"), "name": node.get("name"), "team": team_name or "Unknown team"})
        return out

    def search_issues(
        self,
        team_id: str,
        page_size: int = ISSUE_PAGE_SIZE,
        *,
        created_after: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch every issue node for a team, following ``pageInfo`` cursors."""
        issue_filter = {"createdAt": {"gte": created_after}} if created_after else None
        out: list[dict[str, Any]] = []
        after = None
        while True:
            data = self.query(
                ISSUES_QUERY,
                {"teamId": team_id, "first": page_size, "after": after, "filter": issue_filter},
            )
            block = (data.get("team") or {}).get("issues") or {}
            out.extend(block.get("nodes") or [])
            page_info = block.get("pageInfo") or {}
            after = page_info.get("endCursor")
            logger.debug("Fetched %d issues for team %s so far", len(out), team_id)
            if not page_info.get("hasNextPage") or not after:
                break
        return out

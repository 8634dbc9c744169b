"""IssueService: orchestrates fetching, caching, and the metrics/chart pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from linear_app.analytics.drilldown import resolve_drill_down
from linear_app.analytics.metrics.dimensions import collect_projects
from linear_app.analytics.prompt.spec_chart import ChartPayload, build_chart_from_spec
from linear_app.analytics.segments.filters import filter_issues
from linear_app.features.dashboard.context import DashboardMetrics, build_metrics
from linear_app.visual.tables import issues_to_csv

from .cache import TimedCache
from .linear_client import LinearAPI
from .mappers import map_issue
from .models import ChartSpec, IssueFilters, IssueModel
from .prompt_client import ChartSpecGenerator

ProgressCallback = Callable[[str, int | None, int | None], None]

logger = logging.getLogger(__name__)


class IssueService:
    def __init__(self, api: LinearAPI, cache: TimedCache | None = None):
        self.api = api
        self.cache = cache or TimedCache()
        # Teams and projects change rarely; keep them beside the issue snapshots
        self.catalog_cache = TimedCache(ttl=self.cache.ttl)

    def get_teams(self) -> list[dict[str, Any]]:
        cached = self.catalog_cache.get("teams")
        if cached is not None:
            return cached
        teams = self.api.teams()
        self.catalog_cache.put("teams", teams)
        return teams

    def get_projects(self) -> list[dict[str, Any]]:
        cached = self.catalog_cache.get("projects")
        if cached is not None:
            return cached
        projects = self.api.projects()
        self.catalog_cache.put("projects", projects)
        return projects

    def project_choices(self, team_id: str) -> list[dict[str, Any]]:
        """Projects present in the team snapshot, labelled from the workspace catalog."""
        catalog = {p.get("id"): p for p in self.get_projects()}
        out = []
        for project in collect_projects(self.fetch_team_issues(team_id)):
            known = catalog.get(project["id"]) or {}
            out.append(
                {
                    "id": project["id"],
                    "name": known.get("name") or project["name"] or project["id"],
                    "team": known.get("team"),
                }
            )
        return out

    # ------------------ Fetch Methods ------------------
    def fetch_team_issues(
        self,
        team_id: str,
        *,
        refresh: bool = False,
        progress: ProgressCallback | None = None,
    ) -> list[IssueModel]:
        """Issue snapshot for a team, served from the cache while fresh."""
        if not team_id:
            raise ValueError("team_id is required")
        if refresh:
            self.cache.invalidate(team_id)
        cached = self.cache.get(team_id)
        if cached is not None:
            return cached
        if progress:
            progress(f"Querying issues for team {team_id}", None, None)
        raw = self.api.search_issues(team_id)
        if progress:
            progress("Mapping issues", len(raw), len(raw))
        issues = [map_issue(r) for r in raw]
        self.cache.put(team_id, issues)
        logger.info("Cached %d issues for team %s", len(issues), team_id)
        return issues

    # ------------------ Dashboard / Charts ------------------
    def dashboard(
        self,
        team_id: str,
        filters: IssueFilters | None,
        *,
        now: datetime | None = None,
    ) -> tuple[DashboardMetrics, dict[str, Any]]:
        issues = self.fetch_team_issues(team_id)
        return build_metrics(issues, filters, now=now), snapshot_info(issues)

    def chart_from_prompt(
        self,
        team_id: str,
        filters: IssueFilters | None,
        prompt: str,
        generator: ChartSpecGenerator,
        *,
        now: datetime | None = None,
    ) -> tuple[ChartSpec, ChartPayload]:
        if not prompt:
            raise ValueError("prompt is required")
        issues = self.fetch_team_issues(team_id)
        spec = generator.generate(prompt)
        return spec, build_chart_from_spec(issues, filters, spec, now=now)

    def chart_from_spec(
        self,
        team_id: str,
        filters: IssueFilters | None,
        spec: ChartSpec,
        *,
        now: datetime | None = None,
    ) -> ChartPayload:
        return build_chart_from_spec(self.fetch_team_issues(team_id), filters, spec, now=now)

    def issues_for_chart(
        self,
        team_id: str,
        filters: IssueFilters | None,
        chart: str,
        bucket: str | None = None,
        series: str | None = None,
        spec: ChartSpec | None = None,
        *,
        now: datetime | None = None,
    ) -> list[IssueModel]:
        issues = self.fetch_team_issues(team_id)
        return resolve_drill_down(issues, filters, chart, bucket, series, spec, now=now)

    def export_csv(
        self,
        team_id: str,
        filters: IssueFilters | None,
        chart: str | None = None,
        bucket: str | None = None,
        series: str | None = None,
        spec: ChartSpec | None = None,
        *,
        now: datetime | None = None,
    ) -> str:
        """CSV of the filtered snapshot, or of one chart's scope/bucket when ``chart`` is given."""
        if chart:
            rows = self.issues_for_chart(team_id, filters, chart, bucket, series, spec, now=now)
        else:
            rows = filter_issues(self.fetch_team_issues(team_id), filters, now=now)
        return issues_to_csv(rows)


def snapshot_info(issues: list[IssueModel]) -> dict[str, Any]:
    created = [i.created for i in issues if i.created is not None]
    return {
        "count": len(issues),
        "from": min(created).isoformat() if created else None,
        "to": max(created).isoformat() if created else None,
    }

"""YAML-backed store for saved filter presets and the last-used dashboard state."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import pytz
import yaml

from .config import SETTINGS
from .models import IssueFilters

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FilterPreset:
    id: str
    name: str
    team_id: str | None
    filters: IssueFilters
    created_at: str


@dataclass(slots=True)
class AppState:
    last_team: str | None = None
    filters: IssueFilters | None = None
    theme: str | None = None


@dataclass(slots=True)
class _Document:
    presets: list[dict[str, Any]] = field(default_factory=list)
    app_state: dict[str, Any] = field(default_factory=dict)


class FilterPresetStore:
    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or Path.cwd() / SETTINGS.presets_file)

    # ------------------ Presets ------------------
    def list_presets(self) -> list[FilterPreset]:
        """Saved presets, newest first."""
        doc = self._load()
        presets = [self._to_preset(item) for item in doc.presets if isinstance(item, dict)]
        return sorted(presets, key=lambda p: p.created_at, reverse=True)

    def get_preset(self, preset_id: str) -> FilterPreset | None:
        return next((p for p in self.list_presets() if p.id == preset_id), None)

    def create_preset(self, name: str, filters: IssueFilters, team_id: str | None = None) -> str:
        if not name:
            raise ValueError("name is required")
        doc = self._load()
        preset_id = uuid.uuid4().hex
        doc.presets.append(
            {
                "id": preset_id,
                "name": name,
                "team_id": team_id,
                "filters": filters.to_dict(),
                "created_at": datetime.now(tz=pytz.UTC).isoformat(),
            }
        )
        self._save(doc)
        return preset_id

    def update_preset(self, preset_id: str, name: str, filters: IssueFilters, team_id: str | None = None) -> bool:
        if not preset_id or not name:
            raise ValueError("id and name are required")
        doc = self._load()
        for item in doc.presets:
            if item.get("id") == preset_id:
                item.update({"name": name, "team_id": team_id, "filters": filters.to_dict()})
                self._save(doc)
                return True
        return False

    def delete_preset(self, preset_id: str) -> bool:
        doc = self._load()
        kept = [item for item in doc.presets if item.get("id") != preset_id]
        if len(kept) == len(doc.presets):
            return False
        doc.presets = kept
        self._save(doc)
        return True

    # ------------------ App state ------------------
    def get_app_state(self) -> AppState:
        state = self._load().app_state
        filters = state.get("filters")
        return AppState(
            last_team=state.get("last_team"),
            filters=IssueFilters.from_dict(filters) if filters else None,
            theme=state.get("theme"),
        )

    def save_app_state(self, last_team: str | None, filters: IssueFilters | None) -> None:
        doc = self._load()
        doc.app_state.update(
            {
                "last_team": last_team,
                "filters": filters.to_dict() if filters else None,
                "updated_at": datetime.now(tz=pytz.UTC).isoformat(),
            }
        )
        self._save(doc)

    def save_theme(self, theme: str | None) -> None:
        doc = self._load()
        doc.app_state["theme"] = theme
        self._save(doc)

    # ------------------ Internal Helpers ------------------
    @staticmethod
    def _to_preset(item: dict[str, Any]) -> FilterPreset:
        return FilterPreset(
            id=str(item.get("id")),
            name=str(item.get("name") or ""),
            team_id=item.get("team_id"),
            filters=IssueFilters.from_dict(item.get("filters")),
            created_at=str(item.get("created_at") or ""),
        )

    def _load(self) -> _Document:
        if not self.path.exists():
            return _Document()
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Could not read presets from %s: %s", self.path, exc)
            return _Document()
        if not isinstance(data, dict):
            return _Document()
        return _Document(
            presets=list(data.get("presets") or []),
            app_state=dict(data.get("app_state") or {}),
        )

    def _save(self, doc: _Document) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"presets": doc.presets, "app_state": doc.app_state}
        self.path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")

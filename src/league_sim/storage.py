from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any

from .errors import NotFoundError
from .league import League
from .logger import get_logger

log = get_logger(__name__)


class LeagueStore:
    """JSON-file backed collection of leagues keyed by league id."""

    SAVE_VERSION = 1

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path or "league_state.json")
        self.last_load_error: str = ""
        self._leagues: dict[str, League] = self._load()

    def _load(self) -> dict[str, League]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            self.last_load_error = f"Failed to load league state ({exc}); starting with no leagues."
            log.warning(self.last_load_error)
            return {}
        if not isinstance(raw, dict):
            self.last_load_error = "League state file has invalid format; starting with no leagues."
            log.warning(self.last_load_error)
            return {}
        version = int(raw.get("save_version", 1) or 1)
        if version > self.SAVE_VERSION:
            self.last_load_error = (
                f"Unsupported league state version {version}; app supports up to {self.SAVE_VERSION}."
            )
            log.warning(self.last_load_error)
            return {}
        leagues: dict[str, League] = {}
        payload = raw.get("leagues", {})
        if not isinstance(payload, dict):
            return leagues
        for league_id, entry in payload.items():
            if not isinstance(entry, dict):
                continue
            try:
                leagues[str(league_id)] = League.from_dict(entry)
            except (KeyError, TypeError, ValueError) as exc:
                log.warning("Skipping unreadable league %s: %s", league_id, exc)
        return leagues

    def save(self) -> None:
        payload: dict[str, Any] = {
            "save_version": self.SAVE_VERSION,
            "leagues": {league_id: league.to_dict() for league_id, league in self._leagues.items()},
        }
        self._write_json_with_backup(self.path, payload)

    def _write_json_with_backup(self, path: Path, payload: Any, *, with_backup: bool = True) -> None:
        if with_backup and path.exists():
            backup = path.with_suffix(path.suffix + ".bak")
            try:
                shutil.copy2(path, backup)
            except OSError as exc:
                log.warning("Could not back up %s: %s", path, exc)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def list_leagues(self) -> list[League]:
        return list(self._leagues.values())

    def get(self, league_id: str) -> League:
        league = self._leagues.get(league_id)
        if league is None:
            raise NotFoundError(f"League {league_id!r} not found.")
        return league

    def put(self, league: League) -> None:
        self._leagues[league.league_id] = league

    def delete(self, league_id: str) -> None:
        if league_id not in self._leagues:
            raise NotFoundError(f"League {league_id!r} not found.")
        del self._leagues[league_id]

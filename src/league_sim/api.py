from __future__ import annotations

import random
from threading import Lock
from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from .config import Settings, get_settings
from .errors import InvalidArgumentError, LeagueError, NotFoundError
from .league import League
from .logger import configure_logging, get_logger
from .roster import parse_team_count
from .storage import LeagueStore

log = get_logger(__name__)


class CreateLeagueRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    league_name: str = Field(alias="leagueName")
    team_count: str | int = Field(alias="teamCount")


class SimulateLeagueRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    play_all_fixture: bool = Field(default=False, alias="playAllFixture")


class EditMatchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    home: str
    away: str
    home_score: int = Field(alias="homeScore")
    away_score: int = Field(alias="awayScore")
    match_week: int = Field(alias="matchWeek")


def _http_error(exc: LeagueError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidArgumentError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


class LeagueService:
    def __init__(self, settings: Settings | None = None, store: LeagueStore | None = None) -> None:
        self.settings = settings or get_settings()
        self.store = store or LeagueStore(self.settings.state_path)
        self._rng = random.Random(self.settings.seed)
        self._lock = Lock()

    def _league(self, league_id: str) -> League:
        try:
            return self.store.get(league_id)
        except NotFoundError as exc:
            raise _http_error(exc) from exc

    def _commit(self, undo: Callable[[], None]) -> None:
        """Persist the store, undoing the in-memory change if the write fails."""
        try:
            self.store.save()
        except OSError as exc:
            undo()
            log.error("Could not save league state to %s: %s", self.store.path, exc)
            raise HTTPException(status_code=500, detail=f"Could not save league state: {exc}") from exc

    def list_leagues(self) -> list[dict[str, str]]:
        return [{"leagueId": lg.league_id, "leagueName": lg.name} for lg in self.store.list_leagues()]

    def create_league(self, payload: CreateLeagueRequest) -> dict[str, str]:
        try:
            count = parse_team_count(payload.team_count, self.settings.max_teams)
            league = League.create(payload.league_name, count, self._rng)
        except LeagueError as exc:
            raise _http_error(exc) from exc
        self.store.put(league)
        self._commit(lambda: self.store.delete(league.league_id))
        return {"leagueId": league.league_id, "leagueName": league.name}

    def standings(self, league_id: str) -> list[dict[str, object]]:
        return [row.to_dict() for row in self._league(league_id).get_standings()]

    def fixtures(self, league_id: str) -> dict[str, Any]:
        league = self._league(league_id)
        return {
            "upcomingFixtures": [w.to_dict() for w in league.upcoming_fixtures()],
            "playedFixtures": [w.to_dict() for w in league.played_fixtures()],
        }

    def match_results(self, league_id: str) -> list[dict[str, object]]:
        return [m.to_dict() for m in self._league(league_id).played_matches()]

    def predict(self, league_id: str) -> list[dict[str, object]]:
        league = self._league(league_id)
        try:
            predictions = league.predict(
                weight_points=self.settings.weight_points,
                weight_strength=self.settings.weight_strength,
            )
        except LeagueError as exc:
            log.warning("Prediction failed for league %s: %s", league_id, exc)
            raise _http_error(exc) from exc
        return [p.to_dict() for p in predictions]

    def simulate(self, league_id: str, payload: SimulateLeagueRequest) -> dict[str, Any]:
        league = self._league(league_id)
        before = League.from_dict(league.to_dict())
        try:
            result = league.simulate_weeks(play_all=payload.play_all_fixture, rng=self._rng)
        except LeagueError as exc:
            raise _http_error(exc) from exc
        self._commit(lambda: self.store.put(before))
        return result.to_dict()

    def reset(self, league_id: str) -> dict[str, str]:
        league = self._league(league_id)
        before = League.from_dict(league.to_dict())
        league.reset(self._rng)
        self._commit(lambda: self.store.put(before))
        return {"leagueId": league.league_id}

    def delete(self, league_id: str) -> str:
        league = self._league(league_id)
        self.store.delete(league_id)
        self._commit(lambda: self.store.put(league))
        return league_id

    def edit_match(self, league_id: str, payload: EditMatchRequest) -> list[dict[str, object]]:
        league = self._league(league_id)
        before = League.from_dict(league.to_dict())
        try:
            rows = league.edit_match(
                payload.match_week,
                payload.home,
                payload.away,
                payload.home_score,
                payload.away_score,
            )
        except LeagueError as exc:
            raise _http_error(exc) from exc
        self._commit(lambda: self.store.put(before))
        return [row.to_dict() for row in rows]


def create_app(service: LeagueService | None = None) -> FastAPI:
    service = service or LeagueService()
    configure_logging(service.settings.log_level)
    app = FastAPI(title="League Sim API", version="0.1.0")
    app.state.service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=service.settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/v1/league")
    def league_ids() -> list[dict[str, str]]:
        with service._lock:
            return service.list_leagues()

    @app.post("/api/v1/league")
    def create_league(payload: CreateLeagueRequest) -> dict[str, str]:
        with service._lock:
            return service.create_league(payload)

    @app.get("/api/v1/league/{league_id}/standing")
    def standing(league_id: str) -> list[dict[str, object]]:
        with service._lock:
            return service.standings(league_id)

    @app.get("/api/v1/league/{league_id}/fixtures")
    def fixtures(league_id: str) -> dict[str, Any]:
        with service._lock:
            return service.fixtures(league_id)

    @app.get("/api/v1/league/{league_id}/predict")
    def predict(league_id: str) -> list[dict[str, object]]:
        with service._lock:
            return service.predict(league_id)

    @app.get("/api/v1/league/{league_id}/matchResults")
    def match_results(league_id: str) -> list[dict[str, object]]:
        with service._lock:
            return service.match_results(league_id)

    @app.post("/api/v1/league/{league_id}/simulation")
    def simulation(league_id: str, payload: SimulateLeagueRequest) -> dict[str, Any]:
        with service._lock:
            return service.simulate(league_id, payload)

    @app.post("/api/v1/league/{league_id}/reset")
    def reset(league_id: str) -> dict[str, str]:
        with service._lock:
            return service.reset(league_id)

    @app.delete("/api/v1/league/{league_id}")
    def delete_league(league_id: str) -> str:
        with service._lock:
            return service.delete(league_id)

    @app.put("/api/v1/league/{league_id}")
    def edit_match(league_id: str, payload: EditMatchRequest) -> list[dict[str, object]]:
        with service._lock:
            return service.edit_match(league_id, payload)

    return app

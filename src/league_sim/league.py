from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from .config import DRAW_MARKER, WEIGHT_POINTS, WEIGHT_STRENGTH
from .engine import apply_outcome, outcome_from_score, score_line, simulate_match
from .errors import InvalidArgumentError, NotFoundError
from .logger import get_logger
from .models import MatchRecord, PredictedStanding, SimulationResult, StandingsRow, Team, Week
from .predict import predict_championship
from .roster import create_standings_table, generate_roster
from .schedule import generate_fixtures

log = get_logger(__name__)


@dataclass(slots=True)
class League:
    """One league's mutable unit: teams, standings, schedule and match records.

    Teams and standings rows are owned tables keyed by team name; every
    mutation goes through :meth:`team` and :meth:`row`. The engine does no
    locking, so callers serialise access to a single league.
    """

    league_id: str
    name: str
    teams: dict[str, Team] = field(default_factory=dict)
    standings: dict[str, StandingsRow] = field(default_factory=dict)
    weeks: list[Week] = field(default_factory=list)
    matches: list[MatchRecord] = field(default_factory=list)
    current_week: int = 0

    @classmethod
    def create(
        cls,
        name: str,
        team_count: int,
        rng: random.Random | None = None,
        league_id: str | None = None,
    ) -> League:
        league = cls(league_id=league_id or str(uuid4()), name=name)
        league._setup_season(team_count, rng or random.Random())
        log.info("Created league %s (%s) with %d teams", league.name, league.league_id, team_count)
        return league

    def reset(self, rng: random.Random | None = None) -> None:
        self._setup_season(len(self.teams), rng or random.Random())
        log.info("Reset league %s", self.league_id)

    def _setup_season(self, team_count: int, rng: random.Random) -> None:
        roster = generate_roster(team_count, rng, league_id=self.league_id)
        self.teams = {team.name: team for team in roster}
        self.standings = create_standings_table(roster, league_id=self.league_id)
        self.weeks = generate_fixtures(roster)
        self.matches = [
            MatchRecord(league_id=self.league_id, week=week.number, home=m.home, away=m.away)
            for week in self.weeks
            for m in week.matches
        ]
        self.current_week = 0

    @property
    def total_weeks(self) -> int:
        return len(self.weeks)

    def is_complete(self) -> bool:
        return self.current_week >= self.total_weeks

    def team(self, team_name: str) -> Team:
        team = self.teams.get(team_name)
        if team is None:
            raise NotFoundError(f"Team {team_name!r} not found in league {self.league_id}.")
        return team

    def row(self, team_name: str) -> StandingsRow:
        row = self.standings.get(team_name)
        if row is None:
            raise NotFoundError(f"No standings row for {team_name!r} in league {self.league_id}.")
        return row

    def match(self, week: int, home: str, away: str) -> MatchRecord:
        for record in self.matches:
            if record.key == (week, home, away):
                return record
        raise NotFoundError(f"No match {home} vs {away} in week {week} of league {self.league_id}.")

    def upcoming_fixtures(self) -> list[Week]:
        return [week for week in self.weeks if week.number > self.current_week]

    def played_fixtures(self) -> list[Week]:
        return [week for week in self.weeks if week.number <= self.current_week]

    def played_matches(self) -> list[MatchRecord]:
        return [record for record in self.matches if record.is_played]

    def get_standings(self) -> list[StandingsRow]:
        return sorted(
            self.standings.values(),
            key=lambda r: (r.points, r.diff, r.goals),
            reverse=True,
        )

    def _snapshot(self) -> dict[str, Any]:
        return {
            "teams": {name: Team.from_dict(team.to_dict()) for name, team in self.teams.items()},
            "standings": {name: StandingsRow.from_dict(row.to_dict()) for name, row in self.standings.items()},
            "matches": [MatchRecord.from_dict(record.to_dict()) for record in self.matches],
            "current_week": self.current_week,
        }

    def _restore(self, snapshot: dict[str, Any]) -> None:
        self.teams = snapshot["teams"]
        self.standings = snapshot["standings"]
        self.matches = snapshot["matches"]
        self.current_week = snapshot["current_week"]

    def simulate_weeks(self, play_all: bool = False, rng: random.Random | None = None) -> SimulationResult:
        """Play the next upcoming week, or every remaining week when ``play_all``.

        Nothing left to play is a normal, empty result. A failure part-way
        through restores teams, standings and match records to their state
        before the call.
        """
        rng = rng or random.Random()
        upcoming = sorted(self.upcoming_fixtures(), key=lambda w: w.number)
        if not upcoming:
            return SimulationResult(played_fixtures=self.played_fixtures())
        to_play = upcoming if play_all else upcoming[:1]

        snapshot = self._snapshot()
        played: list[MatchRecord] = []
        try:
            for week in to_play:
                for fixture in week.matches:
                    home = self.team(fixture.home)
                    away = self.team(fixture.away)
                    self.row(fixture.home)
                    self.row(fixture.away)
                    record = self.match(week.number, fixture.home, fixture.away)

                    outcome = simulate_match(home, away, rng)
                    apply_outcome(outcome, self.teams, self.standings)
                    record.home_score, record.away_score, record.winner = score_line(outcome, fixture.home)
                    record.is_played = True
                    played.append(record)
                self.current_week = week.number
                log.debug("League %s: played week %d (%d matches)", self.league_id, week.number, len(week.matches))
        except Exception:
            self._restore(snapshot)
            raise

        log.info(
            "League %s: simulated %d week(s), %d match(es), now at week %d/%d",
            self.league_id,
            len(to_play),
            len(played),
            self.current_week,
            self.total_weeks,
        )
        return SimulationResult(
            played_matches=played,
            upcoming_fixtures=self.upcoming_fixtures(),
            played_fixtures=self.played_fixtures(),
        )

    def edit_match(self, week: int, home: str, away: str, home_score: int, away_score: int) -> list[StandingsRow]:
        """Replace a recorded result and rebalance standings and team form.

        The old result is fully reverted before the new one is applied, so
        re-entering the original score leaves everything unchanged apart from
        stamina or morale that was pinned at 0 or 100.
        """
        record = self.match(week, home, away)
        if not record.is_played:
            raise InvalidArgumentError(f"Match {home} vs {away} in week {week} has not been played yet.")
        home_team = self.team(home)
        away_team = self.team(away)
        self.row(home)
        self.row(away)
        new_outcome = outcome_from_score(home_team, away_team, home_score, away_score)

        snapshot = self._snapshot()
        try:
            for side in (home, away):
                result, goals_for, goals_against = record.result_for(side)
                self.row(side).revert_result(result, goals_for, goals_against)
                self.team(side).revert_match_effect(result)

            apply_outcome(new_outcome, self.teams, self.standings)
            record.home_score = home_score
            record.away_score = away_score
            record.winner = DRAW_MARKER if new_outcome.is_draw else new_outcome.winner.name
            record.is_played = True
        except Exception:
            self._restore(snapshot)
            raise

        log.info(
            "League %s: week %d %s vs %s corrected to %d-%d",
            self.league_id,
            week,
            home,
            away,
            home_score,
            away_score,
        )
        return self.get_standings()

    def predict(
        self,
        weight_points: float = WEIGHT_POINTS,
        weight_strength: float = WEIGHT_STRENGTH,
    ) -> list[PredictedStanding]:
        return predict_championship(
            self.get_standings(),
            self.teams,
            weight_points=weight_points,
            weight_strength=weight_strength,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "leagueId": self.league_id,
            "leagueName": self.name,
            "currentWeek": self.current_week,
            "totalWeeks": self.total_weeks,
            "teams": [team.to_dict() for team in self.teams.values()],
            "standings": [row.to_dict() for row in self.standings.values()],
            "fixtures": [week.to_dict() for week in self.weeks],
            "matches": [record.to_dict() for record in self.matches],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> League:
        teams = [Team.from_dict(t) for t in raw.get("teams", []) if isinstance(t, dict)]
        rows = [StandingsRow.from_dict(r) for r in raw.get("standings", []) if isinstance(r, dict)]
        weeks = [Week.from_dict(w) for w in raw.get("fixtures", []) if isinstance(w, dict)]
        matches = [MatchRecord.from_dict(m) for m in raw.get("matches", []) if isinstance(m, dict)]
        league = cls(
            league_id=str(raw["leagueId"]),
            name=str(raw.get("leagueName", "")),
            teams={team.name: team for team in teams},
            standings={row.team_name: row for row in rows},
            weeks=weeks,
            matches=matches,
        )
        league.current_week = max(0, min(int(raw.get("currentWeek", 0) or 0), league.total_weeks))
        return league

from __future__ import annotations

from dataclasses import dataclass, field

from .config import (
    CLAMP_HIGH,
    CLAMP_LOW,
    DRAW_MARKER,
    MORALE_SWING,
    POINTS_DRAW,
    POINTS_WIN,
    STAMINA_COST,
)

RESULT_WIN = "W"
RESULT_DRAW = "D"
RESULT_LOSS = "L"


def _clamp(value: float, low: float = CLAMP_LOW, high: float = CLAMP_HIGH) -> float:
    return max(low, min(high, value))


@dataclass(slots=True)
class Team:
    name: str
    attack_power: float = 0.0
    defense_power: float = 0.0
    stamina: float = 0.0
    morale: float = 0.0
    league_id: str = ""

    def apply_match_effect(self, result: str) -> None:
        self.stamina = _clamp(self.stamina - STAMINA_COST)
        if result == RESULT_WIN:
            self.morale = _clamp(self.morale + MORALE_SWING)
        elif result == RESULT_LOSS:
            self.morale = _clamp(self.morale - MORALE_SWING)

    def revert_match_effect(self, result: str) -> None:
        # Lossy at the clamp boundaries: a value pinned at 0 or 100 does not remember its overflow.
        self.stamina = _clamp(self.stamina + STAMINA_COST)
        if result == RESULT_WIN:
            self.morale = _clamp(self.morale - MORALE_SWING)
        elif result == RESULT_LOSS:
            self.morale = _clamp(self.morale + MORALE_SWING)

    def to_dict(self) -> dict[str, object]:
        return {
            "leagueId": self.league_id,
            "teamName": self.name,
            "attackPower": self.attack_power,
            "defensePower": self.defense_power,
            "morale": self.morale,
            "stamina": self.stamina,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> Team:
        return cls(
            name=str(raw["teamName"]),
            attack_power=float(raw.get("attackPower", 0.0)),
            defense_power=float(raw.get("defensePower", 0.0)),
            stamina=float(raw.get("stamina", 0.0)),
            morale=float(raw.get("morale", 0.0)),
            league_id=str(raw.get("leagueId", "")),
        )


@dataclass(slots=True)
class StandingsRow:
    team_name: str
    league_id: str = ""
    goals: int = 0
    against: int = 0
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    points: int = 0

    @property
    def diff(self) -> int:
        return self.goals - self.against

    def register_result(self, result: str, goals_for: int, goals_against: int) -> None:
        self.goals += goals_for
        self.against += goals_against
        self.played += 1
        if result == RESULT_WIN:
            self.wins += 1
            self.points += POINTS_WIN
        elif result == RESULT_DRAW:
            self.draws += 1
            self.points += POINTS_DRAW
        else:
            self.losses += 1

    def revert_result(self, result: str, goals_for: int, goals_against: int) -> None:
        self.goals -= goals_for
        self.against -= goals_against
        self.played -= 1
        if result == RESULT_WIN:
            self.wins -= 1
            self.points -= POINTS_WIN
        elif result == RESULT_DRAW:
            self.draws -= 1
            self.points -= POINTS_DRAW
        else:
            self.losses -= 1

    def to_dict(self) -> dict[str, object]:
        return {
            "leagueId": self.league_id,
            "teamName": self.team_name,
            "goals": self.goals,
            "against": self.against,
            "diff": self.diff,
            "played": self.played,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "points": self.points,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> StandingsRow:
        return cls(
            team_name=str(raw["teamName"]),
            league_id=str(raw.get("leagueId", "")),
            goals=int(raw.get("goals", 0)),
            against=int(raw.get("against", 0)),
            played=int(raw.get("played", 0)),
            wins=int(raw.get("wins", 0)),
            draws=int(raw.get("draws", 0)),
            losses=int(raw.get("losses", 0)),
            points=int(raw.get("points", 0)),
        )


@dataclass(slots=True)
class Fixture:
    home: str
    away: str


@dataclass(slots=True)
class Week:
    number: int
    matches: list[Fixture] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "number": self.number,
            "matches": [{"home": m.home, "away": m.away} for m in self.matches],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> Week:
        matches = raw.get("matches") or []
        return cls(
            number=int(raw["number"]),
            matches=[Fixture(home=str(m["home"]), away=str(m["away"])) for m in matches],
        )


@dataclass(slots=True)
class MatchOutcome:
    winner: Team
    loser: Team
    is_draw: bool
    winner_goals: int
    loser_goals: int

    def result_for(self, team_name: str) -> tuple[str, int, int]:
        """Return (result, goals_for, goals_against) from one side's point of view."""
        if team_name == self.winner.name:
            return (RESULT_DRAW if self.is_draw else RESULT_WIN), self.winner_goals, self.loser_goals
        return (RESULT_DRAW if self.is_draw else RESULT_LOSS), self.loser_goals, self.winner_goals


@dataclass(slots=True)
class MatchRecord:
    league_id: str
    week: int
    home: str
    away: str
    home_score: int = 0
    away_score: int = 0
    winner: str = ""
    is_played: bool = False

    @property
    def key(self) -> tuple[int, str, str]:
        return self.week, self.home, self.away

    @property
    def is_draw(self) -> bool:
        return self.winner == DRAW_MARKER

    def result_for(self, team_name: str) -> tuple[str, int, int]:
        if team_name == self.home:
            goals_for, goals_against = self.home_score, self.away_score
        else:
            goals_for, goals_against = self.away_score, self.home_score
        if self.is_draw:
            return RESULT_DRAW, goals_for, goals_against
        if self.winner == team_name:
            return RESULT_WIN, goals_for, goals_against
        return RESULT_LOSS, goals_for, goals_against

    def to_dict(self) -> dict[str, object]:
        return {
            "leagueId": self.league_id,
            "matchWeek": self.week,
            "home": self.home,
            "homeScore": self.home_score,
            "away": self.away,
            "awayScore": self.away_score,
            "winner": self.winner,
            "isPlayed": self.is_played,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> MatchRecord:
        return cls(
            league_id=str(raw.get("leagueId", "")),
            week=int(raw["matchWeek"]),
            home=str(raw["home"]),
            away=str(raw["away"]),
            home_score=int(raw.get("homeScore", 0)),
            away_score=int(raw.get("awayScore", 0)),
            winner=str(raw.get("winner", "")),
            is_played=bool(raw.get("isPlayed", False)),
        )


@dataclass(slots=True)
class PredictedStanding:
    team_name: str
    points: int
    strength: float
    odds: float
    eliminated: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "teamName": self.team_name,
            "points": self.points,
            "strength": self.strength,
            "odds": self.odds,
            "eliminated": self.eliminated,
        }


@dataclass(slots=True)
class SimulationResult:
    played_matches: list[MatchRecord] = field(default_factory=list)
    upcoming_fixtures: list[Week] = field(default_factory=list)
    played_fixtures: list[Week] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "matches": [m.to_dict() for m in self.played_matches],
            "upcomingFixtures": [w.to_dict() for w in self.upcoming_fixtures],
            "playedFixtures": [w.to_dict() for w in self.played_fixtures],
        }

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .config import POINTS_WIN, WEIGHT_POINTS, WEIGHT_STRENGTH
from .engine import calculate_strength
from .errors import NotFoundError
from .models import PredictedStanding, StandingsRow, Team


@dataclass(slots=True)
class _ScoredTeam:
    row: StandingsRow
    strength: float
    score: float
    remaining: int
    adjusted: float = 0.0


def _leader_points(standings: Sequence[StandingsRow]) -> int:
    return max(row.points for row in standings)


def _season_leader(scored: list[_ScoredTeam]) -> _ScoredTeam:
    leader = scored[0]
    for entry in scored[1:]:
        if entry.row.points > leader.row.points:
            leader = entry
        elif entry.row.points == leader.row.points and entry.row.diff > leader.row.diff:
            leader = entry
    return leader


def predict_championship(
    standings: Sequence[StandingsRow],
    teams: Mapping[str, Team],
    weight_points: float = WEIGHT_POINTS,
    weight_strength: float = WEIGHT_STRENGTH,
) -> list[PredictedStanding]:
    """Estimate title odds for every team in ``standings``.

    Each side gets a blended score of points and current strength, normalised
    against the league average. Teams that cannot reach the leader's points even
    by winning every remaining match are eliminated with zero odds. Once every
    match has been played the table leader takes the title outright.
    """
    if not standings:
        return []

    total_teams = len(standings)
    leader_points = _leader_points(standings)

    scored: list[_ScoredTeam] = []
    for row in standings:
        team = teams.get(row.team_name)
        if team is None:
            raise NotFoundError(f"No team named {row.team_name!r} for standings row.")
        strength = calculate_strength(team)
        scored.append(
            _ScoredTeam(
                row=row,
                strength=strength,
                score=row.points * weight_points + strength * weight_strength,
                remaining=(total_teams - 1) - row.played,
            )
        )

    if all(entry.remaining <= 0 for entry in scored):
        leader = _season_leader(scored)
        return [
            PredictedStanding(
                team_name=entry.row.team_name,
                points=entry.row.points,
                strength=entry.strength,
                odds=100.0 if entry is leader else 0.0,
                eliminated=entry is not leader,
            )
            for entry in scored
        ]

    avg_score = sum(entry.score for entry in scored) / len(scored)
    total_adjusted = 0.0
    eliminated: set[str] = set()
    for entry in scored:
        max_possible_points = entry.row.points + entry.remaining * POINTS_WIN
        if max_possible_points < leader_points:
            eliminated.add(entry.row.team_name)
            entry.adjusted = 0.0
        elif avg_score > 0:
            entry.adjusted = entry.score / avg_score
        total_adjusted += entry.adjusted

    result: list[PredictedStanding] = []
    for entry in scored:
        odds = 0.0
        if entry.row.team_name not in eliminated and total_adjusted > 0:
            odds = entry.adjusted / total_adjusted * 100
        result.append(
            PredictedStanding(
                team_name=entry.row.team_name,
                points=entry.row.points,
                strength=entry.strength,
                odds=odds,
                eliminated=entry.row.team_name in eliminated,
            )
        )
    return result

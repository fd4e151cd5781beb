from __future__ import annotations

import random
from copy import copy

from .config import (
    DRAW_CHANCE,
    DRAW_GOAL_CHOICES,
    DRAW_MARKER,
    HOME_ADVANTAGE,
    STRENGTH_WEIGHTS,
    WINNER_GOALS_MAX,
    WINNER_GOALS_MIN,
)
from .errors import DegenerateStateError, InvalidArgumentError
from .models import MatchOutcome, StandingsRow, Team


def calculate_strength(team: Team) -> float:
    return (
        team.attack_power * STRENGTH_WEIGHTS["attack_power"]
        + team.defense_power * STRENGTH_WEIGHTS["defense_power"]
        + team.morale * STRENGTH_WEIGHTS["morale"]
        + team.stamina * STRENGTH_WEIGHTS["stamina"]
    )


def home_win_probability(home_score: float, away_score: float) -> float:
    total = home_score + away_score
    if total <= 0:
        raise DegenerateStateError("Both teams have zero strength; win probability is undefined.")
    return home_score / total


def simulate_match(home: Team, away: Team, rng: random.Random | None = None) -> MatchOutcome:
    """Draw one result for ``home`` against ``away``.

    A flat 20% of matches are drawn regardless of strength. Otherwise the home
    side wins in proportion to its share of combined strength, boosted by the
    home-advantage multiplier. The outcome holds pre-match copies of both
    teams; callers apply it through :func:`apply_outcome`.
    """
    rng = rng or random.Random()
    home, away = copy(home), copy(away)
    home_score = calculate_strength(home) * HOME_ADVANTAGE
    away_score = calculate_strength(away)

    if rng.random() < DRAW_CHANCE:
        goals = rng.randrange(DRAW_GOAL_CHOICES)
        return MatchOutcome(winner=home, loser=away, is_draw=True, winner_goals=goals, loser_goals=goals)

    try:
        home_chance = home_win_probability(home_score, away_score)
    except DegenerateStateError:
        # Two zero-strength sides: settle the decisive result with a coin flip.
        home_chance = 0.5
    home_wins = rng.random() < home_chance

    winner_goals = rng.randint(WINNER_GOALS_MIN, WINNER_GOALS_MAX)
    loser_goals = rng.randrange(winner_goals)

    if home_wins:
        return MatchOutcome(winner=home, loser=away, is_draw=False, winner_goals=winner_goals, loser_goals=loser_goals)
    return MatchOutcome(winner=away, loser=home, is_draw=False, winner_goals=winner_goals, loser_goals=loser_goals)


def outcome_from_score(home: Team, away: Team, home_score: int, away_score: int) -> MatchOutcome:
    if home_score < 0 or away_score < 0:
        raise InvalidArgumentError(f"Scores must be non-negative, got {home_score}-{away_score}.")
    home, away = copy(home), copy(away)
    if home_score > away_score:
        return MatchOutcome(winner=home, loser=away, is_draw=False, winner_goals=home_score, loser_goals=away_score)
    if home_score < away_score:
        return MatchOutcome(winner=away, loser=home, is_draw=False, winner_goals=away_score, loser_goals=home_score)
    return MatchOutcome(winner=home, loser=away, is_draw=True, winner_goals=home_score, loser_goals=away_score)


def apply_outcome(outcome: MatchOutcome, teams: dict[str, Team], rows: dict[str, StandingsRow]) -> None:
    """Write ``outcome`` into the owned team and standings tables.

    The outcome carries team values; mutation goes through the table entries
    looked up by name so the league's own objects are updated.
    """
    for side in (outcome.winner, outcome.loser):
        result, goals_for, goals_against = outcome.result_for(side.name)
        rows[side.name].register_result(result, goals_for, goals_against)
        teams[side.name].apply_match_effect(result)


def score_line(outcome: MatchOutcome, home_name: str) -> tuple[int, int, str]:
    """Return (home_score, away_score, winner marker) for a fixture."""
    if outcome.is_draw:
        return outcome.winner_goals, outcome.loser_goals, DRAW_MARKER
    if outcome.winner.name == home_name:
        return outcome.winner_goals, outcome.loser_goals, outcome.winner.name
    return outcome.loser_goals, outcome.winner_goals, outcome.winner.name

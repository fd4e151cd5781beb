import random

import pytest

from league_sim.errors import NotFoundError
from league_sim.league import League
from league_sim.models import StandingsRow, Team
from league_sim.predict import predict_championship


def _teams(names, value: float = 80.0) -> dict[str, Team]:
    return {
        n: Team(name=n, attack_power=value, defense_power=value, stamina=value, morale=value)
        for n in names
    }


def _row(name: str, points: int, played: int, goals: int = 0, against: int = 0) -> StandingsRow:
    return StandingsRow(team_name=name, points=points, played=played, goals=goals, against=against)


def test_empty_standings() -> None:
    assert predict_championship([], {}) == []


def test_season_over_leader_takes_all() -> None:
    teams = _teams("ABCD")
    rows = [_row("A", 9, 3), _row("B", 6, 3), _row("C", 3, 3), _row("D", 0, 3)]
    preds = {p.team_name: p for p in predict_championship(rows, teams)}
    assert preds["A"].odds == 100.0 and not preds["A"].eliminated
    for name in "BCD":
        assert preds[name].odds == 0.0
        assert preds[name].eliminated
    assert preds["A"].strength == pytest.approx(80.0)
    assert preds["B"].points == 6


def test_season_over_tie_breaks() -> None:
    teams = _teams("ABC")
    rows = [_row("A", 4, 2, goals=3, against=2), _row("B", 4, 2, goals=5, against=1), _row("C", 0, 2)]
    preds = {p.team_name: p for p in predict_championship(rows, teams)}
    assert preds["B"].odds == 100.0
    assert preds["A"].eliminated

    rows = [_row("A", 4, 2, goals=3, against=1), _row("B", 4, 2, goals=4, against=2), _row("C", 0, 2)]
    preds = {p.team_name: p for p in predict_championship(rows, teams)}
    assert preds["A"].odds == 100.0
    assert preds["B"].eliminated


def test_mid_season_elimination_and_blend() -> None:
    teams = _teams("ABCD")
    rows = [_row("A", 6, 2), _row("B", 3, 2), _row("C", 0, 2), _row("D", 0, 2)]
    preds = {p.team_name: p for p in predict_championship(rows, teams)}

    # C and D can reach at most 3 points with one match left.
    assert preds["C"].eliminated and preds["C"].odds == 0.0
    assert preds["D"].eliminated and preds["D"].odds == 0.0
    assert not preds["A"].eliminated and not preds["B"].eliminated

    score_a = 6 * 0.4 + 80 * 0.6
    score_b = 3 * 0.4 + 80 * 0.6
    assert preds["A"].odds == pytest.approx(score_a / (score_a + score_b) * 100)
    assert preds["B"].odds == pytest.approx(score_b / (score_a + score_b) * 100)
    assert sum(p.odds for p in preds.values()) == pytest.approx(100.0)


def test_custom_weights() -> None:
    teams = _teams("AB")
    teams["B"].attack_power = 40.0
    rows = [_row("A", 0, 0), _row("B", 0, 0)]
    preds = {p.team_name: p for p in predict_championship(rows, teams, weight_points=1.0, weight_strength=0.0)}
    # Strength carries no weight and nobody has points yet.
    assert preds["A"].odds == preds["B"].odds == 0.0
    assert not preds["A"].eliminated

    preds = {p.team_name: p for p in predict_championship(rows, teams, weight_points=0.0, weight_strength=1.0)}
    assert preds["A"].odds > preds["B"].odds


def test_all_zero_scores_give_zero_odds() -> None:
    teams = _teams("ABC", value=0.0)
    rows = [_row(n, 0, 0) for n in "ABC"]
    preds = predict_championship(rows, teams)
    assert [p.odds for p in preds] == [0.0, 0.0, 0.0]
    assert not any(p.eliminated for p in preds)


def test_missing_team_is_not_found() -> None:
    with pytest.raises(NotFoundError):
        predict_championship([_row("A", 0, 0)], {})


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_odds_bounds_through_a_season(seed: int) -> None:
    rng = random.Random(seed)
    league = League.create("Odds", 6, rng)
    while True:
        preds = league.predict()
        assert len(preds) == 6
        for pred in preds:
            assert 0.0 <= pred.odds <= 100.0
            if pred.eliminated:
                assert pred.odds == 0.0
        assert sum(p.odds for p in preds) == pytest.approx(100.0)
        if league.is_complete():
            break
        league.simulate_weeks(rng=rng)

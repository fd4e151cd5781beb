import random
from collections import Counter

import pytest

import league_sim.league as league_module
from league_sim.errors import InvalidArgumentError, NotFoundError
from league_sim.league import League


def _league(teams: int = 4, seed: int = 11) -> League:
    return League.create("Test League", teams, random.Random(seed), league_id="lg-1")


def _steady_form(league: League, value: float = 50.0) -> None:
    for team in league.teams.values():
        team.stamina = value
        team.morale = value


def test_create_sets_up_zeroed_season() -> None:
    league = _league()
    assert league.total_weeks == 3
    assert league.current_week == 0
    assert len(league.matches) == 6
    assert not league.played_matches()
    assert len(league.upcoming_fixtures()) == 3
    assert league.played_fixtures() == []
    for team in league.teams.values():
        assert team.league_id == "lg-1"
        for attr in (team.attack_power, team.defense_power, team.stamina, team.morale):
            assert 70 <= attr <= 100
    assert all(row.played == row.points == row.goals == 0 for row in league.standings.values())


def test_create_rejects_negative_team_count() -> None:
    with pytest.raises(InvalidArgumentError):
        League.create("Bad", -1, random.Random(1))


def test_simulate_single_week() -> None:
    league = _league()
    result = league.simulate_weeks(play_all=False, rng=random.Random(5))
    assert league.current_week == 1
    assert len(result.played_matches) == 2
    assert all(m.is_played and m.week == 1 for m in result.played_matches)
    assert [w.number for w in result.upcoming_fixtures] == [2, 3]
    assert [w.number for w in result.played_fixtures] == [1]
    assert all(row.played == 1 for row in league.standings.values())


@pytest.mark.parametrize("teams", [4, 5, 8])
def test_full_season_bookkeeping(teams: int) -> None:
    league = _league(teams=teams)
    result = league.simulate_weeks(play_all=True, rng=random.Random(7))
    assert league.is_complete()
    assert len(result.played_matches) == teams * (teams - 1) // 2
    assert result.upcoming_fixtures == []

    appearances = Counter()
    for match in league.played_matches():
        appearances[match.home] += 1
        appearances[match.away] += 1
        if match.winner == "draw":
            assert match.home_score == match.away_score
        elif match.winner == match.home:
            assert match.home_score > match.away_score
        else:
            assert match.winner == match.away
            assert match.away_score > match.home_score

    for name, row in league.standings.items():
        assert row.played == row.wins + row.draws + row.losses == teams - 1
        assert row.played == appearances[name]
        assert row.points == row.wins * 3 + row.draws
        assert row.diff == row.goals - row.against
    for team in league.teams.values():
        assert 0 <= team.stamina <= 100
        assert 0 <= team.morale <= 100
    assert sum(r.goals for r in league.standings.values()) == sum(r.against for r in league.standings.values())


def test_simulate_after_season_is_empty_result() -> None:
    league = _league()
    league.simulate_weeks(play_all=True, rng=random.Random(1))
    before = league.to_dict()
    result = league.simulate_weeks(play_all=False, rng=random.Random(2))
    assert result.played_matches == []
    assert result.upcoming_fixtures == []
    assert league.to_dict() == before


def test_single_team_league_consumes_empty_week() -> None:
    league = _league(teams=1)
    assert league.total_weeks == 1
    result = league.simulate_weeks(rng=random.Random(1))
    assert result.played_matches == []
    assert league.is_complete()


def test_simulation_rolls_back_on_failure(monkeypatch) -> None:
    league = _league()
    before = league.to_dict()
    real = league_module.simulate_match
    calls = {"n": 0}

    def flaky(home, away, rng=None):
        calls["n"] += 1
        if calls["n"] > 1:
            raise RuntimeError("boom")
        return real(home, away, rng)

    monkeypatch.setattr(league_module, "simulate_match", flaky)
    with pytest.raises(RuntimeError):
        league.simulate_weeks(play_all=True, rng=random.Random(3))
    assert league.to_dict() == before


def test_edit_with_original_scores_is_a_no_op() -> None:
    league = _league()
    _steady_form(league)
    league.simulate_weeks(rng=random.Random(9))
    before = league.to_dict()

    for match in league.played_matches():
        league.edit_match(match.week, match.home, match.away, match.home_score, match.away_score)

    assert league.to_dict() == before


def test_edit_rescores_both_rows() -> None:
    league = _league()
    _steady_form(league)
    league.simulate_weeks(rng=random.Random(4))
    match = league.played_matches()[0]
    home_before = league.row(match.home).points
    away_before = league.row(match.away).points
    home_result = 3 if match.winner == match.home else (1 if match.winner == "draw" else 0)
    away_result = 3 if match.winner == match.away else (1 if match.winner == "draw" else 0)

    league.edit_match(match.week, match.home, match.away, 0, 4)

    record = league.match(match.week, match.home, match.away)
    assert (record.home_score, record.away_score, record.winner) == (0, 4, match.away)
    home_row, away_row = league.row(match.home), league.row(match.away)
    assert home_row.points == home_before - home_result
    assert away_row.points == away_before - away_result + 3
    assert (home_row.goals, home_row.against) == (0, 4)
    assert (away_row.goals, away_row.against) == (4, 0)
    assert (home_row.losses, away_row.wins) == (1, 1)
    assert league.team(match.home).morale == 45
    assert league.team(match.away).morale == 55

    league.edit_match(match.week, match.home, match.away, 2, 2)
    assert league.match(match.week, match.home, match.away).winner == "draw"
    assert (home_row.draws, home_row.losses, away_row.draws, away_row.wins) == (1, 0, 1, 0)
    assert home_row.points == home_before - home_result + 1


def test_edit_errors_leave_state_untouched() -> None:
    league = _league()
    league.simulate_weeks(rng=random.Random(2))
    played = league.played_matches()[0]
    unplayed = next(m for m in league.matches if not m.is_played)
    before = league.to_dict()

    with pytest.raises(NotFoundError):
        league.edit_match(1, "Team A", "Nobody", 1, 0)
    with pytest.raises(InvalidArgumentError):
        league.edit_match(unplayed.week, unplayed.home, unplayed.away, 1, 0)
    with pytest.raises(InvalidArgumentError):
        league.edit_match(played.week, played.home, played.away, -2, 0)
    assert league.to_dict() == before


def test_missing_team_lookup_raises() -> None:
    league = _league()
    with pytest.raises(NotFoundError):
        league.team("Ghost")
    with pytest.raises(NotFoundError):
        league.row("Ghost")


def test_reset_starts_new_season() -> None:
    league = _league(teams=6)
    league.simulate_weeks(play_all=True, rng=random.Random(8))
    league.reset(random.Random(99))
    assert len(league.teams) == 6
    assert league.current_week == 0
    assert league.total_weeks == 5
    assert not league.played_matches()
    assert all(row.played == 0 and row.points == 0 for row in league.standings.values())


def test_standings_sorted_by_points_then_diff() -> None:
    league = _league()
    league.simulate_weeks(play_all=True, rng=random.Random(21))
    table = league.get_standings()
    keys = [(r.points, r.diff, r.goals) for r in table]
    assert keys == sorted(keys, reverse=True)


def test_dict_round_trip_preserves_progress() -> None:
    league = _league(teams=5)
    league.simulate_weeks(rng=random.Random(6))
    clone = League.from_dict(league.to_dict())
    assert clone.to_dict() == league.to_dict()
    assert clone.current_week == 1

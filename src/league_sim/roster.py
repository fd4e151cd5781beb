from __future__ import annotations

import random
from string import ascii_uppercase

from .config import ATTRIBUTE_MAX, ATTRIBUTE_MIN
from .errors import InvalidArgumentError
from .models import StandingsRow, Team


def parse_team_count(value: object, max_count: int | None = None) -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Team count must be a whole number, got {value!r}.")
    try:
        count = int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"Team count must be a whole number, got {value!r}.") from exc
    if count < 0:
        raise InvalidArgumentError(f"Team count cannot be negative, got {count}.")
    if max_count is not None and count > max_count:
        raise InvalidArgumentError(f"Team count cannot exceed {max_count}, got {count}.")
    return count


def team_label(index: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA' (spreadsheet column style)."""
    label = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        label = ascii_uppercase[rem] + label
    return label


def _roll_attribute(rng: random.Random) -> float:
    return rng.uniform(ATTRIBUTE_MIN, ATTRIBUTE_MAX)


def generate_roster(count: int, rng: random.Random | None = None, league_id: str = "") -> list[Team]:
    if not isinstance(count, int) or isinstance(count, bool):
        count = parse_team_count(count)
    if count < 0:
        raise InvalidArgumentError(f"Team count cannot be negative, got {count}.")
    rng = rng or random.Random()
    return [
        Team(
            name=f"Team {team_label(idx)}",
            attack_power=_roll_attribute(rng),
            defense_power=_roll_attribute(rng),
            stamina=_roll_attribute(rng),
            morale=_roll_attribute(rng),
            league_id=league_id,
        )
        for idx in range(count)
    ]


def create_standings_table(teams: list[Team], league_id: str = "") -> dict[str, StandingsRow]:
    return {team.name: StandingsRow(team_name=team.name, league_id=league_id) for team in teams}

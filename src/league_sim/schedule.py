from __future__ import annotations

from typing import Iterable

from .config import BYE_TEAM_NAME
from .models import Fixture, Team, Week


def generate_fixtures(teams: Iterable[Team]) -> list[Week]:
    """Build a single round-robin split into weeks.

    Circle method: index 0 stays fixed while the rest rotate one slot per round,
    so every pair meets exactly once and each team plays at most once per week.
    An odd field is padded with a ghost BYE team; its pairings are dropped but
    the week itself is still emitted.
    """
    names = [team.name for team in teams]
    if len(names) % 2 == 1 or not names:
        names.append(BYE_TEAM_NAME)

    n = len(names)
    half = n // 2
    order = list(range(n))
    weeks: list[Week] = []

    for round_idx in range(n - 1):
        matches: list[Fixture] = []
        for idx in range(half):
            home = names[order[idx]]
            away = names[order[n - 1 - idx]]
            if home == BYE_TEAM_NAME or away == BYE_TEAM_NAME:
                continue
            matches.append(Fixture(home=home, away=away))
        weeks.append(Week(number=round_idx + 1, matches=matches))

        # Keep first fixed, rotate the rest.
        order = [order[0], order[-1], *order[1:-1]]

    return weeks

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pandas as pd
import pytest

from wc26_tracker.matches import Fixture
from wc26_tracker.standings import Group, StandingEntry, Stat, Team

# After the best-thirds release date.
LIVE_NOW = pd.Timestamp("2026-06-20T12:00:00Z")
# Tournament under way, best thirds not yet released.
EARLY_NOW = pd.Timestamp("2026-06-15T12:00:00Z")
PRE_TOURNAMENT = pd.Timestamp("2026-05-01T00:00:00Z")

# Points of each group's third-placed side, group A..L.
THIRD_POINTS = [1, 4, 3, 4, 2, 3, 0, 4, 3, 1, 2, 3]
GROUP_LETTERS = [chr(ord("A") + i) for i in range(12)]


def build_entry(
    name: str,
    rank: int = 0,
    gp: int = 0,
    w: int = 0,
    d: int = 0,
    l: int = 0,
    gf: int = 0,
    ga: int = 0,
    points: Optional[int] = None,
) -> StandingEntry:
    if points is None:
        points = 3 * w + d
    values = {
        "rank": rank,
        "gamesPlayed": gp,
        "wins": w,
        "ties": d,
        "losses": l,
        "pointsFor": gf,
        "pointsAgainst": ga,
        "pointDifferential": gf - ga,
        "points": points,
    }
    return StandingEntry(
        team=Team(id=name, name=name),
        stats=[Stat(k, v, str(v)) for k, v in values.items()],
    )


def build_group(letter: str, entries: Sequence[StandingEntry]) -> Group:
    return Group(name=f"Group {letter}", entries=list(entries))


def build_twelve_groups(gp: int = 3) -> List[Group]:
    """Twelve groups of four ("A1".."L4"), sorted, with varied third-placed sides."""
    groups = []
    for letter, third_points in zip(GROUP_LETTERS, THIRD_POINTS):
        entries = [
            build_entry(f"Team {letter}1", rank=1, gp=gp, points=9),
            build_entry(f"Team {letter}2", rank=2, gp=gp, points=6),
            build_entry(f"Team {letter}3", rank=3, gp=gp, points=third_points),
            build_entry(f"Team {letter}4", rank=4, gp=gp, points=0),
        ]
        groups.append(build_group(letter, entries))
    return groups


def build_group_a() -> Group:
    return build_group(
        "A",
        [
            build_entry("Mexico", rank=1),
            build_entry("South Africa", rank=2),
            build_entry("South Korea", rank=3),
            build_entry("Czechia", rank=4),
        ],
    )


def group_fixture(match_number: int, home: str, away: str, letter: str = "A") -> Fixture:
    return Fixture(match_number=match_number, round=f"Group {letter}", home_team=home, away_team=away)


@pytest.fixture
def entry():
    return build_entry


@pytest.fixture
def group_a() -> Group:
    return build_group_a()


@pytest.fixture
def twelve_groups() -> List[Group]:
    return build_twelve_groups()


@pytest.fixture
def group_a_fixtures() -> List[Fixture]:
    return [
        group_fixture(1, "Mexico", "South Africa"),
        group_fixture(2, "South Korea", "Czechia"),
        group_fixture(3, "Mexico", "South Korea"),
        group_fixture(4, "Czechia", "South Africa"),
        group_fixture(5, "Czechia", "Mexico"),
        group_fixture(6, "South Africa", "South Korea"),
    ]


@pytest.fixture
def empty_name_map() -> Dict[str, str]:
    return {}

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Tuple

import pandas as pd

STAT_NAMES = [
    "rank",
    "gamesPlayed",
    "wins",
    "ties",
    "losses",
    "pointsFor",
    "pointsAgainst",
    "pointDifferential",
    "points",
]
DERIVED_STATS = STAT_NAMES[1:]
MISSING_RANK = 999


@dataclass
class Team:
    id: str
    name: str
    display_name: str = ""
    abbreviation: Optional[str] = None

    def __post_init__(self):
        if not self.display_name:
            self.display_name = self.name


@dataclass
class Stat:
    name: str
    value: float = 0
    display_value: Optional[str] = None


@dataclass
class StandingEntry:
    team: Team
    stats: List[Stat] = field(default_factory=list)
    group: Optional[str] = None

    def copy(self) -> "StandingEntry":
        return StandingEntry(
            team=replace(self.team),
            stats=[replace(s) for s in self.stats],
            group=self.group,
        )


@dataclass
class Group:
    name: str
    entries: List[StandingEntry] = field(default_factory=list)

    @property
    def letter(self) -> str:
        return self.name.replace("Group", "").strip()

    def copy(self) -> "Group":
        return Group(name=self.name, entries=[e.copy() for e in self.entries])


def get_stat(entry: StandingEntry, name: str) -> float:
    for stat in entry.stats:
        if stat.name == name:
            return stat.value or 0
    return 0


def set_stat(entry: StandingEntry, name: str, value: float) -> None:
    for stat in entry.stats:
        if stat.name == name:
            stat.value = value
            stat.display_value = str(value)
            return
    entry.stats.append(Stat(name=name, value=value, display_value=str(value)))


def get_rank(entry: StandingEntry) -> float:
    for stat in entry.stats:
        if stat.name == "rank" and stat.value:
            return stat.value
    return MISSING_RANK


def tiebreak_key(entry: StandingEntry) -> Tuple[float, float, float]:
    return (
        get_stat(entry, "points"),
        get_stat(entry, "pointDifferential"),
        get_stat(entry, "pointsFor"),
    )


def sort_entries(entries: Iterable[StandingEntry]) -> List[StandingEntry]:
    """Order by points, goal difference, goals for (all descending).

    Exact ties keep their input order; there is no further tie-break.
    """
    return sorted(entries, key=tiebreak_key, reverse=True)


def has_games_started(groups: Optional[List[Group]]) -> bool:
    if not groups:
        return False
    total = sum(get_stat(e, "gamesPlayed") for g in groups for e in g.entries)
    return total > 0


def find_group(groups: Optional[List[Group]], letter: str) -> Optional[Group]:
    for group in groups or []:
        if group.name.endswith(letter):
            return group
    return None


def find_entry(groups: List[Group], team_name: str) -> Optional[StandingEntry]:
    for group in groups:
        for entry in group.entries:
            if entry.team.name == team_name or entry.team.display_name == team_name:
                return entry
    return None


def standings_frame(groups: List[Group]) -> pd.DataFrame:
    rows = []
    for group in groups:
        for pos, entry in enumerate(group.entries, start=1):
            rows.append(
                {
                    "group": entry.group or group.letter,
                    "position": pos,
                    "rank": int(get_rank(entry)),
                    "team": entry.team.name,
                    "gp": int(get_stat(entry, "gamesPlayed")),
                    "w": int(get_stat(entry, "wins")),
                    "d": int(get_stat(entry, "ties")),
                    "l": int(get_stat(entry, "losses")),
                    "gf": int(get_stat(entry, "pointsFor")),
                    "ga": int(get_stat(entry, "pointsAgainst")),
                    "gd": int(get_stat(entry, "pointDifferential")),
                    "points": int(get_stat(entry, "points")),
                }
            )
    columns = ["group", "position", "rank", "team", "gp", "w", "d", "l", "gf", "ga", "gd", "points"]
    return pd.DataFrame(rows, columns=columns)

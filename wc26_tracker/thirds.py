from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

import pandas as pd

from wc26_tracker.codes import is_third_placeholder
from wc26_tracker.config import GROUP_LETTERS, QUALIFYING_THIRDS
from wc26_tracker.gates import is_past_release
from wc26_tracker.standings import (
    DERIVED_STATS,
    Group,
    StandingEntry,
    Stat,
    Team,
    has_games_started,
    set_stat,
    sort_entries,
)

DEFAULT_THIRDS_KEY = "ABCDEFGH"


def placeholder_thirds() -> List[StandingEntry]:
    entries = []
    for i, letter in enumerate(GROUP_LETTERS, start=1):
        code = f"3{letter}"
        stats = [Stat("rank", i, str(i))]
        stats.extend(Stat(name, 0, "0") for name in DERIVED_STATS)
        entries.append(
            StandingEntry(
                team=Team(id=code, name=code, display_name=code, abbreviation=f"GRP {letter}"),
                stats=stats,
                group=letter,
            )
        )
    return entries


def calculate_best_thirds(
    groups: Optional[List[Group]],
    now: Optional[pd.Timestamp] = None,
) -> List[StandingEntry]:
    """
    Rank every group's third-placed side against the others.

    Until the release date has passed and at least one group game has been
    played, returns the twelve synthetic "3A".."3L" entries instead, for
    simulated tables as well as live ones.
    """
    if not groups or not is_past_release(now) or not has_games_started(groups):
        return placeholder_thirds()

    thirds: List[StandingEntry] = []
    for group in groups:
        if len(group.entries) < 3:
            continue
        entry = group.entries[2].copy()
        entry.group = group.letter
        entry.team = replace(entry.team, abbreviation=f"GRP {group.letter}")
        thirds.append(entry)

    ranked = sort_entries(thirds)
    for pos, entry in enumerate(ranked, start=1):
        set_stat(entry, "rank", pos)
    return ranked


def _group_letter(entry: StandingEntry) -> str:
    if entry.group:
        return entry.group
    return (entry.team.abbreviation or "").replace("GRP ", "").strip()


def get_qualifying_thirds_key(best_thirds: Optional[List[StandingEntry]]) -> str:
    if not best_thirds or len(best_thirds) < QUALIFYING_THIRDS:
        return DEFAULT_THIRDS_KEY
    top = best_thirds[:QUALIFYING_THIRDS]
    if any(is_third_placeholder(e.team.name) for e in top):
        return DEFAULT_THIRDS_KEY
    return "".join(sorted(_group_letter(e) for e in top))

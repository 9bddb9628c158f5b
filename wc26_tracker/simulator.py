from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, List, Mapping, Optional, Tuple, Union

import numpy as np

from wc26_tracker.matches import STATUS_SIMULATED, Fixture, LiveResult
from wc26_tracker.reference import (
    load_available_fixtures,
    load_team_name_map,
    normalize_team_name,
)
from wc26_tracker.standings import (
    DERIVED_STATS,
    Group,
    StandingEntry,
    find_entry,
    get_stat,
    set_stat,
    sort_entries,
)

logger = logging.getLogger(__name__)

ScoreValue = Union[int, str]


@dataclass
class PendingScore:
    home: ScoreValue = ""
    away: ScoreValue = ""


SimulatedScores = Dict[int, Union[PendingScore, Mapping[str, ScoreValue]]]


def parse_goals(value: Optional[ScoreValue]) -> Optional[int]:
    """Non-negative goal count, or None while the value is blank or not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, np.integer)):
        return int(value) if value >= 0 else None
    text = str(value).strip()
    if not text.isdecimal():
        return None
    return int(text)


def parse_score(score) -> Optional[Tuple[int, int]]:
    if score is None:
        return None
    if isinstance(score, Mapping):
        home, away = score.get("home"), score.get("away")
    else:
        home, away = score.home, score.away
    home_goals = parse_goals(home)
    away_goals = parse_goals(away)
    if home_goals is None or away_goals is None:
        return None
    return home_goals, away_goals


def reset_stats(entry: StandingEntry) -> None:
    for name in DERIVED_STATS:
        set_stat(entry, name, 0)


def apply_result(entry: StandingEntry, goals_for: int, goals_against: int) -> None:
    set_stat(entry, "gamesPlayed", get_stat(entry, "gamesPlayed") + 1)
    set_stat(entry, "pointsFor", get_stat(entry, "pointsFor") + goals_for)
    set_stat(entry, "pointsAgainst", get_stat(entry, "pointsAgainst") + goals_against)
    set_stat(
        entry,
        "pointDifferential",
        get_stat(entry, "pointDifferential") + (goals_for - goals_against),
    )
    if goals_for > goals_against:
        set_stat(entry, "wins", get_stat(entry, "wins") + 1)
        set_stat(entry, "points", get_stat(entry, "points") + 3)
    elif goals_for == goals_against:
        set_stat(entry, "ties", get_stat(entry, "ties") + 1)
        set_stat(entry, "points", get_stat(entry, "points") + 1)
    else:
        set_stat(entry, "losses", get_stat(entry, "losses") + 1)


def simulate_standings(
    groups: List[Group],
    scores: SimulatedScores,
    overrides: Optional[Dict[str, str]] = None,
    fixtures: Optional[List[Fixture]] = None,
    name_map: Optional[Dict[str, str]] = None,
) -> List[Group]:
    """
    Recompute every group table from scratch using predicted scores.

    The input groups are never modified. Fixtures without a complete numeric
    score, or whose teams cannot be found in any group, contribute nothing.
    """
    overrides = overrides or {}
    if fixtures is None:
        fixtures = load_available_fixtures()
    if name_map is None:
        name_map = load_team_name_map()

    sim_groups = [g.copy() for g in groups]

    if overrides:
        for group in sim_groups:
            for entry in group.entries:
                resolved = overrides.get(entry.team.name)
                if resolved:
                    entry.team.name = resolved
                    entry.team.display_name = resolved

    for group in sim_groups:
        for entry in group.entries:
            reset_stats(entry)

    for fixture in fixtures:
        if not fixture.is_group_stage:
            continue
        parsed = parse_score(scores.get(fixture.match_number))
        if parsed is None:
            continue
        home_goals, away_goals = parsed

        home = normalize_team_name(fixture.home_team, name_map)
        away = normalize_team_name(fixture.away_team, name_map)
        home = overrides.get(home) or home
        away = overrides.get(away) or away

        home_entry = find_entry(sim_groups, home)
        away_entry = find_entry(sim_groups, away)
        if home_entry is None or away_entry is None:
            logger.debug(
                "Skipping match %d: %s vs %s not found in groups",
                fixture.match_number,
                home,
                away,
            )
            continue
        apply_result(home_entry, home_goals, away_goals)
        apply_result(away_entry, away_goals, home_goals)

    for group in sim_groups:
        group.entries = sort_entries(group.entries)
        for pos, entry in enumerate(group.entries, start=1):
            set_stat(entry, "rank", pos)

    return sim_groups


def random_scores(
    fixtures: List[Fixture],
    random_state: Optional[int] = None,
    max_goals: int = 4,
) -> Dict[int, PendingScore]:
    """Uniform 0..max_goals scores for every group-stage fixture."""
    rng = np.random.default_rng(random_state)
    scores: Dict[int, PendingScore] = {}
    for fixture in fixtures:
        if not fixture.is_group_stage:
            continue
        home, away = rng.integers(0, max_goals + 1, size=2)
        scores[fixture.match_number] = PendingScore(home=int(home), away=int(away))
    return scores


def pick_knockout_winner(
    picks: Mapping[int, LiveResult], match_number: int, winner: str
) -> Dict[int, LiveResult]:
    updated = dict(picks)
    updated[match_number] = LiveResult(
        winner=winner, status=STATUS_SIMULATED, score_str="Sim"
    )
    return updated


def unresolved_playoff_slots(
    groups: List[Group], candidates: Mapping[str, List[str]]
) -> List[str]:
    found: List[str] = []
    for group in groups:
        for entry in group.entries:
            if entry.team.name in candidates and entry.team.name not in found:
                found.append(entry.team.name)
    return found

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

import pandas as pd

from wc26_tracker.codes import (
    GroupRank,
    MatchLoser,
    MatchWinner,
    QualifyingThird,
    parse_code,
)
from wc26_tracker.config import MIN_GAMES_TO_REVEAL
from wc26_tracker.gates import Mode, as_utc, is_past_release, is_tournament_started, mode_for
from wc26_tracker.matches import Fixture, LiveResult
from wc26_tracker.standings import Group, find_group, get_rank, get_stat

UNKNOWN_TEAM = "?"


def _winner(results: Optional[Mapping[int, LiveResult]], match_number: int) -> Optional[str]:
    if not results:
        return None
    res = results.get(match_number)
    if res is None:
        return None
    return res.winner or None


def _find_fixture(fixtures: Optional[List[Fixture]], match_number: int) -> Optional[Fixture]:
    for fixture in fixtures or []:
        if fixture.match_number == match_number:
            return fixture
    return None


def resolve_team_name(
    name: str,
    groups: Optional[List[Group]] = None,
    fixtures: Optional[List[Fixture]] = None,
    results: Optional[Mapping[int, LiveResult]] = None,
    pairings: Optional[Dict[str, str]] = None,
    home_context: Optional[str] = None,
    overrides: Optional[Dict[str, str]] = None,
    *,
    mode: Optional[Mode] = None,
    now: Optional[pd.Timestamp] = None,
) -> str:
    """
    Turn a fixture team reference into a display name.

    Rules, first match wins: simulator override, "W<n>" winner, "L<n>" loser,
    "3(...)" qualifying third (looked up through `pairings[home_context]`),
    "<1|2|3><letter>" group position, and otherwise the name itself. Anything
    that cannot be resolved yet comes back unchanged.

    `mode` defaults to SIMULATION whenever an override map is given. Time gates
    are evaluated against `now` and are skipped entirely in simulation.
    """
    if not name:
        return UNKNOWN_TEAM
    if overrides and overrides.get(name):
        return overrides[name]

    if mode is None:
        mode = mode_for(overrides)
    now = as_utc(now)
    simulating = mode is Mode.SIMULATION

    def recurse(code: str, context: Optional[str] = None) -> str:
        return resolve_team_name(
            code,
            groups,
            fixtures,
            results,
            pairings,
            context,
            overrides,
            mode=mode,
            now=now,
        )

    code = parse_code(name)

    if isinstance(code, MatchWinner):
        return _winner(results, code.match_number) or name

    if isinstance(code, MatchLoser):
        winner = _winner(results, code.match_number)
        fixture = _find_fixture(fixtures, code.match_number)
        if winner is None or fixture is None:
            return name
        home = recurse(fixture.home_team)
        away = recurse(fixture.away_team, fixture.home_team)
        return away if winner == home else home

    if isinstance(code, QualifyingThird):
        if not pairings or not home_context:
            return name
        if not simulating and not (is_tournament_started(now) and is_past_release(now)):
            return name
        slot = pairings.get(home_context)
        return recurse(slot) if slot else name

    if isinstance(code, GroupRank):
        group = find_group(groups, code.letter)
        if group is None or len(group.entries) < code.rank:
            return name
        ranked = sorted(group.entries, key=get_rank)
        entry = ranked[code.rank - 1]
        if simulating:
            return entry.team.name
        if (
            is_tournament_started(now)
            and is_past_release(now)
            and get_stat(entry, "gamesPlayed") >= MIN_GAMES_TO_REVEAL
        ):
            return entry.team.name
        return name

    return name

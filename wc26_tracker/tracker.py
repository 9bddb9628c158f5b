from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from wc26_tracker.codes import is_placeholder
from wc26_tracker.config import SCOREBOARD_DATE_RANGE
from wc26_tracker.espn import EspnClient, map_scoreboard_to_fixtures
from wc26_tracker.gates import Mode, as_utc
from wc26_tracker.matches import Fixture, LiveResult
from wc26_tracker.pairings import R32Pairings, get_knockout_pairings
from wc26_tracker.reference import load_team_name_map
from wc26_tracker.resolver import resolve_team_name
from wc26_tracker.simulator import SimulatedScores, simulate_standings
from wc26_tracker.standings import Group, StandingEntry, has_games_started, standings_frame
from wc26_tracker.thirds import calculate_best_thirds, get_qualifying_thirds_key

logger = logging.getLogger(__name__)


@dataclass
class TrackerSnapshot:
    groups: List[Group]
    fixtures: List[Fixture]
    results: Dict[int, LiveResult]
    best_thirds: List[StandingEntry]
    pairings: Optional[R32Pairings]
    mode: Mode
    now: pd.Timestamp
    overrides: Optional[Dict[str, str]] = None

    def resolve(self, code: str, home_context: Optional[str] = None) -> str:
        return resolve_team_name(
            code,
            self.groups,
            self.fixtures,
            self.results,
            self.pairings,
            home_context,
            self.overrides,
            mode=self.mode,
            now=self.now,
        )

    def resolve_fixture(self, fixture: Fixture) -> Tuple[str, str]:
        home = self.resolve(fixture.home_team)
        away = self.resolve(fixture.away_team, fixture.home_team)
        return home, away

    def fixtures_frame(self) -> pd.DataFrame:
        rows = []
        for fixture in self.fixtures:
            home, away = self.resolve_fixture(fixture)
            res = self.results.get(fixture.match_number)
            rows.append(
                {
                    "match_number": fixture.match_number,
                    "round": fixture.round,
                    "date": fixture.date,
                    "time": fixture.time,
                    "venue": fixture.venue,
                    "city": fixture.city,
                    "home_code": fixture.home_team,
                    "away_code": fixture.away_team,
                    "home_team": home,
                    "away_team": away,
                    "resolved": not (is_placeholder(home) or is_placeholder(away)),
                    "status": res.status if res else "",
                    "score": res.score_str if res else "",
                    "winner": res.winner if res else None,
                }
            )
        return pd.DataFrame(rows)

    def standings_frame(self) -> pd.DataFrame:
        return standings_frame(self.groups)

    def best_thirds_frame(self) -> pd.DataFrame:
        return standings_frame([Group(name="Best thirds", entries=self.best_thirds)])


class TournamentTracker:
    """
    Holds one live snapshot of the tournament (standings, fixtures, results)
    and derives resolved views from it, either as reported or under a set of
    predicted scores.
    """

    def __init__(
        self,
        groups: List[Group],
        fixtures: List[Fixture],
        results: Optional[Mapping[int, LiveResult]] = None,
        name_map: Optional[Dict[str, str]] = None,
        combinations: Optional[Dict[str, R32Pairings]] = None,
    ):
        self.groups = groups
        self.fixtures = list(fixtures)
        self.results: Dict[int, LiveResult] = dict(results or {})
        self.name_map = name_map if name_map is not None else load_team_name_map()
        self.combinations = combinations

    def _pairings(self, best_thirds: List[StandingEntry]) -> R32Pairings:
        key = get_qualifying_thirds_key(best_thirds)
        return get_knockout_pairings(list(key), self.combinations)

    def snapshot(self, now: Optional[pd.Timestamp] = None) -> TrackerSnapshot:
        now = as_utc(now)
        best_thirds = calculate_best_thirds(self.groups, now)
        pairings = self._pairings(best_thirds) if has_games_started(self.groups) else None
        return TrackerSnapshot(
            groups=self.groups,
            fixtures=self.fixtures,
            results=self.results,
            best_thirds=best_thirds,
            pairings=pairings,
            mode=Mode.LIVE,
            now=now,
        )

    def simulate(
        self,
        scores: SimulatedScores,
        overrides: Optional[Dict[str, str]] = None,
        picks: Optional[Mapping[int, LiveResult]] = None,
        now: Optional[pd.Timestamp] = None,
    ) -> TrackerSnapshot:
        now = as_utc(now)
        overrides = dict(overrides or {})
        groups = simulate_standings(
            self.groups, scores, overrides, self.fixtures, self.name_map
        )
        best_thirds = calculate_best_thirds(groups, now)
        return TrackerSnapshot(
            groups=groups,
            fixtures=self.fixtures,
            results=dict(picks or {}),
            best_thirds=best_thirds,
            pairings=self._pairings(best_thirds),
            mode=Mode.SIMULATION,
            now=now,
            overrides=overrides,
        )

    @classmethod
    def from_espn(
        cls,
        client: EspnClient,
        fixtures: List[Fixture],
        dates: Optional[Iterable[str]] = None,
        now: Optional[pd.Timestamp] = None,
    ) -> "TournamentTracker":
        now = as_utc(now)
        if dates is None:
            dates = [SCOREBOARD_DATE_RANGE, now.strftime("%Y%m%d")]
        groups = client.fetch_standings()
        tracker = cls(groups, fixtures, name_map=client.name_map)
        pairings = tracker.snapshot(now).pairings
        scoreboard = client.fetch_scoreboard(dates)
        tracker.results = map_scoreboard_to_fixtures(
            fixtures, scoreboard, groups, pairings, now
        )
        logger.info(
            "Loaded %d groups and %d match results", len(groups), len(tracker.results)
        )
        return tracker

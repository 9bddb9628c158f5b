from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

import pandas as pd
import requests

from wc26_tracker.config import (
    CORS_PROXY,
    ESPN_SCOREBOARD_URL,
    ESPN_STANDINGS_URL,
    REQUEST_TIMEOUT,
)
from wc26_tracker.matches import STATUS_FINAL, Fixture, LiveResult
from wc26_tracker.reference import load_team_name_map, normalize_team_name
from wc26_tracker.resolver import resolve_team_name
from wc26_tracker.standings import Group, StandingEntry, Stat, Team

logger = logging.getLogger(__name__)

DRAW = "Draw"


def _parse_entry(raw: Dict[str, Any], name_map: Dict[str, str]) -> StandingEntry:
    team = raw.get("team") or {}
    raw_name = team.get("name") or team.get("displayName") or ""
    name = normalize_team_name(raw_name, name_map)
    stats = []
    for s in raw.get("stats") or []:
        if "name" not in s:
            continue
        value = s.get("value")
        stats.append(
            Stat(
                name=s["name"],
                value=value if value is not None else 0,
                display_value=s.get("displayValue"),
            )
        )
    return StandingEntry(
        team=Team(
            id=str(team.get("id", name)),
            name=name,
            display_name=name,
            abbreviation=team.get("abbreviation"),
        ),
        stats=stats,
    )


def parse_standings(
    payload: Dict[str, Any], name_map: Optional[Dict[str, str]] = None
) -> List[Group]:
    """Convert an ESPN standings payload into groups with canonical team names."""
    if name_map is None:
        name_map = load_team_name_map()
    children = payload.get("children") or []
    if children:
        return [
            Group(
                name=child.get("name", ""),
                entries=[
                    _parse_entry(e, name_map)
                    for e in (child.get("standings") or {}).get("entries") or []
                ],
            )
            for child in children
        ]
    standings = payload.get("standings")
    if standings:
        return [
            Group(
                name=payload.get("name", "Standings"),
                entries=[_parse_entry(e, name_map) for e in standings.get("entries") or []],
            )
        ]
    logger.warning("Unexpected standings payload structure: %s", sorted(payload))
    return []


def _score(raw: Any) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def parse_scoreboard(
    payload: Dict[str, Any], name_map: Optional[Dict[str, str]] = None
) -> Dict[str, LiveResult]:
    """
    Index scoreboard events by "Home|Away" (and "Away|Home").

    Finished events carry a winner; level finishes report "Draw" unless a
    competitor is flagged as the winner (shoot-out).
    """
    if name_map is None:
        name_map = load_team_name_map()
    out: Dict[str, LiveResult] = {}
    for event in payload.get("events") or []:
        competitions = event.get("competitions") or []
        if not competitions:
            continue
        competitors = competitions[0].get("competitors") or []
        home = next((c for c in competitors if c.get("homeAway") == "home"), None)
        away = next((c for c in competitors if c.get("homeAway") == "away"), None)
        if home is None or away is None:
            continue

        status = event.get("status") or {}
        status_name = (status.get("type") or {}).get("name", "")
        home_name = normalize_team_name(
            (home.get("team") or {}).get("displayName", ""), name_map
        )
        away_name = normalize_team_name(
            (away.get("team") or {}).get("displayName", ""), name_map
        )

        winner = None
        if status_name == STATUS_FINAL:
            home_score = _score(home.get("score"))
            away_score = _score(away.get("score"))
            if home_score is not None and away_score is not None and home_score != away_score:
                winner = home_name if home_score > away_score else away_name
            elif home.get("winner"):
                winner = home_name
            elif away.get("winner"):
                winner = away_name
            else:
                winner = DRAW

        result = LiveResult(
            winner=winner,
            status=status_name,
            score_str=f"{home.get('score')} - {away.get('score')}",
            minute=status.get("displayClock"),
        )
        out[f"{home_name}|{away_name}"] = result
        out[f"{away_name}|{home_name}"] = result
    return out


def map_scoreboard_to_fixtures(
    fixtures: Iterable[Fixture],
    scoreboard: Dict[str, LiveResult],
    groups: Optional[List[Group]] = None,
    pairings: Optional[Dict[str, str]] = None,
    now: Optional[pd.Timestamp] = None,
) -> Dict[int, LiveResult]:
    fixtures = list(fixtures)
    mapped: Dict[int, LiveResult] = {}
    for fixture in fixtures:
        home = resolve_team_name(fixture.home_team, groups, fixtures, None, pairings, now=now)
        away = resolve_team_name(
            fixture.away_team, groups, fixtures, None, pairings, fixture.home_team, now=now
        )
        result = scoreboard.get(f"{home}|{away}") or scoreboard.get(f"{away}|{home}")
        if result is not None:
            mapped[fixture.match_number] = result
    return mapped


class EspnClient:
    """Client for the public ESPN soccer standings and scoreboard endpoints."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        proxy: str = CORS_PROXY,
        timeout: float = REQUEST_TIMEOUT,
        name_map: Optional[Dict[str, str]] = None,
    ):
        self.session = session or requests.Session()
        self.proxy = proxy
        self.timeout = timeout
        self.name_map = name_map if name_map is not None else load_team_name_map()

    def _url(self, url: str, params: Optional[dict] = None) -> str:
        full = requests.Request("GET", url, params=params).prepare().url
        if self.proxy:
            return f"{self.proxy}{quote(full, safe='')}"
        return full

    def _request(self, url: str, params: Optional[dict] = None) -> Optional[dict]:
        target = self._url(url, params)
        try:
            response = self.session.get(target, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("Request to %s failed: %s", url, e)
            return None
        if response.status_code != 200:
            logger.error("ESPN error %s for %s", response.status_code, url)
            return None
        try:
            return response.json()
        except ValueError:
            logger.error("ESPN returned a non-JSON body for %s", url)
            return None

    def fetch_standings(self) -> List[Group]:
        data = self._request(ESPN_STANDINGS_URL)
        if data is None:
            return []
        return parse_standings(data, self.name_map)

    def fetch_scoreboard(self, dates: Iterable[str]) -> Dict[str, LiveResult]:
        results: Dict[str, LiveResult] = {}
        for date in dates:
            data = self._request(ESPN_SCOREBOARD_URL, params={"dates": date})
            if data is None:
                logger.warning("No scoreboard data for %s", date)
                continue
            results.update(parse_scoreboard(data, self.name_map))
        return results

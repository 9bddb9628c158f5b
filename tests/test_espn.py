from __future__ import annotations

from typing import Any, List, Optional

import pytest
import requests

from conftest import LIVE_NOW, build_entry, build_group

from wc26_tracker.config import ESPN_SCOREBOARD_URL, ESPN_STANDINGS_URL
from wc26_tracker.espn import (
    DRAW,
    EspnClient,
    map_scoreboard_to_fixtures,
    parse_scoreboard,
    parse_standings,
)
from wc26_tracker.matches import Fixture, LiveResult
from wc26_tracker.standings import get_stat

NAME_MAP = {"United States": "USA", "Korea Republic": "South Korea"}


def _standings_entry(name: str, **stats: Any) -> dict:
    return {
        "team": {"id": name[:3].upper(), "name": name, "abbreviation": name[:3].upper()},
        "stats": [{"name": k, "value": v, "displayValue": str(v)} for k, v in stats.items()],
    }


STANDINGS_PAYLOAD = {
    "children": [
        {
            "name": "Group A",
            "standings": {
                "entries": [
                    _standings_entry("Mexico", rank=1, gamesPlayed=1, points=3),
                    _standings_entry("Korea Republic", rank=2, gamesPlayed=1, points=1),
                ]
            },
        },
        {
            "name": "Group D",
            "standings": {"entries": [_standings_entry("United States", rank=1)]},
        },
    ]
}


def _competitor(name: str, side: str, score: Any, winner: Optional[bool] = None) -> dict:
    c = {"homeAway": side, "score": score, "team": {"displayName": name}}
    if winner is not None:
        c["winner"] = winner
    return c


def _event(home, away, status: str, clock: str = "90'") -> dict:
    return {
        "status": {"type": {"name": status}, "displayClock": clock},
        "competitions": [{"competitors": [home, away]}],
    }


def test_parse_standings_children():
    groups = parse_standings(STANDINGS_PAYLOAD, NAME_MAP)
    assert [g.name for g in groups] == ["Group A", "Group D"]
    assert [e.team.name for e in groups[0].entries] == ["Mexico", "South Korea"]
    assert groups[1].entries[0].team.name == "USA"
    assert get_stat(groups[0].entries[0], "points") == 3
    assert groups[0].entries[1].team.abbreviation == "KOR"


def test_parse_standings_flat_payload():
    payload = {"name": "Group B", "standings": {"entries": [_standings_entry("Canada", rank=1)]}}
    groups = parse_standings(payload, NAME_MAP)
    assert groups[0].name == "Group B"
    assert groups[0].entries[0].team.name == "Canada"


def test_parse_standings_unexpected_payload():
    assert parse_standings({"foo": 1}, NAME_MAP) == []


def test_parse_standings_tolerates_missing_values():
    payload = {
        "standings": {
            "entries": [
                {"team": {"displayName": "Qatar"}, "stats": [{"name": "points", "value": None}, {}]}
            ]
        }
    }
    entry = parse_standings(payload, NAME_MAP)[0].entries[0]
    assert entry.team.name == "Qatar"
    assert get_stat(entry, "points") == 0
    assert len(entry.stats) == 1


def test_parse_scoreboard_results():
    payload = {
        "events": [
            _event(_competitor("Mexico", "home", "2"), _competitor("South Africa", "away", "1"), "STATUS_FINAL"),
            _event(_competitor("Korea Republic", "home", "1"), _competitor("Czechia", "away", "1"), "STATUS_FINAL"),
            _event(
                _competitor("Canada", "home", "0"),
                _competitor("Qatar", "away", "0"),
                "STATUS_IN_PROGRESS",
                clock="55'",
            ),
        ]
    }
    board = parse_scoreboard(payload, NAME_MAP)
    assert board["Mexico|South Africa"].winner == "Mexico"
    assert board["South Africa|Mexico"] is board["Mexico|South Africa"]
    assert board["Mexico|South Africa"].score_str == "2 - 1"
    assert board["South Korea|Czechia"].winner == DRAW
    live = board["Canada|Qatar"]
    assert live.winner is None
    assert live.is_live
    assert live.minute == "55'"


def test_parse_scoreboard_shootout_winner():
    payload = {
        "events": [
            _event(
                _competitor("Spain", "home", "1", winner=False),
                _competitor("England", "away", "1", winner=True),
                "STATUS_FINAL",
            )
        ]
    }
    assert parse_scoreboard(payload, NAME_MAP)["Spain|England"].winner == "England"


def test_parse_scoreboard_skips_incomplete_events():
    payload = {
        "events": [
            {"status": {"type": {"name": "STATUS_FINAL"}}, "competitions": []},
            _event(_competitor("Spain", "home", "1"), {"homeAway": "neutral"}, "STATUS_FINAL"),
        ]
    }
    assert parse_scoreboard(payload, NAME_MAP) == {}


def test_map_scoreboard_to_fixtures():
    groups = [
        build_group("A", [build_entry("Mexico", rank=1, gp=3), build_entry("South Africa", rank=2, gp=3)]),
        build_group("B", [build_entry("Canada", rank=1, gp=3), build_entry("Qatar", rank=2, gp=3)]),
    ]
    fixtures = [
        Fixture(1, "Group A", "Mexico", "South Africa"),
        Fixture(73, "Round of 32", "2A", "2B"),
        Fixture(76, "Round of 32", "1C", "2F"),
    ]
    result = LiveResult(winner="South Africa", status="STATUS_FINAL", score_str="0 - 1")
    knockout = LiveResult(winner="Qatar", status="STATUS_FINAL", score_str="1 - 2")
    board = {
        "South Africa|Mexico": result,
        "South Africa|Qatar": knockout,
    }
    mapped = map_scoreboard_to_fixtures(fixtures, board, groups, None, LIVE_NOW)
    assert mapped == {1: result, 73: knockout}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.urls: List[str] = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def test_client_fetch_standings():
    session = FakeSession([FakeResponse(payload=STANDINGS_PAYLOAD)])
    client = EspnClient(session=session, proxy="", name_map=NAME_MAP)
    groups = client.fetch_standings()
    assert len(groups) == 2
    assert session.urls == [ESPN_STANDINGS_URL]


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status_code=503),
        FakeResponse(payload=None),
        requests.exceptions.ConnectionError("offline"),
    ],
)
def test_client_failures_return_empty(response):
    client = EspnClient(session=FakeSession([response]), proxy="", name_map=NAME_MAP)
    assert client.fetch_standings() == []


def test_client_proxy_prefix():
    session = FakeSession([FakeResponse(payload={"events": []})])
    client = EspnClient(session=session, proxy="https://proxy.example/?url=", name_map=NAME_MAP)
    client.fetch_scoreboard(["20260611-20260719"])
    (url,) = session.urls
    assert url.startswith("https://proxy.example/?url=https%3A%2F%2F")
    assert "dates%3D20260611-20260719" in url


def test_client_fetch_scoreboard_merges_dates():
    first = {
        "events": [
            _event(_competitor("Mexico", "home", "2"), _competitor("South Africa", "away", "0"), "STATUS_FINAL")
        ]
    }
    session = FakeSession(
        [
            FakeResponse(payload=first),
            requests.exceptions.Timeout("slow"),
        ]
    )
    client = EspnClient(session=session, proxy="", name_map=NAME_MAP)
    board = client.fetch_scoreboard(["20260611-20260719", "20260620"])
    assert set(board) == {"Mexico|South Africa", "South Africa|Mexico"}
    assert session.urls[0] == f"{ESPN_SCOREBOARD_URL}?dates=20260611-20260719"

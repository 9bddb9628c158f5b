from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from wc26_tracker.config import (
    GROUP_MATCHES_PATH,
    GROUPS_PATH,
    KNOCKOUT_MATCHES_PATH,
    PLAYOFF_CANDIDATES_PATH,
    ROUND_OF_32_COMBINATIONS_PATH,
    TEAM_NAME_MAP_PATH,
)
from wc26_tracker.matches import Fixture
from wc26_tracker.standings import DERIVED_STATS, Group, StandingEntry, Stat, Team

logger = logging.getLogger(__name__)

R32_SLOTS = ["1A", "1B", "1D", "1E", "1G", "1I", "1K", "1L"]


def _read_csv(path: Path, required: set, label: str) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Missing {label} file: {path}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = required.difference(df.columns)
    if missing:
        raise ValueError(f"{label.capitalize()} file missing columns: {sorted(missing)}")
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    return df


def load_team_name_map(path: Optional[Path] = None) -> Dict[str, str]:
    df = _read_csv(
        Path(path or TEAM_NAME_MAP_PATH),
        {"original_name", "replacement_name"},
        "team name map",
    )
    return {row.original_name: row.replacement_name for row in df.itertuples()}


def normalize_team_name(name: str, name_map: Optional[Dict[str, str]] = None) -> str:
    if name_map is None:
        name_map = load_team_name_map()
    return name_map.get(name, name)


def load_groups(path: Optional[Path] = None) -> Dict[str, List[str]]:
    df = _read_csv(Path(path or GROUPS_PATH), {"group", "team"}, "groups")
    groups: Dict[str, List[str]] = {}
    for row in df.itertuples():
        groups.setdefault(row.group, []).append(row.team)
    return groups


def load_playoff_candidates(path: Optional[Path] = None) -> Dict[str, List[str]]:
    df = _read_csv(
        Path(path or PLAYOFF_CANDIDATES_PATH), {"slot", "team"}, "playoff candidates"
    )
    candidates: Dict[str, List[str]] = {}
    for row in df.itertuples():
        candidates.setdefault(row.slot, []).append(row.team)
    return candidates


def load_round_of_32_combinations(path: Optional[Path] = None) -> Dict[str, Dict[str, str]]:
    df = _read_csv(
        Path(path or ROUND_OF_32_COMBINATIONS_PATH),
        {"combo", *R32_SLOTS},
        "round-of-32 combinations",
    )
    combos: Dict[str, Dict[str, str]] = {}
    for row in df.to_dict(orient="records"):
        combo = "".join(sorted(row["combo"]))
        combos[combo] = {slot: row[slot] for slot in R32_SLOTS}
    return combos


def _parse_dates(df: pd.DataFrame) -> pd.Series:
    return pd.to_datetime(df["date"], errors="raise")


def load_knockout_fixtures(path: Optional[Path] = None) -> List[Fixture]:
    df = _read_csv(
        Path(path or KNOCKOUT_MATCHES_PATH),
        {"match_id", "stage", "date", "home", "away"},
        "knockout matches",
    )
    df["match_id"] = pd.to_numeric(df["match_id"], errors="raise").astype(int)
    if df["match_id"].duplicated().any():
        dupes = df.loc[df["match_id"].duplicated(), "match_id"].unique().tolist()
        raise ValueError(
            f"Knockout matches file contains duplicate match_id values: {sorted(dupes)}"
        )
    df["date"] = _parse_dates(df)
    fixtures = []
    for row in df.sort_values("match_id").itertuples(index=False):
        fixtures.append(
            Fixture(
                match_number=int(row.match_id),
                round=row.stage,
                home_team=row.home,
                away_team=row.away,
                date=row.date,
                time=getattr(row, "time", ""),
                venue=getattr(row, "stadium", ""),
                city=getattr(row, "city", ""),
            )
        )
    return fixtures


def load_group_fixtures(
    path: Optional[Path] = None, name_map: Optional[Dict[str, str]] = None
) -> List[Fixture]:
    df = _read_csv(
        Path(path or GROUP_MATCHES_PATH),
        {"match_id", "group", "date", "home_team", "away_team"},
        "group matches",
    )
    df["match_id"] = pd.to_numeric(df["match_id"], errors="raise").astype(int)
    df["date"] = _parse_dates(df)
    if name_map is None:
        name_map = load_team_name_map()
    fixtures = []
    for row in df.sort_values("match_id").itertuples(index=False):
        fixtures.append(
            Fixture(
                match_number=int(row.match_id),
                round=f"Group {row.group}",
                home_team=normalize_team_name(row.home_team, name_map),
                away_team=normalize_team_name(row.away_team, name_map),
                date=row.date,
                time=getattr(row, "time", ""),
                venue=getattr(row, "stadium", ""),
                city=getattr(row, "city", ""),
            )
        )
    return fixtures


def load_fixtures(include_group_stage: bool = True) -> List[Fixture]:
    fixtures = load_knockout_fixtures()
    if include_group_stage:
        fixtures = load_group_fixtures() + fixtures
    return fixtures


def load_available_fixtures() -> List[Fixture]:
    """All fixtures, or the knockout bracket alone when no group schedule is on disk."""
    try:
        return load_fixtures()
    except FileNotFoundError as e:
        logger.warning("%s; continuing with knockout fixtures only", e)
        return load_fixtures(include_group_stage=False)


def initial_groups(roster: Optional[Dict[str, List[str]]] = None) -> List[Group]:
    """Zeroed standings built from the draw, for use before the feed has data."""
    roster = roster if roster is not None else load_groups()
    groups = []
    for letter in sorted(roster):
        entries = []
        for pos, team in enumerate(roster[letter], start=1):
            stats = [Stat("rank", pos, str(pos))]
            stats.extend(Stat(name, 0, "0") for name in DERIVED_STATS)
            entries.append(StandingEntry(team=Team(id=team, name=team), stats=stats))
        groups.append(Group(name=f"Group {letter}", entries=entries))
    logger.debug("Built %d empty groups from roster", len(groups))
    return groups

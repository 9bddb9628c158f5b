from __future__ import annotations

from enum import Enum
from typing import Optional

import pandas as pd

from wc26_tracker.config import BEST_THIRDS_RELEASE_DATE, TOURNAMENT_START_DATE


class Mode(Enum):
    LIVE = "live"
    SIMULATION = "simulation"


def mode_for(overrides: Optional[dict]) -> Mode:
    # Only a non-empty override map means the caller is simulating.
    return Mode.SIMULATION if overrides else Mode.LIVE


def utc_now() -> pd.Timestamp:
    return pd.Timestamp.now(tz="UTC")


def as_utc(now: Optional[pd.Timestamp] = None) -> pd.Timestamp:
    if now is None:
        return utc_now()
    ts = pd.Timestamp(now)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def is_past_release(now: Optional[pd.Timestamp] = None) -> bool:
    return as_utc(now) >= BEST_THIRDS_RELEASE_DATE


def is_tournament_started(now: Optional[pd.Timestamp] = None) -> bool:
    return as_utc(now) >= TOURNAMENT_START_DATE

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pandas as pd

STATUS_FINAL = "STATUS_FINAL"
STATUS_IN_PROGRESS = "STATUS_IN_PROGRESS"
STATUS_SIMULATED = "SIMULATED"


@dataclass(frozen=True)
class Fixture:
    match_number: int
    round: str
    home_team: str
    away_team: str
    date: Optional[pd.Timestamp] = None
    time: str = ""
    venue: str = ""
    city: str = ""

    @property
    def is_group_stage(self) -> bool:
        return self.round.strip().lower().startswith("group")


@dataclass
class LiveResult:
    winner: Optional[str] = None
    status: str = ""
    score_str: str = ""
    minute: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return self.status == STATUS_FINAL

    @property
    def is_live(self) -> bool:
        return self.status == STATUS_IN_PROGRESS

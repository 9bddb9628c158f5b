from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from wc26_tracker.config import OUTPUT_DIR
from wc26_tracker.espn import EspnClient
from wc26_tracker.reference import load_available_fixtures
from wc26_tracker.tracker import TournamentTracker, TrackerSnapshot

logger = logging.getLogger(__name__)


def write_snapshot(snapshot: TrackerSnapshot, output_dir: Path) -> List[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    frames = {
        "standings.csv": snapshot.standings_frame(),
        "best_thirds.csv": snapshot.best_thirds_frame(),
        "fixtures.csv": snapshot.fixtures_frame(),
    }
    written = []
    for filename, df in frames.items():
        dest = output_dir / filename
        df.to_csv(dest, index=False)
        written.append(dest)
    return written


def main(output_dir: Optional[Path] = None, now: Optional[pd.Timestamp] = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    fixtures = load_available_fixtures()
    client = EspnClient()
    tracker = TournamentTracker.from_espn(client, fixtures, now=now)
    if not tracker.groups:
        logger.error("No standings returned from ESPN; nothing written")
        return
    snapshot = tracker.snapshot(now)
    for dest in write_snapshot(snapshot, Path(output_dir or OUTPUT_DIR)):
        logger.info("updated %s", dest)


if __name__ == "__main__":
    main()

import os
from pathlib import Path

import pandas as pd

ROOT_DIR = Path(__file__).resolve().parents[1]
REFERENCE_DATA_DIR = ROOT_DIR / "reference_data"
GROUPS_PATH = REFERENCE_DATA_DIR / "world_cup_2026_groups.csv"
GROUP_MATCHES_PATH = REFERENCE_DATA_DIR / "world_cup_2026_group_matches.csv"
KNOCKOUT_MATCHES_PATH = REFERENCE_DATA_DIR / "world_cup_2026_knockout_matches.csv"
ROUND_OF_32_COMBINATIONS_PATH = (
    REFERENCE_DATA_DIR / "world_cup_2026_round_of_32_combinations.csv"
)
PLAYOFF_CANDIDATES_PATH = REFERENCE_DATA_DIR / "world_cup_2026_playoff_candidates.csv"
TEAM_NAME_MAP_PATH = REFERENCE_DATA_DIR / "espn_team_to_canonical_name_map.csv"

OUTPUT_DIR = Path(os.environ.get("WC26_OUTPUT_DIR", ROOT_DIR / "tracker_output"))

# Competition-rules gates, not data-readiness checks.
TOURNAMENT_START_DATE = pd.Timestamp("2026-06-11T00:00:00Z")
BEST_THIRDS_RELEASE_DATE = pd.Timestamp("2026-06-18T00:00:00Z")

GROUP_LETTERS = [chr(ord("A") + i) for i in range(12)]
QUALIFYING_THIRDS = 8
MIN_GAMES_TO_REVEAL = 2

ESPN_STANDINGS_URL = (
    "https://site.web.api.espn.com/apis/v2/sports/soccer/fifa.world/standings"
)
ESPN_SCOREBOARD_URL = (
    "https://site.api.espn.com/apis/site/v2/sports/soccer/fifa.world/scoreboard"
)
SCOREBOARD_DATE_RANGE = "20260611-20260719"
CORS_PROXY = os.environ.get("WC26_CORS_PROXY", "")
REQUEST_TIMEOUT = float(os.environ.get("WC26_REQUEST_TIMEOUT", "30"))

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from wc26_tracker.config import QUALIFYING_THIRDS
from wc26_tracker.reference import R32_SLOTS, load_round_of_32_combinations

logger = logging.getLogger(__name__)

R32Pairings = Dict[str, str]

# Generic labels shown before any third-placed team is known.
DEFAULT_PAIRINGS: R32Pairings = {
    "1A": "3C/E/F/H/I",
    "1B": "3E/F/G/I/J",
    "1D": "3B/E/F/I/J",
    "1E": "3A/B/C/D/F",
    "1G": "3A/E/H/I/J",
    "1I": "3C/D/F/G/H",
    "1K": "3D/E/I/J/L",
    "1L": "3E/H/I/J/K",
}


def positional_pairings(letters: List[str]) -> R32Pairings:
    """
    Best-effort allocation: the Nth sorted letter faces the Nth group winner in
    slot order 1A, 1B, 1D, 1E, 1G, 1I, 1K, 1L.

    This is an approximation, not the official allocation, which needs the full
    495-row combination table.
    """
    ordered = sorted(letters)
    return {
        slot: f"3{ordered[i]}" if i < len(ordered) else "3?"
        for i, slot in enumerate(R32_SLOTS)
    }


def get_knockout_pairings(
    qualifying_groups: Optional[List[str]],
    combinations: Optional[Dict[str, R32Pairings]] = None,
) -> R32Pairings:
    if not qualifying_groups or len(qualifying_groups) != QUALIFYING_THIRDS:
        return dict(DEFAULT_PAIRINGS)

    key = "".join(sorted(qualifying_groups))
    if combinations is None:
        combinations = load_round_of_32_combinations()
    if key in combinations:
        return dict(combinations[key])

    logger.debug("No exact round-of-32 combination for %s, using positional fallback", key)
    return positional_pairings(qualifying_groups)

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Union

WINNER_RE = re.compile(r"^W\s?(\d+)$")
LOSER_RE = re.compile(r"^L\s?(\d+)$")
GROUP_RANK_RE = re.compile(r"^([123])([A-L])$")
THIRD_PLACEHOLDER_RE = re.compile(r"^3[A-L]$")


@dataclass(frozen=True)
class Literal:
    name: str


@dataclass(frozen=True)
class GroupRank:
    rank: int
    letter: str


@dataclass(frozen=True)
class MatchWinner:
    match_number: int


@dataclass(frozen=True)
class MatchLoser:
    match_number: int


@dataclass(frozen=True)
class QualifyingThird:
    code: str


Code = Union[Literal, GroupRank, MatchWinner, MatchLoser, QualifyingThird]


def parse_code(raw: str) -> Code:
    """
    Parse a fixture team reference into its placeholder variant.

      "W 74" / "W74"  -> MatchWinner(74)
      "L101"          -> MatchLoser(101)
      "3(A/B/C/D/F)"  -> QualifyingThird
      "1A".."3L"      -> GroupRank
      anything else   -> Literal (already a team name)
    """
    text = raw.strip()
    m = WINNER_RE.match(text)
    if m:
        return MatchWinner(int(m.group(1)))
    m = LOSER_RE.match(text)
    if m:
        return MatchLoser(int(m.group(1)))
    if text.startswith("3("):
        return QualifyingThird(text)
    m = GROUP_RANK_RE.match(text)
    if m:
        return GroupRank(int(m.group(1)), m.group(2))
    return Literal(raw)


def is_placeholder(name: str) -> bool:
    return not isinstance(parse_code(name), Literal)


def is_third_placeholder(name: str) -> bool:
    return bool(THIRD_PLACEHOLDER_RE.match(name))

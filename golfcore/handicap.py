"""Handicap arithmetic following the USGA/WHS course handicap formula."""

from __future__ import annotations

import math
from typing import Iterable

from golfcore.models import HoleDefinition

NEUTRAL_SLOPE = 113
HOLES_PER_ROUND = 18


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def course_handicap(
    handicap_index: float,
    slope_rating: float,
    course_rating: float,
    par: int,
) -> int:
    return round_half_up(handicap_index * (slope_rating / NEUTRAL_SLOPE) + (course_rating - par))


def _apply_pct_and_cap(handicap: float, handicap_pct: float, handicap_cap: float | None) -> float:
    adjusted = handicap * handicap_pct / 100
    if handicap_cap is not None:
        adjusted = min(adjusted, handicap_cap)
    return adjusted


def playing_handicap(
    handicap_index: float,
    slope_rating: float,
    course_rating: float,
    par: int,
    handicap_pct: float = 100,
    handicap_cap: float | None = None,
) -> int:
    course = course_handicap(handicap_index, slope_rating, course_rating, par)
    playing = round_half_up(course * handicap_pct / 100)
    if handicap_cap is not None:
        playing = min(playing, round_half_up(handicap_cap))
    return playing


def simple_handicap_strokes(
    handicap: float,
    handicap_pct: float = 100,
    handicap_cap: float | None = None,
) -> int:
    """Playing handicap when the tee has no slope/rating data."""
    return round_half_up(_apply_pct_and_cap(handicap, handicap_pct, handicap_cap))


def strokes_per_hole(handicap: int, holes: Iterable[HoleDefinition]) -> list[int]:
    """
    Number of strokes (0, 1 or 2) given on each hole, indexed by hole number - 1.
    Strokes go to the lowest stroke index holes first; only the magnitude of the
    handicap is used, see ``allocate_strokes`` for plus handicaps.
    """
    allocation = [0] * HOLES_PER_ROUND
    ordered = sorted(holes, key=lambda hole: hole.stroke_index)
    remaining = abs(handicap)

    for hole in ordered[: min(HOLES_PER_ROUND, remaining)]:
        allocation[hole.hole_number - 1] = 1

    remaining -= HOLES_PER_ROUND
    if remaining > 0:
        for hole in ordered[: min(HOLES_PER_ROUND, remaining)]:
            allocation[hole.hole_number - 1] = 2
    return allocation


def allocate_strokes(handicap: int, holes: Iterable[HoleDefinition]) -> list[int]:
    """
    Signed per-hole strokes. Plus handicaps (negative) give strokes back on the
    same holes, so their net score is higher than gross there.
    """
    counts = strokes_per_hole(handicap, holes)
    if handicap < 0:
        return [-count for count in counts]
    return counts


def net_score(gross: int, strokes_received: int) -> int:
    return max(0, gross - strokes_received)


def score_differential(adjusted_gross: float, course_rating: float, slope_rating: float) -> float:
    return (adjusted_gross - course_rating) * NEUTRAL_SLOPE / slope_rating


def apply_simple_handicap(
    gross_total: int,
    handicap: float,
    handicap_pct: float = 100,
    handicap_cap: float | None = None,
) -> int:
    """Round-level net total without hole data: gross minus the adjusted handicap."""
    return round_half_up(gross_total - _apply_pct_and_cap(handicap, handicap_pct, handicap_cap))

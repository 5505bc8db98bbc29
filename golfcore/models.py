"""Plain value records passed in and out of the scoring engine."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class HoleDefinition:
    hole_number: int
    par: int
    stroke_index: int
    yardage: int | None = None


@dataclass(frozen=True)
class TeeRating:
    slope_rating: int
    course_rating: float
    total_par: int


@dataclass(frozen=True)
class Participant:
    participant_id: str
    name: str
    handicap_index: float | None = None


@dataclass(frozen=True)
class HoleScoreInput:
    hole_number: int
    strokes: int
    par: int
    handicap_strokes: int = 0


@dataclass(frozen=True)
class HoleScoreResult:
    hole_number: int
    strokes: int
    net_strokes: int
    points: int | None = None
    won: bool | None = None
    tied: bool | None = None


@dataclass(frozen=True)
class TotalScoreResult:
    gross_total: int
    net_total: int
    total_points: int | None = None
    holes_won: int | None = None
    holes_lost: int | None = None
    holes_tied: int | None = None
    match_result: str | None = None


@dataclass(frozen=True)
class StablefordPoints:
    """Points awarded by score relative to par (standard table by default)."""

    albatross: int = 5
    eagle: int = 4
    birdie: int = 3
    par: int = 2
    bogey: int = 1
    double_bogey: int = 0
    worse: int = 0

    @classmethod
    def modified(cls) -> "StablefordPoints":
        return cls(albatross=8, eagle=5, birdie=2, par=0, bogey=-1, double_bogey=-3, worse=-3)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "StablefordPoints":
        known = {item.name for item in fields(cls)}
        return cls(**{key: int(value) for key, value in values.items() if key in known and value is not None})

    def points_for(self, diff: int) -> int:
        """Points for a hole where ``diff`` is par minus net strokes."""
        if diff >= 3:
            return self.albatross
        if diff == 2:
            return self.eagle
        if diff == 1:
            return self.birdie
        if diff == 0:
            return self.par
        if diff == -1:
            return self.bogey
        if diff == -2:
            return self.double_bogey
        return self.worse


@dataclass(frozen=True)
class ScoringConfig:
    stableford_points: Mapping[str, int] | None = None
    team_size: int | None = None
    count_best: int | None = None
    course_par: int = 72
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any] | None) -> "ScoringConfig":
        if not values:
            return cls()
        known = {item.name for item in fields(cls)} - {"extra"}
        kwargs = {key: value for key, value in values.items() if key in known and value is not None}
        extra = {key: value for key, value in values.items() if key not in known}
        return cls(**kwargs, extra=extra)

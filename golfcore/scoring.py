"""Scoring formats: one engine per format, selected by ``get_scoring_engine``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol, Sequence

from golfcore.handicap import net_score, round_half_up
from golfcore.models import (
    HoleScoreInput,
    HoleScoreResult,
    ScoringConfig,
    StablefordPoints,
    TotalScoreResult,
)

logger = logging.getLogger(__name__)


class ScoringFormat(str, Enum):
    STROKE_PLAY = "STROKE_PLAY"
    STABLEFORD = "STABLEFORD"
    MODIFIED_STABLEFORD = "MODIFIED_STABLEFORD"
    MATCH_PLAY = "MATCH_PLAY"
    SCRAMBLE = "SCRAMBLE"
    BEST_BALL = "BEST_BALL"


class ScoringEngine(Protocol):
    format: ScoringFormat

    def calculate_hole_score(self, hole: HoleScoreInput) -> HoleScoreResult: ...

    def calculate_total_score(self, holes: Sequence[HoleScoreResult]) -> TotalScoreResult: ...

    def compare_scores(self, a: TotalScoreResult, b: TotalScoreResult) -> int:
        """Negative when ``a`` is better, positive when ``b`` is better, 0 when tied."""
        ...

    def leaderboard_display(self, score: TotalScoreResult) -> str: ...

    def get_description(self) -> str: ...


def _net_hole(hole: HoleScoreInput) -> HoleScoreResult:
    return HoleScoreResult(
        hole_number=hole.hole_number,
        strokes=hole.strokes,
        net_strokes=net_score(hole.strokes, hole.handicap_strokes),
    )


def _stroke_totals(holes: Iterable[HoleScoreResult]) -> TotalScoreResult:
    gross = 0
    net = 0
    for hole in holes:
        gross += hole.strokes
        net += hole.net_strokes
    return TotalScoreResult(gross_total=gross, net_total=net)


def _to_par_display(net_total: int, par: int) -> str:
    to_par = net_total - par
    if to_par == 0:
        return "E"
    if to_par > 0:
        return f"+{to_par}"
    return str(to_par)


class StrokePlayEngine:
    format = ScoringFormat.STROKE_PLAY

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()

    def calculate_hole_score(self, hole: HoleScoreInput) -> HoleScoreResult:
        return _net_hole(hole)

    def calculate_total_score(self, holes: Sequence[HoleScoreResult]) -> TotalScoreResult:
        return _stroke_totals(holes)

    def compare_scores(self, a: TotalScoreResult, b: TotalScoreResult) -> int:
        return a.net_total - b.net_total

    def leaderboard_display(self, score: TotalScoreResult) -> str:
        return _to_par_display(score.net_total, self.config.course_par)

    def get_description(self) -> str:
        return (
            "Traditional stroke play - lowest score wins. Net scores are calculated "
            "by subtracting handicap strokes from gross scores."
        )


class StablefordEngine:
    format = ScoringFormat.STABLEFORD

    def __init__(self, points: StablefordPoints | None = None, config: ScoringConfig | None = None):
        self.points = points or StablefordPoints()
        self.config = config or ScoringConfig()

    def calculate_hole_score(self, hole: HoleScoreInput) -> HoleScoreResult:
        net = net_score(hole.strokes, hole.handicap_strokes)
        return HoleScoreResult(
            hole_number=hole.hole_number,
            strokes=hole.strokes,
            net_strokes=net,
            points=self.points.points_for(hole.par - net),
        )

    def calculate_total_score(self, holes: Sequence[HoleScoreResult]) -> TotalScoreResult:
        totals = _stroke_totals(holes)
        return TotalScoreResult(
            gross_total=totals.gross_total,
            net_total=totals.net_total,
            total_points=sum(hole.points or 0 for hole in holes),
        )

    def compare_scores(self, a: TotalScoreResult, b: TotalScoreResult) -> int:
        return (b.total_points or 0) - (a.total_points or 0)

    def leaderboard_display(self, score: TotalScoreResult) -> str:
        return f"{score.total_points or 0} pts"

    def get_description(self) -> str:
        return (
            "Stableford scoring - earn points based on score relative to par. Higher points win. "
            "Standard: Eagle=4, Birdie=3, Par=2, Bogey=1."
        )


class ModifiedStablefordEngine:
    """Stableford mechanics with the modified points table unless one is supplied."""

    format = ScoringFormat.MODIFIED_STABLEFORD

    def __init__(self, points: StablefordPoints | None = None, config: ScoringConfig | None = None):
        self._stableford = StablefordEngine(points or StablefordPoints.modified(), config)

    @property
    def points(self) -> StablefordPoints:
        return self._stableford.points

    def calculate_hole_score(self, hole: HoleScoreInput) -> HoleScoreResult:
        return self._stableford.calculate_hole_score(hole)

    def calculate_total_score(self, holes: Sequence[HoleScoreResult]) -> TotalScoreResult:
        return self._stableford.calculate_total_score(holes)

    def compare_scores(self, a: TotalScoreResult, b: TotalScoreResult) -> int:
        return self._stableford.compare_scores(a, b)

    def leaderboard_display(self, score: TotalScoreResult) -> str:
        return self._stableford.leaderboard_display(score)

    def get_description(self) -> str:
        return (
            "Modified Stableford - custom points system. "
            "Typically: Eagle=5, Birdie=2, Par=0, Bogey=-1, Double=-3."
        )


@dataclass(frozen=True)
class MatchPlayOutcome:
    player_a: TotalScoreResult
    player_b: TotalScoreResult
    match_result: str
    winner: str
    holes_played: int


def _match_result_string(margin: int, holes_remaining: int) -> str:
    if holes_remaining > 0:
        return f"{margin}&{holes_remaining}"
    return f"{margin} up"


def compare_match_play(
    player_a: Sequence[HoleScoreResult],
    player_b: Sequence[HoleScoreResult],
    total_holes: int = 18,
) -> MatchPlayOutcome:
    """
    Play two cards against each other hole by hole on net strokes. Holes are
    matched by hole number and only holes both players recorded count. The match
    stops as soon as the lead is larger than the number of holes left to play.
    """
    holes_b = {hole.hole_number: hole for hole in player_b}
    won_a = won_b = tied = 0
    status = 0
    for hole_a in sorted(player_a, key=lambda hole: hole.hole_number):
        hole_b = holes_b.get(hole_a.hole_number)
        if hole_b is None:
            continue
        if hole_a.net_strokes < hole_b.net_strokes:
            won_a += 1
            status += 1
        elif hole_a.net_strokes > hole_b.net_strokes:
            won_b += 1
            status -= 1
        else:
            tied += 1
        if abs(status) > total_holes - (won_a + won_b + tied):
            break

    played = won_a + won_b + tied
    remaining = total_holes - played
    if won_a > won_b:
        winner = "A"
        match_result = _match_result_string(won_a - won_b, remaining)
    elif won_b > won_a:
        winner = "B"
        match_result = _match_result_string(won_b - won_a, remaining)
    else:
        winner = "TIE"
        match_result = "AS"

    totals_a = _stroke_totals(player_a)
    totals_b = _stroke_totals(player_b)
    return MatchPlayOutcome(
        player_a=TotalScoreResult(
            gross_total=totals_a.gross_total,
            net_total=totals_a.net_total,
            holes_won=won_a,
            holes_lost=won_b,
            holes_tied=tied,
            match_result=match_result if winner == "A" else None,
        ),
        player_b=TotalScoreResult(
            gross_total=totals_b.gross_total,
            net_total=totals_b.net_total,
            holes_won=won_b,
            holes_lost=won_a,
            holes_tied=tied,
            match_result=match_result if winner == "B" else None,
        ),
        match_result=match_result,
        winner=winner,
        holes_played=played,
    )


class MatchPlayEngine:
    format = ScoringFormat.MATCH_PLAY

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()

    def calculate_hole_score(self, hole: HoleScoreInput) -> HoleScoreResult:
        return _net_hole(hole)

    def calculate_total_score(self, holes: Sequence[HoleScoreResult]) -> TotalScoreResult:
        # A single card cannot settle a match; see compare_match.
        totals = _stroke_totals(holes)
        return TotalScoreResult(
            gross_total=totals.gross_total,
            net_total=totals.net_total,
            holes_won=0,
            holes_lost=0,
            holes_tied=0,
            match_result="AS",
        )

    def compare_match(
        self,
        player_a: Sequence[HoleScoreResult],
        player_b: Sequence[HoleScoreResult],
        total_holes: int = 18,
    ) -> MatchPlayOutcome:
        return compare_match_play(player_a, player_b, total_holes)

    def compare_scores(self, a: TotalScoreResult, b: TotalScoreResult) -> int:
        a_diff = (a.holes_won or 0) - (a.holes_lost or 0)
        b_diff = (b.holes_won or 0) - (b.holes_lost or 0)
        return b_diff - a_diff

    def leaderboard_display(self, score: TotalScoreResult) -> str:
        if score.match_result:
            return score.match_result
        won = score.holes_won or 0
        lost = score.holes_lost or 0
        if won > lost:
            return f"{won - lost} up"
        if lost > won:
            return f"{lost - won} down"
        return "AS"

    def get_description(self) -> str:
        return (
            "Match Play - compete hole-by-hole against an opponent. Win the hole with the lowest "
            "net score. Match is won when opponent cannot catch up."
        )


class ScrambleEngine:
    """The card already holds one team score per hole."""

    format = ScoringFormat.SCRAMBLE

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()

    def calculate_hole_score(self, hole: HoleScoreInput) -> HoleScoreResult:
        return _net_hole(hole)

    def calculate_total_score(self, holes: Sequence[HoleScoreResult]) -> TotalScoreResult:
        return _stroke_totals(holes)

    def compare_scores(self, a: TotalScoreResult, b: TotalScoreResult) -> int:
        return a.net_total - b.net_total

    def leaderboard_display(self, score: TotalScoreResult) -> str:
        return _to_par_display(score.net_total, self.config.course_par)

    def get_description(self) -> str:
        return (
            "Scramble - team format where all players hit from the best shot. "
            "Team records one score per hole."
        )


def calculate_best_ball(
    players_holes: Sequence[Sequence[HoleScoreResult]],
    count_best: int = 1,
    total_holes: int = 18,
) -> list[HoleScoreResult]:
    """Team hole scores: the average of the best ``count_best`` net scores on each hole."""
    count_best = max(1, count_best)
    team_holes: list[HoleScoreResult] = []
    for hole_number in range(1, total_holes + 1):
        hole_scores = [
            hole
            for card in players_holes
            for hole in card
            if hole.hole_number == hole_number
        ]
        if not hole_scores:
            continue
        best = sorted(hole_scores, key=lambda hole: hole.net_strokes)[:count_best]
        team_holes.append(
            HoleScoreResult(
                hole_number=hole_number,
                strokes=round_half_up(sum(hole.strokes for hole in best) / len(best)),
                net_strokes=round_half_up(sum(hole.net_strokes for hole in best) / len(best)),
            )
        )
    return team_holes


class BestBallEngine:
    format = ScoringFormat.BEST_BALL

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()

    @property
    def count_best(self) -> int:
        return self.config.count_best or 1

    def calculate_hole_score(self, hole: HoleScoreInput) -> HoleScoreResult:
        return _net_hole(hole)

    def calculate_team_holes(
        self, players_holes: Sequence[Sequence[HoleScoreResult]]
    ) -> list[HoleScoreResult]:
        return calculate_best_ball(players_holes, self.count_best)

    def calculate_total_score(self, holes: Sequence[HoleScoreResult]) -> TotalScoreResult:
        return _stroke_totals(holes)

    def compare_scores(self, a: TotalScoreResult, b: TotalScoreResult) -> int:
        return a.net_total - b.net_total

    def leaderboard_display(self, score: TotalScoreResult) -> str:
        return _to_par_display(score.net_total, self.config.course_par)

    def get_description(self) -> str:
        return (
            "Best Ball - each player plays their own ball. Team score on each hole is "
            "the lowest net score among team members."
        )


FORMAT_NAMES = {
    ScoringFormat.STROKE_PLAY: "Stroke Play",
    ScoringFormat.STABLEFORD: "Stableford",
    ScoringFormat.MODIFIED_STABLEFORD: "Modified Stableford",
    ScoringFormat.MATCH_PLAY: "Match Play",
    ScoringFormat.SCRAMBLE: "Scramble",
    ScoringFormat.BEST_BALL: "Best Ball",
}


def _resolve_format(scoring_format: ScoringFormat | str) -> ScoringFormat | None:
    if isinstance(scoring_format, ScoringFormat):
        return scoring_format
    try:
        return ScoringFormat((scoring_format or "").strip().upper())
    except ValueError:
        return None


def get_scoring_engine(
    scoring_format: ScoringFormat | str,
    config: ScoringConfig | None = None,
) -> ScoringEngine:
    config = config or ScoringConfig()
    resolved = _resolve_format(scoring_format)
    custom_points = (
        StablefordPoints.from_mapping(config.stableford_points) if config.stableford_points else None
    )

    if resolved is ScoringFormat.STABLEFORD:
        return StablefordEngine(custom_points, config)
    if resolved is ScoringFormat.MODIFIED_STABLEFORD:
        return ModifiedStablefordEngine(custom_points, config)
    if resolved is ScoringFormat.MATCH_PLAY:
        return MatchPlayEngine(config)
    if resolved is ScoringFormat.SCRAMBLE:
        return ScrambleEngine(config)
    if resolved is ScoringFormat.BEST_BALL:
        return BestBallEngine(config)
    if resolved is None:
        logger.warning("Unknown scoring format %s, defaulting to Stroke Play", scoring_format)
    return StrokePlayEngine(config)


def available_formats() -> list[dict]:
    return [
        {
            "format": scoring_format.value,
            "name": FORMAT_NAMES[scoring_format],
            "description": get_scoring_engine(scoring_format).get_description(),
        }
        for scoring_format in ScoringFormat
    ]

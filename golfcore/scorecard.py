"""Turn raw hole strokes into engine results for every card of a round."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Mapping, Sequence

from golfcore.handicap import allocate_strokes, playing_handicap, simple_handicap_strokes
from golfcore.models import (
    HoleDefinition,
    HoleScoreInput,
    HoleScoreResult,
    Participant,
    TeeRating,
    TotalScoreResult,
)
from golfcore.positions import assign_positions, assign_positions_by
from golfcore.scoring import ScoringEngine
from golfcore.skins import SkinsEntry


@dataclass(frozen=True)
class PlayerCard:
    participant: Participant
    strokes: Mapping[int, int | None] = field(default_factory=dict)


@dataclass(frozen=True)
class ScoredCard:
    participant: Participant
    playing_handicap: int | None
    hole_strokes: list[int]
    holes: list[HoleScoreResult]
    total: TotalScoreResult | None

    @property
    def is_complete(self) -> bool:
        return self.total is not None


@dataclass(frozen=True)
class LeaderboardEntry:
    position: int
    participant: Participant
    total: TotalScoreResult
    display: str


def player_hole_strokes(
    participant: Participant,
    holes: Sequence[HoleDefinition],
    tee: TeeRating | None = None,
    handicap_pct: float = 100,
    handicap_cap: float | None = None,
) -> tuple[int | None, list[int]]:
    """Playing handicap and signed strokes per hole (index = hole number - 1)."""
    if participant.handicap_index is None:
        return None, [0] * 18
    if tee is not None:
        handicap = playing_handicap(
            participant.handicap_index,
            tee.slope_rating,
            tee.course_rating,
            tee.total_par,
            handicap_pct,
            handicap_cap,
        )
    else:
        handicap = simple_handicap_strokes(participant.handicap_index, handicap_pct, handicap_cap)
    return handicap, allocate_strokes(handicap, holes)


def score_card(
    engine: ScoringEngine,
    holes: Sequence[HoleDefinition],
    strokes: Mapping[int, int | None],
    hole_strokes: Sequence[int],
) -> tuple[list[HoleScoreResult], TotalScoreResult | None]:
    results: list[HoleScoreResult] = []
    for hole in sorted(holes, key=lambda item: item.hole_number):
        gross = strokes.get(hole.hole_number)
        if gross is None:
            continue
        allocated = hole_strokes[hole.hole_number - 1] if hole.hole_number <= len(hole_strokes) else 0
        results.append(
            engine.calculate_hole_score(
                HoleScoreInput(
                    hole_number=hole.hole_number,
                    strokes=gross,
                    par=hole.par,
                    handicap_strokes=allocated,
                )
            )
        )
    if not holes or len(results) < len(holes):
        return results, None
    return results, engine.calculate_total_score(results)


def score_round(
    engine: ScoringEngine,
    holes: Sequence[HoleDefinition],
    cards: Sequence[PlayerCard],
    tee: TeeRating | None = None,
    handicap_pct: float = 100,
    handicap_cap: float | None = None,
) -> list[ScoredCard]:
    scored: list[ScoredCard] = []
    for card in cards:
        handicap, hole_strokes = player_hole_strokes(
            card.participant, holes, tee, handicap_pct, handicap_cap
        )
        hole_results, total = score_card(engine, holes, card.strokes, hole_strokes)
        scored.append(
            ScoredCard(
                participant=card.participant,
                playing_handicap=handicap,
                hole_strokes=hole_strokes,
                holes=hole_results,
                total=total,
            )
        )
    return scored


def round_leaderboard(engine: ScoringEngine, scored: Sequence[ScoredCard]) -> list[LeaderboardEntry]:
    complete = [card for card in scored if card.total is not None]
    ordered = sorted(
        complete,
        key=cmp_to_key(lambda a, b: engine.compare_scores(a.total, b.total)),
    )
    ranked = assign_positions_by(
        ordered, lambda previous, current: engine.compare_scores(previous.total, current.total) == 0
    )
    return [
        LeaderboardEntry(
            position=position,
            participant=card.participant,
            total=card.total,
            display=engine.leaderboard_display(card.total),
        )
        for position, card in ranked
    ]


def round_positions(net_totals: Mapping[str, int | None]) -> dict[str, int]:
    """Finishing position per participant by net total ascending; cards without a total get none."""
    ordered = sorted(
        ((participant_id, net) for participant_id, net in net_totals.items() if net is not None),
        key=lambda item: item[1],
    )
    return {
        participant_id: position
        for position, (participant_id, _net) in assign_positions(ordered, key=lambda item: item[1])
    }


def skins_entries(scored: Sequence[ScoredCard]) -> list[SkinsEntry]:
    return [
        SkinsEntry(
            participant_id=card.participant.participant_id,
            hole_number=hole.hole_number,
            net_strokes=hole.net_strokes,
        )
        for card in scored
        for hole in card.holes
    ]

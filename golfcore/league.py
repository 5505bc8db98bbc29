"""League seasons: per-round points rolled up into season standings."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Mapping, Sequence

from golfcore.positions import assign_positions
from golfcore.scorecard import round_positions

DEFAULT_POSITION_POINTS = (10, 9, 8, 7, 6, 5, 4, 3, 2, 1) + (0,) * 10
DEFAULT_STROKE_DIFF_BASE = 50
DEFAULT_STROKE_DIFF_PAR = 72


def _value_or(value: Any, default: int) -> int:
    return default if value is None else int(value)


class LeaguePointsSystem(str, Enum):
    POSITION_BASED = "POSITION_BASED"
    STABLEFORD = "STABLEFORD"
    STROKE_DIFF = "STROKE_DIFF"


@dataclass(frozen=True)
class LeagueSettings:
    points_system: LeaguePointsSystem = LeaguePointsSystem.POSITION_BASED
    position_points: tuple[int, ...] = DEFAULT_POSITION_POINTS
    min_rounds: int = 0
    count_best_rounds: int | None = None
    stroke_diff_base: int = DEFAULT_STROKE_DIFF_BASE
    stroke_diff_par: int = DEFAULT_STROKE_DIFF_PAR

    @classmethod
    def from_dict(cls, values: Mapping[str, Any] | None) -> "LeagueSettings":
        values = values or {}
        try:
            points_system = LeaguePointsSystem(values.get("points_system") or "POSITION_BASED")
        except ValueError:
            points_system = LeaguePointsSystem.POSITION_BASED
        position_points = values.get("position_points")
        return cls(
            points_system=points_system,
            position_points=tuple(position_points) if position_points else DEFAULT_POSITION_POINTS,
            min_rounds=values.get("min_rounds") or 0,
            count_best_rounds=values.get("count_best_rounds") or None,
            stroke_diff_base=_value_or(values.get("stroke_diff_base"), DEFAULT_STROKE_DIFF_BASE),
            stroke_diff_par=_value_or(values.get("stroke_diff_par"), DEFAULT_STROKE_DIFF_PAR),
        )


@dataclass(frozen=True)
class SeasonScorecard:
    participant_id: str
    round_id: str
    played_on: date | None = None
    net_total: int | None = None
    stableford_points: int | None = None
    position: int | None = None
    par: int | None = None


@dataclass(frozen=True)
class SeasonStats:
    avg_score: float | None
    best_round: int | None
    worst_round: int | None
    avg_points: float


@dataclass(frozen=True)
class SeasonPoints:
    total_points: int
    rounds_played: int
    counted_rounds: int
    stats: SeasonStats


@dataclass(frozen=True)
class LeagueStanding:
    participant_id: str
    name: str
    position: int | None
    eligible: bool
    total_points: int
    rounds_played: int
    counted_rounds: int
    stats: SeasonStats


def round_points(card: SeasonScorecard, settings: LeagueSettings) -> int:
    if settings.points_system is LeaguePointsSystem.POSITION_BASED:
        if card.position is None or card.position < 1:
            return 0
        index = card.position - 1
        return settings.position_points[index] if index < len(settings.position_points) else 0

    if settings.points_system is LeaguePointsSystem.STABLEFORD:
        return card.stableford_points or 0

    if settings.points_system is LeaguePointsSystem.STROKE_DIFF:
        if not card.net_total:
            return 0
        par = card.par if card.par is not None else settings.stroke_diff_par
        return max(0, settings.stroke_diff_base + (par - card.net_total))

    return 0


def season_points(cards: Sequence[SeasonScorecard], settings: LeagueSettings) -> SeasonPoints:
    points = [round_points(card, settings) for card in cards]
    rounds_played = len(points)

    counted = sorted(points, reverse=True)
    if settings.count_best_rounds and settings.count_best_rounds < rounds_played:
        counted = counted[: settings.count_best_rounds]
    total = sum(counted)

    net_scores = [card.net_total for card in cards if card.net_total is not None]
    stats = SeasonStats(
        avg_score=sum(net_scores) / len(net_scores) if net_scores else None,
        best_round=min(net_scores) if net_scores else None,
        worst_round=max(net_scores) if net_scores else None,
        avg_points=total / len(counted) if counted else 0,
    )
    return SeasonPoints(
        total_points=total,
        rounds_played=rounds_played,
        counted_rounds=len(counted),
        stats=stats,
    )


def calculate_standings(
    season: Mapping[str, SeasonPoints],
    names: Mapping[str, str],
    settings: LeagueSettings,
) -> list[LeagueStanding]:
    """
    Rank members on season points, fewer rounds first on equal points. Members
    short of ``min_rounds`` are returned after the ranked ones without a position.
    """
    eligible = sorted(
        (item for item in season.items() if item[1].rounds_played >= settings.min_rounds),
        key=lambda item: (-item[1].total_points, item[1].rounds_played),
    )
    ineligible = sorted(
        (item for item in season.items() if item[1].rounds_played < settings.min_rounds),
        key=lambda item: (-item[1].total_points, item[1].rounds_played),
    )

    ranked = assign_positions(eligible, key=lambda item: (item[1].total_points, item[1].rounds_played))
    standings = [
        _standing(participant_id, names, points, position)
        for position, (participant_id, points) in ranked
    ]
    standings.extend(_standing(participant_id, names, points, None) for participant_id, points in ineligible)
    return standings


def _standing(
    participant_id: str,
    names: Mapping[str, str],
    points: SeasonPoints,
    position: int | None,
) -> LeagueStanding:
    return LeagueStanding(
        participant_id=participant_id,
        name=names.get(participant_id, participant_id),
        position=position,
        eligible=position is not None,
        total_points=points.total_points,
        rounds_played=points.rounds_played,
        counted_rounds=points.counted_rounds,
        stats=points.stats,
    )


def season_scorecards(
    cards: Sequence[SeasonScorecard],
    start: date | None = None,
    end: date | None = None,
) -> list[SeasonScorecard]:
    """Cards for rounds played inside the season window, both ends inclusive."""
    if start is None and end is None:
        return list(cards)
    return [
        card
        for card in cards
        if card.played_on is not None
        and (start is None or card.played_on >= start)
        and (end is None or card.played_on <= end)
    ]


def with_round_positions(cards: Sequence[SeasonScorecard]) -> list[SeasonScorecard]:
    """Fill in missing finishing positions from every card of the same round."""
    by_round: dict[str, dict[str, int | None]] = defaultdict(dict)
    for card in cards:
        by_round[card.round_id][card.participant_id] = card.net_total
    positions = {round_id: round_positions(net_totals) for round_id, net_totals in by_round.items()}
    return [
        card if card.position is not None else replace(card, position=positions[card.round_id].get(card.participant_id))
        for card in cards
    ]


def recalculate_season(
    cards: Sequence[SeasonScorecard],
    names: Mapping[str, str],
    settings: LeagueSettings,
    start: date | None = None,
    end: date | None = None,
) -> list[LeagueStanding]:
    """
    Full standings for a season. Every member in ``names`` is reported even with
    no rounds; the result depends only on the inputs, so repeated runs agree.
    """
    in_window = with_round_positions(season_scorecards(cards, start, end))
    member_cards: dict[str, list[SeasonScorecard]] = {participant_id: [] for participant_id in names}
    for card in in_window:
        member_cards.setdefault(card.participant_id, []).append(card)
    season = {
        participant_id: season_points(member, settings)
        for participant_id, member in member_cards.items()
    }
    return calculate_standings(season, names, settings)

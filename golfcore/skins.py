"""
Skins: the sole lowest net score on a hole wins that hole's value. Tied holes can
carry their value into the next eligible hole.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from golfcore.positions import assign_positions

UNKNOWN_NAME = "Unknown"


@dataclass(frozen=True)
class SkinsConfig:
    carryover: bool = True
    value: int = 100
    eligible_holes: tuple[int, ...] = tuple(range(1, 19))
    auto_carry_last_hole: bool = False


@dataclass(frozen=True)
class SkinsEntry:
    participant_id: str
    hole_number: int
    net_strokes: int


@dataclass(frozen=True)
class SkinsParticipantScore:
    participant_id: str
    name: str
    net_strokes: int


@dataclass(frozen=True)
class SkinsHoleResult:
    hole_number: int
    value: int
    tied: bool
    carried_over: int
    participants: list[SkinsParticipantScore]
    winner_id: str | None = None
    winner_name: str | None = None


@dataclass
class SkinsTotal:
    skins_won: int = 0
    total_value: int = 0
    holes: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class SkinsOutcome:
    hole_results: list[SkinsHoleResult]
    totals: dict[str, SkinsTotal]
    unresolved_value: int = 0


@dataclass(frozen=True)
class SkinsLeaderboardEntry:
    position: int
    participant_id: str
    name: str
    skins_won: int
    total_value: int
    holes: list[int]


def calculate_skins(
    entries: Sequence[SkinsEntry],
    player_names: Mapping[str, str],
    config: SkinsConfig | None = None,
) -> SkinsOutcome:
    config = config or SkinsConfig()
    players = list(dict.fromkeys(entry.participant_id for entry in entries))
    totals = {participant_id: SkinsTotal() for participant_id in players}
    hole_results: list[SkinsHoleResult] = []
    carryover = 0

    for hole_number in config.eligible_holes:
        hole_scores = [entry for entry in entries if entry.hole_number == hole_number]
        if not hole_scores:
            continue

        lowest = min(entry.net_strokes for entry in hole_scores)
        winners = [entry for entry in hole_scores if entry.net_strokes == lowest]
        current_value = config.value + carryover
        participants = [
            SkinsParticipantScore(
                participant_id=entry.participant_id,
                name=player_names.get(entry.participant_id, UNKNOWN_NAME),
                net_strokes=entry.net_strokes,
            )
            for entry in hole_scores
        ]

        if len(winners) == 1:
            winner_id = winners[0].participant_id
            hole_results.append(
                SkinsHoleResult(
                    hole_number=hole_number,
                    value=current_value,
                    tied=False,
                    carried_over=carryover,
                    participants=participants,
                    winner_id=winner_id,
                    winner_name=player_names.get(winner_id, UNKNOWN_NAME),
                )
            )
            total = totals[winner_id]
            total.skins_won += 1
            total.total_value += current_value
            total.holes.append(hole_number)
            carryover = 0
            continue

        hole_results.append(
            SkinsHoleResult(
                hole_number=hole_number,
                value=current_value,
                tied=True,
                carried_over=carryover,
                participants=participants,
            )
        )
        carryover = carryover + config.value if config.carryover else 0

    # A tied final hole is split between everyone who played, not only the tied players.
    if carryover > 0 and not config.auto_carry_last_hole and players:
        split = carryover // len(players)
        for participant_id in players:
            totals[participant_id].total_value += split
        carryover = 0

    return SkinsOutcome(hole_results=hole_results, totals=totals, unresolved_value=carryover)


def skins_leaderboard(
    totals: Mapping[str, SkinsTotal],
    player_names: Mapping[str, str],
) -> list[SkinsLeaderboardEntry]:
    ordered = sorted(
        totals.items(),
        key=lambda item: (-item[1].skins_won, -item[1].total_value),
    )
    ranked = assign_positions(ordered, key=lambda item: (item[1].skins_won, item[1].total_value))
    return [
        SkinsLeaderboardEntry(
            position=position,
            participant_id=participant_id,
            name=player_names.get(participant_id, UNKNOWN_NAME),
            skins_won=total.skins_won,
            total_value=total.total_value,
            holes=list(total.holes),
        )
        for position, (participant_id, total) in ranked
    ]

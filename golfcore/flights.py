"""Handicap flights: split the field into groups and rank each group separately."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from golfcore.positions import assign_positions


class FlightMethod(str, Enum):
    EQUAL_SIZE = "EQUAL_SIZE"
    HANDICAP_RANGE = "HANDICAP_RANGE"


@dataclass(frozen=True)
class FlightMember:
    participant_id: str
    name: str
    handicap: float


@dataclass(frozen=True)
class FlightRange:
    name: str
    min_handicap: float
    max_handicap: float


@dataclass(frozen=True)
class FlightConfig:
    method: FlightMethod = FlightMethod.EQUAL_SIZE
    number_of_flights: int = 1
    custom_ranges: tuple[FlightRange, ...] = ()


@dataclass(frozen=True)
class Flight:
    flight_id: str
    name: str
    min_handicap: float
    max_handicap: float
    members: list[FlightMember] = field(default_factory=list)


@dataclass(frozen=True)
class FlightScore:
    participant_id: str
    name: str
    handicap: float
    gross_total: int
    net_total: int
    stableford_points: int | None = None


@dataclass(frozen=True)
class FlightLeaderboardEntry:
    position: int
    score: FlightScore


def _flight_letter(index: int) -> str:
    return f"Flight {chr(ord('A') + index)}"


def create_flights_by_size(members: Sequence[FlightMember], number_of_flights: int) -> list[Flight]:
    if number_of_flights < 1 or not members:
        return []

    ordered = sorted(members, key=lambda member: member.handicap)
    flight_size = math.ceil(len(ordered) / number_of_flights)
    flights: list[Flight] = []
    for index in range(number_of_flights):
        flight_members = ordered[index * flight_size : (index + 1) * flight_size]
        if not flight_members:
            break
        flights.append(
            Flight(
                flight_id=f"flight-{index}",
                name=_flight_letter(index),
                min_handicap=min(member.handicap for member in flight_members),
                max_handicap=max(member.handicap for member in flight_members),
                members=flight_members,
            )
        )
    return flights


def create_flights_by_range(
    members: Sequence[FlightMember], ranges: Sequence[FlightRange]
) -> list[Flight]:
    """One flight per range; overlapping ranges put a member in several flights."""
    flights: list[Flight] = []
    for index, flight_range in enumerate(ranges):
        flight_members = sorted(
            (
                member
                for member in members
                if flight_range.min_handicap <= member.handicap <= flight_range.max_handicap
            ),
            key=lambda member: member.handicap,
        )
        flights.append(
            Flight(
                flight_id=f"flight-{index}",
                name=flight_range.name,
                min_handicap=flight_range.min_handicap,
                max_handicap=flight_range.max_handicap,
                members=flight_members,
            )
        )
    return flights


def create_flights(members: Sequence[FlightMember], config: FlightConfig) -> list[Flight]:
    if config.method is FlightMethod.HANDICAP_RANGE and config.custom_ranges:
        return create_flights_by_range(members, config.custom_ranges)
    return create_flights_by_size(members, config.number_of_flights)


def flight_leaderboard(
    flight_id: str,
    flights: Sequence[Flight],
    scores: Sequence[FlightScore],
    scoring_format: str = "STROKE_PLAY",
) -> list[FlightLeaderboardEntry]:
    flight = next((item for item in flights if item.flight_id == flight_id), None)
    if flight is None:
        return []

    member_ids = {member.participant_id for member in flight.members}
    flight_scores = [score for score in scores if score.participant_id in member_ids]
    if scoring_format == "STABLEFORD":
        ordered = sorted(flight_scores, key=lambda score: -(score.stableford_points or 0))
        ranked = assign_positions(ordered, key=lambda score: score.stableford_points)
    else:
        ordered = sorted(flight_scores, key=lambda score: score.net_total)
        ranked = assign_positions(ordered, key=lambda score: score.net_total)
    return [FlightLeaderboardEntry(position=position, score=score) for position, score in ranked]


def suggest_flight_ranges(handicaps: Sequence[float], number_of_flights: int) -> list[FlightRange]:
    """Equal-width handicap bands over the observed range, used to pre-fill flight setup."""
    if not handicaps or number_of_flights < 1:
        return []

    low = min(handicaps)
    high = max(handicaps)
    width = (high - low) / number_of_flights
    suggestions: list[FlightRange] = []
    for index in range(number_of_flights):
        upper = high if index == number_of_flights - 1 else math.floor(low + (index + 1) * width)
        suggestions.append(
            FlightRange(
                name=_flight_letter(index),
                min_handicap=math.floor(low + index * width),
                max_handicap=upper,
            )
        )
    return suggestions

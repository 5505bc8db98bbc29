"""Closest to the pin on the par 3s."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Sequence

INCHES_PER_FOOT = 12
INCHES_PER_METER = 39.3701
MAX_DISTANCE_INCHES = 10800  # 300 yards


class DistanceUnit(str, Enum):
    FEET = "FEET"
    INCHES = "INCHES"
    METERS = "METERS"


@dataclass(frozen=True)
class CTPConfig:
    holes: tuple[int, ...]
    unit: DistanceUnit = DistanceUnit.FEET
    require_green: bool = True


@dataclass(frozen=True)
class CTPMeasurement:
    participant_id: str
    name: str
    hole_number: int
    distance: float
    unit: str
    on_green: bool
    timestamp: datetime | None = None


@dataclass(frozen=True)
class CTPResult:
    hole_number: int
    unit: str
    measurements: list[CTPMeasurement]
    winner_id: str | None = None
    winner_name: str | None = None
    distance: float | None = None


@dataclass(frozen=True)
class CTPChampion:
    participant_id: str
    name: str
    ctp_wins: int
    holes: list[int]


def _unit_value(unit: DistanceUnit | str) -> str:
    return unit.value if isinstance(unit, DistanceUnit) else str(unit)


def calculate_ctp(measurements: Sequence[CTPMeasurement], config: CTPConfig) -> list[CTPResult]:
    unit = _unit_value(config.unit)
    results: list[CTPResult] = []
    for hole_number in config.holes:
        hole_measurements = [item for item in measurements if item.hole_number == hole_number]
        qualifying = (
            [item for item in hole_measurements if item.on_green]
            if config.require_green
            else hole_measurements
        )
        if not qualifying:
            results.append(CTPResult(hole_number=hole_number, unit=unit, measurements=hole_measurements))
            continue

        winner = qualifying[0]
        for item in qualifying[1:]:
            if item.distance < winner.distance:
                winner = item
        results.append(
            CTPResult(
                hole_number=hole_number,
                unit=unit,
                measurements=hole_measurements,
                winner_id=winner.participant_id,
                winner_name=winner.name,
                distance=winner.distance,
            )
        )
    return results


def format_distance(distance: float, unit: DistanceUnit | str) -> str:
    """FEET distances are stored in inches and shown as feet and inches."""
    unit = _unit_value(unit)
    if unit == DistanceUnit.FEET.value:
        feet = math.floor(distance / INCHES_PER_FOOT)
        inches = round(distance % INCHES_PER_FOOT)
        return f"{feet}' {inches}\""
    if unit == DistanceUnit.INCHES.value:
        return f"{distance:g}\""
    if unit == DistanceUnit.METERS.value:
        return f"{distance:.2f}m"
    return f"{distance} {unit}"


def convert_to_inches(distance: float, unit: DistanceUnit | str) -> float:
    unit = _unit_value(unit)
    if unit == DistanceUnit.FEET.value:
        return distance * INCHES_PER_FOOT
    if unit == DistanceUnit.METERS.value:
        return distance * INCHES_PER_METER
    return distance


def convert_from_inches(inches: float, unit: DistanceUnit | str) -> float:
    unit = _unit_value(unit)
    if unit == DistanceUnit.FEET.value:
        return inches / INCHES_PER_FOOT
    if unit == DistanceUnit.METERS.value:
        return inches / INCHES_PER_METER
    return inches


def validate_measurement(measurement: CTPMeasurement, config: CTPConfig) -> tuple[bool, str | None]:
    if measurement.hole_number not in config.holes:
        return False, f"Hole {measurement.hole_number} is not configured for CTP"
    if config.require_green and not measurement.on_green:
        return False, "Ball must be on the green to qualify"
    if measurement.distance < 0:
        return False, "Distance must be positive"
    if convert_to_inches(measurement.distance, measurement.unit) > MAX_DISTANCE_INCHES:
        return False, "Distance seems unrealistic (> 300 yards)"
    return True, None


def ctp_champion(results: Sequence[CTPResult]) -> CTPChampion | None:
    holes_won: dict[str, list[int]] = {}
    names: dict[str, str] = {}
    for result in results:
        if not result.winner_id:
            continue
        holes_won.setdefault(result.winner_id, []).append(result.hole_number)
        names.setdefault(result.winner_id, result.winner_name or "")

    champion: CTPChampion | None = None
    for participant_id, holes in holes_won.items():
        if champion is None or len(holes) > champion.ctp_wins:
            champion = CTPChampion(
                participant_id=participant_id,
                name=names[participant_id],
                ctp_wins=len(holes),
                holes=holes,
            )
    return champion

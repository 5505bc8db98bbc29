#!/usr/bin/env python3
"""Rebuild league standings for a season from a JSON export of its scorecards."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from golfcore.db import ensure_schema, replace_season_standings
from golfcore.league import LeagueSettings, LeagueStanding, SeasonScorecard, recalculate_season
from golfcore.settings import load_settings

logger = logging.getLogger("recalculate_season")


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value)


def load_export(path: Path) -> dict:
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def standings_from_export(export: dict) -> list[LeagueStanding]:
    cards = [
        SeasonScorecard(
            participant_id=str(card["participant_id"]),
            round_id=str(card["round_id"]),
            played_on=_parse_date(card.get("played_on")),
            net_total=card.get("net_total"),
            stableford_points=card.get("stableford_points"),
            position=card.get("position"),
            par=card.get("par"),
        )
        for card in export.get("scorecards", [])
    ]
    names = {str(member["participant_id"]): member.get("name", "") for member in export.get("members", [])}
    return recalculate_season(
        cards,
        names,
        LeagueSettings.from_dict(export.get("settings")),
        start=_parse_date(export.get("start_date")),
        end=_parse_date(export.get("end_date")),
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Recalculate league standings for a season export.")
    parser.add_argument("export", type=Path, help="JSON file with settings, members and scorecards.")
    parser.add_argument("--season-id", type=str, help="Season ID used when storing the standings.")
    parser.add_argument(
        "--store",
        action="store_true",
        help="Replace the stored standings for --season-id instead of only printing them.",
    )
    args = parser.parse_args()
    logging.basicConfig(level=load_settings().log_level)

    if args.store and not args.season_id:
        parser.error("--store requires --season-id.")

    standings = standings_from_export(load_export(args.export))
    if args.store:
        database_url = load_settings().database_url
        ensure_schema(database_url)
        stored = replace_season_standings(database_url, args.season_id, standings)
        logger.info("Stored %s standings for season %s", stored, args.season_id)

    for standing in standings:
        position = standing.position if standing.position is not None else "-"
        print(
            f"{position:>3}  {standing.name:<24} {standing.total_points:>5} pts  "
            f"{standing.rounds_played} rounds ({standing.counted_rounds} counted)"
        )
    if not standings:
        print("No members found in export.")


if __name__ == "__main__":
    main()

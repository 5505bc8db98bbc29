from dataclasses import asdict
from typing import Sequence

import psycopg
from psycopg.types.json import Jsonb

from golfcore.league import LeagueStanding


def ensure_schema(database_url: str) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                create table if not exists league_standings (
                    id serial primary key,
                    season_id text not null,
                    participant_id text not null,
                    name text not null,
                    position integer,
                    eligible boolean not null default true,
                    total_points integer not null default 0,
                    rounds_played integer not null default 0,
                    counted_rounds integer not null default 0,
                    stats jsonb not null default '{}'::jsonb,
                    calculated_at timestamptz not null default now(),
                    unique (season_id, participant_id)
                );
                """
            )
            cur.execute(
                """
                create table if not exists competition_results (
                    id serial primary key,
                    competition_id text not null,
                    participant_id text not null,
                    position integer,
                    result jsonb not null default '{}'::jsonb,
                    calculated_at timestamptz not null default now()
                );
                """
            )


def replace_season_standings(
    database_url: str,
    season_id: str,
    standings: Sequence[LeagueStanding],
) -> int:
    """Swap the stored standings for a season with ``standings`` in one transaction."""
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute("delete from league_standings where season_id = %s;", (season_id,))
            cur.executemany(
                """
                insert into league_standings (
                    season_id,
                    participant_id,
                    name,
                    position,
                    eligible,
                    total_points,
                    rounds_played,
                    counted_rounds,
                    stats
                )
                values (%s, %s, %s, %s, %s, %s, %s, %s, %s);
                """,
                [
                    (
                        season_id,
                        standing.participant_id,
                        standing.name,
                        standing.position,
                        standing.eligible,
                        standing.total_points,
                        standing.rounds_played,
                        standing.counted_rounds,
                        Jsonb(asdict(standing.stats)),
                    )
                    for standing in standings
                ],
            )
    return len(standings)


def fetch_season_standings(database_url: str, season_id: str) -> list[dict]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select
                    participant_id,
                    name,
                    position,
                    eligible,
                    total_points,
                    rounds_played,
                    counted_rounds,
                    stats,
                    calculated_at
                from league_standings
                where season_id = %s
                order by position asc nulls last, total_points desc;
                """,
                (season_id,),
            )
            rows = cur.fetchall()
            return [
                {
                    "participant_id": row[0],
                    "name": row[1],
                    "position": row[2],
                    "eligible": row[3],
                    "total_points": row[4],
                    "rounds_played": row[5],
                    "counted_rounds": row[6],
                    "stats": row[7],
                    "calculated_at": row[8],
                }
                for row in rows
            ]


def replace_competition_results(
    database_url: str,
    competition_id: str,
    results: Sequence[dict],
) -> int:
    """``results`` items carry ``participant_id``, ``position`` and a ``result`` mapping."""
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                "delete from competition_results where competition_id = %s;",
                (competition_id,),
            )
            cur.executemany(
                """
                insert into competition_results (competition_id, participant_id, position, result)
                values (%s, %s, %s, %s);
                """,
                [
                    (
                        competition_id,
                        item["participant_id"],
                        item.get("position"),
                        Jsonb(item.get("result") or {}),
                    )
                    for item in results
                ],
            )
    return len(results)

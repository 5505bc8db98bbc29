import logging
from dataclasses import asdict
from datetime import date
from typing import Any, TypeVar

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from golfcore import course_api
from golfcore.closest_to_pin import (
    CTPConfig,
    CTPMeasurement,
    DistanceUnit,
    calculate_ctp,
    ctp_champion,
    format_distance,
)
from golfcore.db import (
    ensure_schema,
    fetch_season_standings,
    replace_competition_results,
    replace_season_standings,
)
from golfcore.flights import (
    FlightConfig,
    FlightMember,
    FlightMethod,
    FlightRange,
    FlightScore,
    create_flights,
    flight_leaderboard,
    suggest_flight_ranges,
)
from golfcore.league import LeagueSettings, SeasonScorecard, recalculate_season
from golfcore.models import HoleDefinition, Participant, ScoringConfig, TeeRating
from golfcore.scorecard import PlayerCard, ScoredCard, round_leaderboard, score_round, skins_entries
from golfcore.scoring import (
    BestBallEngine,
    MatchPlayEngine,
    ScoringEngine,
    StrokePlayEngine,
    available_formats,
    compare_match_play,
    get_scoring_engine,
)
from golfcore.settings import load_settings
from golfcore.skins import SkinsConfig, calculate_skins, skins_leaderboard

logger = logging.getLogger(__name__)

app = FastAPI()
settings = load_settings()

ModelT = TypeVar("ModelT", bound=BaseModel)


class HolePayload(BaseModel):
    hole_number: int = Field(ge=1, le=18)
    par: int = Field(ge=3, le=5)
    stroke_index: int = Field(ge=1, le=18)
    yardage: int | None = None


class TeePayload(BaseModel):
    slope_rating: int = Field(ge=55, le=155)
    course_rating: float
    total_par: int


class PlayerPayload(BaseModel):
    participant_id: str
    name: str
    handicap_index: float | None = None
    strokes: list[int | None] = Field(default_factory=list)


class CourseContext(BaseModel):
    holes: list[HolePayload]
    tee: TeePayload | None = None
    handicap_pct: float | None = Field(default=None, ge=0, le=100)
    handicap_cap: float | None = None


class TeamPayload(BaseModel):
    team_id: str
    name: str
    members: list[str]


class RoundPayload(CourseContext):
    scoring_format: str = "STROKE_PLAY"
    scoring_config: dict[str, Any] = Field(default_factory=dict)
    players: list[PlayerPayload]
    teams: list[TeamPayload] = Field(default_factory=list)


class MatchPlayPayload(CourseContext):
    player_a: PlayerPayload
    player_b: PlayerPayload


class SkinsPayload(CourseContext):
    competition_id: str | None = None
    players: list[PlayerPayload]
    carryover: bool = True
    value: int = 100
    eligible_holes: list[int] = Field(default_factory=lambda: list(range(1, 19)))
    auto_carry_last_hole: bool = False


class FlightRangePayload(BaseModel):
    name: str
    min_handicap: float
    max_handicap: float


class FlightEntryPayload(BaseModel):
    participant_id: str
    name: str
    handicap: float | None = None
    gross_total: int | None = None
    net_total: int | None = None
    stableford_points: int | None = None


class FlightsPayload(BaseModel):
    competition_id: str | None = None
    method: FlightMethod = FlightMethod.EQUAL_SIZE
    number_of_flights: int = 1
    custom_ranges: list[FlightRangePayload] = Field(default_factory=list)
    scoring_format: str = "STROKE_PLAY"
    entries: list[FlightEntryPayload]


class MeasurementPayload(BaseModel):
    participant_id: str
    name: str
    hole_number: int
    distance: float
    unit: str = "FEET"
    on_green: bool = True


class CTPPayload(BaseModel):
    holes: list[int]
    unit: DistanceUnit = DistanceUnit.FEET
    require_green: bool = True
    measurements: list[MeasurementPayload] = Field(default_factory=list)


class MemberPayload(BaseModel):
    participant_id: str
    name: str


class SeasonCardPayload(BaseModel):
    participant_id: str
    round_id: str
    played_on: date | None = None
    net_total: int | None = None
    stableford_points: int | None = None
    position: int | None = None
    par: int | None = None


class SeasonPayload(BaseModel):
    settings: dict[str, Any] = Field(default_factory=dict)
    start_date: date | None = None
    end_date: date | None = None
    members: list[MemberPayload]
    scorecards: list[SeasonCardPayload] = Field(default_factory=list)


async def _parse(request: Request, model: type[ModelT]) -> ModelT | JSONResponse:
    try:
        return model.model_validate(await request.json())
    except ValidationError as exc:
        return JSONResponse(
            {"error": "Invalid payload", "details": exc.errors(include_url=False)},
            status_code=422,
        )


def _holes(context: CourseContext) -> list[HoleDefinition]:
    return [
        HoleDefinition(
            hole_number=hole.hole_number,
            par=hole.par,
            stroke_index=hole.stroke_index,
            yardage=hole.yardage,
        )
        for hole in context.holes
    ]


def _tee(context: CourseContext) -> TeeRating | None:
    if context.tee is None:
        return None
    return TeeRating(
        slope_rating=context.tee.slope_rating,
        course_rating=context.tee.course_rating,
        total_par=context.tee.total_par,
    )


def _handicap_pct(context: CourseContext) -> float:
    if context.handicap_pct is None:
        return settings.default_handicap_pct
    return context.handicap_pct


def _card(player: PlayerPayload) -> PlayerCard:
    return PlayerCard(
        participant=Participant(
            participant_id=player.participant_id,
            name=player.name,
            handicap_index=player.handicap_index,
        ),
        strokes={idx: value for idx, value in enumerate(player.strokes, 1)},
    )


def _score_cards(engine: ScoringEngine, context: CourseContext, players: list[PlayerPayload]) -> list[ScoredCard]:
    return score_round(
        engine,
        _holes(context),
        [_card(player) for player in players],
        tee=_tee(context),
        handicap_pct=_handicap_pct(context),
        handicap_cap=context.handicap_cap,
    )


def _scored_card_view(card: ScoredCard) -> dict:
    return {
        "participant_id": card.participant.participant_id,
        "name": card.participant.name,
        "playing_handicap": card.playing_handicap,
        "hole_strokes": card.hole_strokes,
        "holes": [asdict(hole) for hole in card.holes],
        "total": asdict(card.total) if card.total else None,
    }


def _team_views(engine: BestBallEngine, scored: list[ScoredCard], teams: list[TeamPayload], hole_count: int) -> list[dict]:
    by_id = {card.participant.participant_id: card for card in scored}
    views = []
    for team in teams:
        team_holes = engine.calculate_team_holes(
            [by_id[member].holes for member in team.members if member in by_id]
        )
        total = engine.calculate_total_score(team_holes) if hole_count and len(team_holes) == hole_count else None
        views.append(
            {
                "team_id": team.team_id,
                "name": team.name,
                "holes": [asdict(hole) for hole in team_holes],
                "total": asdict(total) if total else None,
                "display": engine.leaderboard_display(total) if total else None,
            }
        )
    return views


@app.on_event("startup")
def startup() -> None:
    ensure_schema(settings.database_url)


@app.get("/api/formats")
async def formats():
    return {"formats": available_formats()}


@app.post("/api/rounds/score")
async def score_round_endpoint(request: Request):
    payload = await _parse(request, RoundPayload)
    if isinstance(payload, JSONResponse):
        return payload

    engine = get_scoring_engine(payload.scoring_format, ScoringConfig.from_dict(payload.scoring_config))
    scored = _score_cards(engine, payload, payload.players)
    response = {
        "format": engine.format.value,
        "players": [_scored_card_view(card) for card in scored],
        "leaderboard": [
            {
                "position": entry.position,
                "participant_id": entry.participant.participant_id,
                "name": entry.participant.name,
                "display": entry.display,
                "total": asdict(entry.total),
            }
            for entry in round_leaderboard(engine, scored)
        ],
    }
    if isinstance(engine, BestBallEngine) and payload.teams:
        response["teams"] = _team_views(engine, scored, payload.teams, len(payload.holes))
    return response


@app.post("/api/match-play")
async def match_play(request: Request):
    payload = await _parse(request, MatchPlayPayload)
    if isinstance(payload, JSONResponse):
        return payload

    card_a, card_b = _score_cards(MatchPlayEngine(), payload, [payload.player_a, payload.player_b])
    outcome = compare_match_play(card_a.holes, card_b.holes, total_holes=len(payload.holes))
    return {
        "match_result": outcome.match_result,
        "winner": outcome.winner,
        "holes_played": outcome.holes_played,
        "player_a": {"participant_id": payload.player_a.participant_id, **asdict(outcome.player_a)},
        "player_b": {"participant_id": payload.player_b.participant_id, **asdict(outcome.player_b)},
    }


@app.post("/api/competitions/skins")
async def skins(request: Request):
    payload = await _parse(request, SkinsPayload)
    if isinstance(payload, JSONResponse):
        return payload

    scored = _score_cards(StrokePlayEngine(), payload, payload.players)
    names = {player.participant_id: player.name for player in payload.players}
    outcome = calculate_skins(
        skins_entries(scored),
        names,
        SkinsConfig(
            carryover=payload.carryover,
            value=payload.value,
            eligible_holes=tuple(payload.eligible_holes),
            auto_carry_last_hole=payload.auto_carry_last_hole,
        ),
    )
    leaderboard = skins_leaderboard(outcome.totals, names)
    if payload.competition_id:
        replace_competition_results(
            settings.database_url,
            payload.competition_id,
            [
                {
                    "participant_id": entry.participant_id,
                    "position": entry.position,
                    "result": {
                        "skins_won": entry.skins_won,
                        "total_value": entry.total_value,
                        "holes": entry.holes,
                    },
                }
                for entry in leaderboard
            ],
        )
    return {
        "holes": [asdict(result) for result in outcome.hole_results],
        "leaderboard": [asdict(entry) for entry in leaderboard],
        "unresolved_value": outcome.unresolved_value,
    }


@app.post("/api/competitions/flights")
async def flights(request: Request):
    payload = await _parse(request, FlightsPayload)
    if isinstance(payload, JSONResponse):
        return payload

    members = [
        FlightMember(participant_id=entry.participant_id, name=entry.name, handicap=entry.handicap)
        for entry in payload.entries
        if entry.handicap is not None
    ]
    config = FlightConfig(
        method=payload.method,
        number_of_flights=payload.number_of_flights,
        custom_ranges=tuple(
            FlightRange(name=item.name, min_handicap=item.min_handicap, max_handicap=item.max_handicap)
            for item in payload.custom_ranges
        ),
    )
    flight_list = create_flights(members, config)
    scores = [
        FlightScore(
            participant_id=entry.participant_id,
            name=entry.name,
            handicap=entry.handicap or 0,
            gross_total=entry.gross_total or 0,
            net_total=entry.net_total or 0,
            stableford_points=entry.stableford_points,
        )
        for entry in payload.entries
        if entry.net_total is not None or entry.stableford_points is not None
    ]
    scoring_format = "STABLEFORD" if payload.scoring_format.upper() == "STABLEFORD" else "STROKE_PLAY"

    views = []
    results = []
    for flight in flight_list:
        leaderboard = flight_leaderboard(flight.flight_id, flight_list, scores, scoring_format)
        views.append(
            {
                "flight_id": flight.flight_id,
                "name": flight.name,
                "min_handicap": flight.min_handicap,
                "max_handicap": flight.max_handicap,
                "members": [asdict(member) for member in flight.members],
                "leaderboard": [
                    {"position": entry.position, **asdict(entry.score)} for entry in leaderboard
                ],
            }
        )
        results.extend(
            {
                "participant_id": entry.score.participant_id,
                "position": entry.position,
                "result": {
                    "flight_id": flight.flight_id,
                    "flight_name": flight.name,
                    "gross_total": entry.score.gross_total,
                    "net_total": entry.score.net_total,
                    "stableford_points": entry.score.stableford_points,
                },
            }
            for entry in leaderboard
        )
    if payload.competition_id:
        replace_competition_results(settings.database_url, payload.competition_id, results)
    return {
        "flights": views,
        "suggested_ranges": [
            asdict(item)
            for item in suggest_flight_ranges(
                [member.handicap for member in members], max(payload.number_of_flights, 1)
            )
        ],
    }


@app.post("/api/competitions/ctp")
async def closest_to_pin(request: Request):
    payload = await _parse(request, CTPPayload)
    if isinstance(payload, JSONResponse):
        return payload

    config = CTPConfig(holes=tuple(payload.holes), unit=payload.unit, require_green=payload.require_green)
    measurements = [
        CTPMeasurement(
            participant_id=item.participant_id,
            name=item.name,
            hole_number=item.hole_number,
            distance=item.distance,
            unit=item.unit,
            on_green=item.on_green,
        )
        for item in payload.measurements
    ]
    results = calculate_ctp(measurements, config)
    champion = ctp_champion(results)
    return {
        "holes": [
            {
                **asdict(result),
                "display": format_distance(result.distance, result.unit)
                if result.distance is not None
                else None,
            }
            for result in results
        ],
        "champion": asdict(champion) if champion else None,
    }


@app.post("/api/seasons/{season_id}/recalculate")
async def recalculate(season_id: str, request: Request):
    payload = await _parse(request, SeasonPayload)
    if isinstance(payload, JSONResponse):
        return payload

    league_settings = LeagueSettings.from_dict(payload.settings)
    standings = recalculate_season(
        [SeasonScorecard(**card.model_dump()) for card in payload.scorecards],
        {member.participant_id: member.name for member in payload.members},
        league_settings,
        start=payload.start_date,
        end=payload.end_date,
    )
    stored = replace_season_standings(settings.database_url, season_id, standings)
    logger.info("Recalculated season %s: %s standings stored", season_id, stored)
    return {
        "season_id": season_id,
        "points_system": league_settings.points_system.value,
        "standings": [asdict(standing) for standing in standings],
    }


@app.get("/api/seasons/{season_id}/standings")
async def standings(season_id: str):
    return {"season_id": season_id, "standings": fetch_season_standings(settings.database_url, season_id)}


@app.get("/api/courses")
async def course_search(q: str = "", search: str = ""):
    try:
        return course_api.search_courses(q or search, settings.golf_api_key)
    except course_api.CourseApiError as exc:
        return JSONResponse({"error": str(exc)}, status_code=502)


@app.get("/api/courses/{course_id}/tees")
async def course_tees(course_id: int):
    try:
        tees = course_api.fetch_course_tees(course_id, settings.golf_api_key)
    except course_api.CourseApiError as exc:
        return JSONResponse({"error": str(exc)}, status_code=502)
    return {"course_id": course_id, "tees": [asdict(tee) for tee in tees]}

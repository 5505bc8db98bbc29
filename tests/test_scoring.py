import logging

import pytest

from golfcore.models import HoleScoreInput, HoleScoreResult, ScoringConfig, TotalScoreResult
from golfcore.scoring import (
    BestBallEngine,
    MatchPlayEngine,
    ModifiedStablefordEngine,
    ScoringFormat,
    StablefordEngine,
    StrokePlayEngine,
    available_formats,
    calculate_best_ball,
    compare_match_play,
    get_scoring_engine,
)


def _inputs(strokes: list[int], pars: list[int] | None = None, handicap: list[int] | None = None):
    pars = pars or [4] * len(strokes)
    handicap = handicap or [0] * len(strokes)
    return [
        HoleScoreInput(hole_number=idx, strokes=value, par=par, handicap_strokes=given)
        for idx, (value, par, given) in enumerate(zip(strokes, pars, handicap), 1)
    ]


def _card(engine, strokes, **kwargs):
    return [engine.calculate_hole_score(hole) for hole in _inputs(strokes, **kwargs)]


def _net_card(nets: list[int]) -> list[HoleScoreResult]:
    return [
        HoleScoreResult(hole_number=idx, strokes=net, net_strokes=net)
        for idx, net in enumerate(nets, 1)
    ]


def test_stroke_play_par_card():
    engine = StrokePlayEngine()
    total = engine.calculate_total_score(_card(engine, [4] * 18))
    assert total.gross_total == 72
    assert total.net_total == 72
    assert engine.leaderboard_display(total) == "E"


def test_stroke_play_net_and_display():
    engine = StrokePlayEngine(ScoringConfig(course_par=70))
    total = engine.calculate_total_score(_card(engine, [5] * 18, handicap=[1] * 18))
    assert total.gross_total == 90
    assert total.net_total == 72
    assert engine.leaderboard_display(total) == "+2"
    assert engine.leaderboard_display(TotalScoreResult(gross_total=68, net_total=68)) == "-2"


def test_stroke_play_lower_net_wins():
    engine = StrokePlayEngine()
    better = TotalScoreResult(gross_total=80, net_total=70)
    worse = TotalScoreResult(gross_total=78, net_total=72)
    assert engine.compare_scores(better, worse) < 0
    assert engine.compare_scores(worse, better) > 0


def test_stableford_par_card_scores_36():
    engine = StablefordEngine()
    total = engine.calculate_total_score(_card(engine, [4] * 18))
    assert total.total_points == 36
    assert engine.leaderboard_display(total) == "36 pts"


def test_stableford_points_by_net_score():
    engine = StablefordEngine()
    holes = _card(engine, [1, 2, 3, 4, 5, 6, 7])
    assert [hole.points for hole in holes] == [5, 4, 3, 2, 1, 0, 0]


def test_stableford_uses_handicap_strokes():
    engine = StablefordEngine()
    [hole] = _card(engine, [5], handicap=[1])
    assert hole.net_strokes == 4
    assert hole.points == 2


def test_stableford_custom_table_falls_back_to_standard():
    engine = get_scoring_engine("STABLEFORD", ScoringConfig(stableford_points={"birdie": 4}))
    holes = _card(engine, [3, 4])
    assert [hole.points for hole in holes] == [4, 2]


def test_stableford_higher_points_win():
    engine = StablefordEngine()
    a = TotalScoreResult(gross_total=80, net_total=72, total_points=38)
    b = TotalScoreResult(gross_total=78, net_total=70, total_points=34)
    assert engine.compare_scores(a, b) < 0


def test_modified_stableford_default_table():
    engine = ModifiedStablefordEngine()
    holes = _card(engine, [1, 2, 3, 4, 5, 6, 8])
    assert [hole.points for hole in holes] == [8, 5, 2, 0, -1, -3, -3]


def test_modified_stableford_negative_total():
    engine = ModifiedStablefordEngine()
    total = engine.calculate_total_score(_card(engine, [5] * 18))
    assert total.total_points == -18
    assert engine.leaderboard_display(total) == "-18 pts"


def test_modified_stableford_custom_table():
    engine = get_scoring_engine(
        ScoringFormat.MODIFIED_STABLEFORD,
        ScoringConfig(stableford_points={"par": 1, "bogey": 0}),
    )
    holes = _card(engine, [4, 5, 3])
    assert [hole.points for hole in holes] == [1, 0, 3]


def test_modified_stableford_composes_rather_than_subclasses():
    engine = ModifiedStablefordEngine()
    assert not isinstance(engine, StablefordEngine)
    assert engine.format is ScoringFormat.MODIFIED_STABLEFORD


def test_match_play_ends_when_lead_exceeds_holes_left():
    outcome = compare_match_play(_net_card([3] * 18), _net_card([4] * 18))
    assert outcome.holes_played == 10
    assert outcome.match_result == "10&8"
    assert outcome.winner == "A"
    assert outcome.player_a.holes_won == 10
    assert outcome.player_a.match_result == "10&8"
    assert outcome.player_b.holes_lost == 10
    assert outcome.player_b.match_result is None


def test_match_play_decided_late():
    b_nets = [3, 3, 3] + [4] * 15
    outcome = compare_match_play(_net_card([4] * 18), _net_card(b_nets))
    assert outcome.winner == "B"
    assert outcome.holes_played == 16
    assert outcome.match_result == "3&2"
    assert outcome.player_b.holes_tied == 13


def test_match_play_won_on_last_hole():
    a_nets = [3] + [4] * 17
    outcome = compare_match_play(_net_card(a_nets), _net_card([4] * 18))
    assert outcome.match_result == "1 up"
    assert outcome.holes_played == 18


def test_match_play_all_square():
    outcome = compare_match_play(_net_card([4] * 18), _net_card([4] * 18))
    assert outcome.match_result == "AS"
    assert outcome.winner == "TIE"
    assert outcome.player_a.holes_tied == 18


def test_match_play_pairs_holes_by_number():
    missing_first = _net_card([4] * 18)[1:]
    outcome = compare_match_play(list(reversed(missing_first)), _net_card([4] * 18))
    assert outcome.holes_played == 17
    assert outcome.player_a.holes_won == 0
    assert outcome.player_a.holes_lost == 0
    assert outcome.player_a.holes_tied == 17
    assert outcome.match_result == "AS"


def test_match_play_nine_hole_match():
    outcome = compare_match_play(_net_card([3] * 9), _net_card([4] * 9), total_holes=9)
    assert outcome.match_result == "5&4"
    assert outcome.holes_played == 5


def test_match_play_engine_display_and_compare():
    engine = MatchPlayEngine()
    ahead = TotalScoreResult(gross_total=0, net_total=0, holes_won=3, holes_lost=1)
    behind = TotalScoreResult(gross_total=0, net_total=0, holes_won=1, holes_lost=3)
    assert engine.leaderboard_display(ahead) == "2 up"
    assert engine.leaderboard_display(behind) == "2 down"
    assert engine.compare_scores(ahead, behind) < 0
    single = engine.calculate_total_score(_card(engine, [4] * 18))
    assert single.match_result == "AS"
    assert engine.leaderboard_display(single) == "AS"


def test_best_ball_takes_lowest_net():
    team = calculate_best_ball([_net_card([4, 5, 3]), _net_card([5, 4, 4])])
    assert [hole.net_strokes for hole in team] == [4, 4, 3]


def test_best_ball_averages_best_n():
    team = calculate_best_ball(
        [_net_card([3, 4]), _net_card([4, 4]), _net_card([6, 6])],
        count_best=2,
    )
    # (3 + 4) / 2 rounds half up
    assert [hole.net_strokes for hole in team] == [4, 4]


def test_best_ball_handles_missing_cards():
    assert calculate_best_ball([]) == []
    engine = BestBallEngine(ScoringConfig(count_best=1))
    assert engine.calculate_team_holes([[]]) == []


def test_unknown_format_falls_back_to_stroke_play(caplog):
    with caplog.at_level(logging.WARNING, logger="golfcore.scoring"):
        engine = get_scoring_engine("SKINS_GAME")
    assert isinstance(engine, StrokePlayEngine)
    assert "Unknown scoring format" in caplog.text


def test_factory_accepts_lowercase_names():
    assert isinstance(get_scoring_engine("stableford"), StablefordEngine)


def test_available_formats_lists_all_six():
    formats = available_formats()
    assert [item["format"] for item in formats] == [item.value for item in ScoringFormat]
    assert all(item["description"] for item in formats)


@pytest.mark.parametrize("scoring_format", list(ScoringFormat))
def test_every_engine_totals_the_card(scoring_format):
    strokes = [4, 5, 3, 4, 6, 4, 3, 5, 4, 4, 5, 3, 4, 7, 4, 3, 5, 4]
    engine = get_scoring_engine(scoring_format)
    holes = [engine.calculate_hole_score(hole) for hole in _inputs(strokes, handicap=[1] * 18)]
    total = engine.calculate_total_score(holes)
    assert total.gross_total == sum(strokes)
    assert total.net_total == sum(strokes) - 18

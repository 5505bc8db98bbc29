import pytest

from golfcore.handicap import (
    allocate_strokes,
    apply_simple_handicap,
    course_handicap,
    net_score,
    playing_handicap,
    round_half_up,
    score_differential,
    simple_handicap_strokes,
    strokes_per_hole,
)
from golfcore.models import HoleDefinition


def _holes(reverse_index: bool = False) -> list[HoleDefinition]:
    return [
        HoleDefinition(
            hole_number=number,
            par=4,
            stroke_index=19 - number if reverse_index else number,
        )
        for number in range(1, 19)
    ]


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-2.5) == -3
    assert round_half_up(1.49) == 1
    assert round_half_up(-0.4) == 0


def test_course_handicap_neutral_slope():
    assert course_handicap(10.0, 113, 72.0, 72) == 10


def test_course_handicap_applies_slope_and_rating():
    # 14.2 * 125 / 113 + (70.2 - 72) = 13.91
    assert course_handicap(14.2, 125, 70.2, 72) == 14


def test_course_handicap_half_rounds_up():
    assert course_handicap(10.5, 113, 72.0, 72) == 11


def test_playing_handicap_percentage_and_cap():
    assert playing_handicap(18.0, 113, 72.0, 72, handicap_pct=80) == 14
    assert playing_handicap(18.0, 113, 72.0, 72, handicap_pct=100, handicap_cap=10) == 10


def test_playing_handicap_cap_never_raises():
    assert playing_handicap(5.0, 113, 72.0, 72, handicap_pct=100, handicap_cap=12) == 5


def test_fractional_cap_rounds_the_same_on_both_paths():
    assert playing_handicap(18.0, 113, 72.0, 72, handicap_cap=10.7) == 11
    assert simple_handicap_strokes(18, handicap_cap=10.7) == 11
    assert playing_handicap(18.0, 113, 72.0, 72, handicap_cap=10.2) == 10
    assert simple_handicap_strokes(18, handicap_cap=10.2) == 10


def test_simple_handicap_strokes():
    assert simple_handicap_strokes(20, 80) == 16
    assert simple_handicap_strokes(20, 80, handicap_cap=12) == 12
    assert simple_handicap_strokes(31, 50) == 16


@pytest.mark.parametrize(
    "handicap,expected_sum",
    [(0, 0), (5, 5), (18, 18), (20, 20), (36, 36), (40, 36), (-3, 3)],
)
def test_strokes_per_hole_counts(handicap, expected_sum):
    allocation = strokes_per_hole(handicap, _holes())
    assert len(allocation) == 18
    assert set(allocation) <= {0, 1, 2}
    assert sum(allocation) == expected_sum


def test_strokes_per_hole_follows_stroke_index():
    allocation = strokes_per_hole(2, _holes(reverse_index=True))
    assert allocation[17] == 1
    assert allocation[16] == 1
    assert sum(allocation) == 2


def test_strokes_per_hole_second_strokes_on_hardest_holes():
    allocation = strokes_per_hole(20, _holes())
    assert allocation[0] == 2
    assert allocation[1] == 2
    assert allocation[2:] == [1] * 16


def test_plus_handicap_gives_strokes_back():
    allocation = allocate_strokes(-3, _holes())
    assert allocation[:3] == [-1, -1, -1]
    assert allocation[3:] == [0] * 15
    assert net_score(4, allocation[0]) == 5


def test_net_score_never_negative():
    assert net_score(5, 1) == 4
    assert net_score(1, 2) == 0


def test_score_differential():
    assert score_differential(85, 72.0, 113) == pytest.approx(13.0)


def test_apply_simple_handicap():
    assert apply_simple_handicap(90, 18) == 72
    assert apply_simple_handicap(90, 15, 90) == 77
    assert apply_simple_handicap(90, 18, 100, handicap_cap=10) == 80

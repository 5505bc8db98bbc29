from golfcore.flights import (
    FlightConfig,
    FlightMember,
    FlightMethod,
    FlightRange,
    FlightScore,
    create_flights,
    create_flights_by_size,
    flight_leaderboard,
    suggest_flight_ranges,
)


def _members(handicaps: list[float]) -> list[FlightMember]:
    return [
        FlightMember(participant_id=f"p{idx}", name=f"Player {idx}", handicap=handicap)
        for idx, handicap in enumerate(handicaps, 1)
    ]


def test_equal_size_splits_lowest_handicaps_first():
    members = _members([12, 3, 25, 8, 17, 1, 30, 5, 20, 10])
    flights = create_flights(members, FlightConfig(method=FlightMethod.EQUAL_SIZE, number_of_flights=2))
    assert [flight.name for flight in flights] == ["Flight A", "Flight B"]
    assert [member.handicap for member in flights[0].members] == [1, 3, 5, 8, 10]
    assert [member.handicap for member in flights[1].members] == [12, 17, 20, 25, 30]
    assert (flights[0].min_handicap, flights[0].max_handicap) == (1, 10)
    assert (flights[1].min_handicap, flights[1].max_handicap) == (12, 30)


def test_equal_size_last_flight_can_be_short():
    flights = create_flights_by_size(_members([1, 2, 3, 4, 5, 6, 7]), 3)
    assert [len(flight.members) for flight in flights] == [3, 3, 1]


def test_equal_size_drops_empty_flights():
    flights = create_flights_by_size(_members([1, 2, 3, 4]), 3)
    assert [flight.name for flight in flights] == ["Flight A", "Flight B"]


def test_no_flights_or_members_gives_empty_result():
    assert create_flights_by_size(_members([1, 2]), 0) == []
    assert create_flights_by_size([], 2) == []


def test_handicap_ranges_can_overlap():
    members = _members([4, 10, 18])
    config = FlightConfig(
        method=FlightMethod.HANDICAP_RANGE,
        custom_ranges=(
            FlightRange(name="Low", min_handicap=0, max_handicap=10),
            FlightRange(name="High", min_handicap=10, max_handicap=36),
        ),
    )
    low, high = create_flights(members, config)
    assert [member.participant_id for member in low.members] == ["p1", "p2"]
    assert [member.participant_id for member in high.members] == ["p2", "p3"]
    assert (high.min_handicap, high.max_handicap) == (10, 36)


def test_handicap_range_without_ranges_uses_equal_size():
    flights = create_flights(
        _members([1, 2, 3, 4]),
        FlightConfig(method=FlightMethod.HANDICAP_RANGE, number_of_flights=2),
    )
    assert len(flights) == 2


def _score(participant_id: str, net: int, points: int | None = None) -> FlightScore:
    return FlightScore(
        participant_id=participant_id,
        name=participant_id,
        handicap=0,
        gross_total=net + 10,
        net_total=net,
        stableford_points=points,
    )


def test_flight_leaderboard_stroke_play():
    flights = create_flights_by_size(_members([1, 2, 3, 20]), 1)
    scores = [_score("p1", 74), _score("p2", 70), _score("p3", 70), _score("outsider", 60)]
    leaderboard = flight_leaderboard("flight-0", flights, scores)
    assert [(entry.position, entry.score.participant_id) for entry in leaderboard] == [
        (1, "p2"),
        (1, "p3"),
        (3, "p1"),
    ]


def test_flight_leaderboard_stableford():
    flights = create_flights_by_size(_members([1, 2]), 1)
    scores = [_score("p1", 74, 30), _score("p2", 76, 34)]
    leaderboard = flight_leaderboard("flight-0", flights, scores, "STABLEFORD")
    assert [entry.score.participant_id for entry in leaderboard] == ["p2", "p1"]


def test_flight_leaderboard_unknown_flight():
    assert flight_leaderboard("flight-9", [], []) == []


def test_suggest_flight_ranges():
    ranges = suggest_flight_ranges([2, 9, 22, 15], 2)
    assert [(item.name, item.min_handicap, item.max_handicap) for item in ranges] == [
        ("Flight A", 2, 12),
        ("Flight B", 12, 22),
    ]
    assert suggest_flight_ranges([], 3) == []
    assert suggest_flight_ranges([5], 0) == []

from typing import Callable, Hashable, Sequence, TypeVar

T = TypeVar("T")


def assign_positions_by(ordered: Sequence[T], same: Callable[[T, T], bool]) -> list[tuple[int, T]]:
    """
    Standard competition ranking over an already sorted sequence: an entry that
    ties with its predecessor shares its position, otherwise it takes index + 1
    (1, 1, 3, ...).
    """
    ranked: list[tuple[int, T]] = []
    position = 1
    for index, entry in enumerate(ordered):
        if index > 0 and not same(ordered[index - 1], entry):
            position = index + 1
        ranked.append((position, entry))
    return ranked


def assign_positions(ordered: Sequence[T], key: Callable[[T], Hashable]) -> list[tuple[int, T]]:
    return assign_positions_by(ordered, lambda previous, current: key(previous) == key(current))

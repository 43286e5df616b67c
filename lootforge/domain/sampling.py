"""Random helpers shared by the draw, craft, and reveal services.

Every helper only calls ``rng.random()``, so any object exposing that method
(``random.Random`` or a scripted stand-in) can drive the services.
"""

from __future__ import annotations

from typing import MutableSequence, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def random(self) -> float: ...


def uniform_index(rng: RandomSource, size: int) -> int:
    if size <= 0:
        raise ValueError("Cannot pick from an empty sequence")
    # Clamp guards scripted sources returning exactly 1.0.
    return min(int(rng.random() * size), size - 1)


def pick(rng: RandomSource, items: Sequence[T]) -> T:
    return items[uniform_index(rng, len(items))]


def sample(rng: RandomSource, items: Sequence[T], amount: int) -> list[T]:
    """Pick ``amount`` distinct positions without replacement."""
    pool = list(items)
    selections: list[T] = []
    for _ in range(min(amount, len(pool))):
        selections.append(pool.pop(uniform_index(rng, len(pool))))
    return selections


def shuffle(rng: RandomSource, items: MutableSequence[T]) -> None:
    """Fisher-Yates shuffle in place."""
    for idx in range(len(items) - 1, 0, -1):
        swap = uniform_index(rng, idx + 1)
        items[idx], items[swap] = items[swap], items[idx]

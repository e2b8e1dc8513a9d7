# integer sources and weighted choice
import random, secrets
from dataclasses import dataclass
from typing import Generic, Iterable, Optional, Sequence, Tuple, TypeVar, Union
from accessloggen.utils.errors import InvalidDistributionError, RandomSourceError

T = TypeVar("T")


class CryptoIntSource:
    """Uniform integers in [0, bound) from the OS CSPRNG."""

    def intn(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        try:
            return secrets.randbelow(bound)
        except OSError as e:
            raise RandomSourceError(f"crypto source failed: {e}") from e


class SeededIntSource:
    """Reproducible source for --seed runs; not cryptographic."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def intn(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return self.rng.randrange(bound)


IntSource = Union[CryptoIntSource, SeededIntSource]


@dataclass(frozen=True)
class Choice(Generic[T]):
    weight: int
    value: T


class Chooser(Generic[T]):
    """Picks a value with probability weight / total weight.

    Choices are visited in the order given, so a draw r in [0, total)
    selects the first choice whose running weight sum exceeds r.
    """

    def __init__(self, source: IntSource, choices: Iterable[Choice[T]]):
        self.source = source
        self.choices: Tuple[Choice[T], ...] = tuple(choices)
        if not self.choices:
            raise InvalidDistributionError("no choices given")
        for c in self.choices:
            if c.weight < 0:
                raise InvalidDistributionError(f"negative weight {c.weight} for {c.value!r}")
        self.total = sum(c.weight for c in self.choices)
        if self.total <= 0:
            raise InvalidDistributionError(f"total weight must be positive, got {self.total}")

    def choose(self) -> T:
        r = self.source.intn(self.total)
        acc = 0
        for c in self.choices:
            acc += c.weight
            if acc > r:
                return c.value
        # unreachable while the source honours [0, total)
        raise RandomSourceError(f"draw {r} outside [0, {self.total})")


def choices_from_pairs(pairs: Sequence[Sequence]) -> Tuple[Choice, ...]:
    """[[70, 200], [15, 301]] -> (Choice(70, 200), Choice(15, 301))"""
    try:
        return tuple(Choice(int(w), v) for w, v in pairs)
    except (TypeError, ValueError) as e:
        raise InvalidDistributionError(f"bad choice pairs: {e}") from e

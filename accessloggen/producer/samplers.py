# samplers for host names and response sizes
import math, random
from typing import List, Optional
from accessloggen.utils.randutil import IntSource

DRAW_RANGE = 12000   # v in [0, 12000)
X_DIVISOR = 800.0    # x = v / 800 in [0, 15)
LAMBDA = 4.0
Y_SCALE = 12.0
FACTORIAL_CAPACITY = 120


def rand_host(source: IntSource, site_count: int) -> str:
    return f"{source.intn(site_count)}.example.jp"


class FactorialTable:
    """Lazily filled memo of n! for 0 <= n < capacity."""

    def __init__(self, capacity: int = FACTORIAL_CAPACITY):
        self.capacity = capacity
        self.facts: List[int] = [0] * capacity

    def factorial(self, n: int) -> int:
        if not 0 <= n < self.capacity:
            raise ValueError(f"factorial argument {n} outside [0, {self.capacity})")
        if self.facts[n]:
            return self.facts[n]
        res = n * self.factorial(n - 1) if n > 0 else 1
        self.facts[n] = res
        return res


class BytesSentSampler:
    """Response sizes shaped like 4^x / floor(x)!, scaled to [0, max_bytes].

    This is a continuous relaxation of a Poisson(4) mass function, not a
    Poisson sample: y peaks near x = 4 and is clamped, so max_bytes comes
    up for roughly a quarter of the draws.
    """

    def __init__(self, source: IntSource, table: Optional[FactorialTable] = None):
        self.source = source
        self.table = table if table is not None else FactorialTable()

    def sample(self, max_bytes: int) -> int:
        v = self.source.intn(DRAW_RANGE)
        x = v / X_DIVISOR
        y = LAMBDA ** x / self.table.factorial(math.floor(x))
        n = int(y / Y_SCALE * max_bytes)
        if n < 0:
            return 0
        return min(n, max_bytes)


def rand_bytes_sent(source: IntSource, max_bytes: int) -> int:
    return BytesSentSampler(source).sample(max_bytes)


def norm_rand(min_v: int, max_v: int, mean: float, std_dev: float, rng: Optional[random.Random] = None) -> int:
    r = int((rng or random).gauss(mean, std_dev))
    if r < min_v:
        return min_v
    if r > max_v:
        return max_v
    return r

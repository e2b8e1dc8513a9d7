import io, itertools, logging
import pytest
from accessloggen.utils.errors import RandomSourceError
from accessloggen.utils.logger import get_logger


class FixedSource:
    """Replays the given draws (mod bound), cycling."""
    def __init__(self, *values):
        self.values = itertools.cycle(values or (0,))
        self.calls = []
    def intn(self, bound):
        self.calls.append(bound)
        return next(self.values) % bound


class FailingSource:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on  # call indices that fail; None = all
        self.n = 0
    def intn(self, bound):
        i = self.n; self.n += 1
        if self.fail_on is None or i in self.fail_on:
            raise RandomSourceError(f"draw {i} failed")
        return 0


def drop_sink(lg):
    for h in [h for h in lg.handlers if getattr(h, "fields_sink", False)]:
        lg.removeHandler(h)


@pytest.fixture
def capture_logger(request):
    def make(encoding="ltsv"):
        buf = io.StringIO()
        lg = get_logger(f"test.{request.node.name}.{encoding}", encoding, buf)
        return lg, buf
    yield make
    for name in list(logging.root.manager.loggerDict):
        if name.startswith(f"test.{request.node.name}."):
            drop_sink(logging.getLogger(name))


@pytest.fixture(autouse=True)
def reset_cli_logger():
    yield
    drop_sink(logging.getLogger("accessloggen"))


def parse_ltsv(text):
    rows = []
    for line in text.splitlines():
        rows.append(dict(f.split(":", 1) for f in line.split("\t")))
    return rows

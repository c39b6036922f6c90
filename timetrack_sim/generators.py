import logging
import random
from abc import ABC, abstractmethod
from typing import Iterable, NamedTuple, Optional, Tuple

from .segments import DEFAULT_SEGMENTS, SegmentLike, SegmentModel

log = logging.getLogger(__name__)

DEFAULT_SOURCE_ID = 17


class Report(NamedTuple):
    local: float   # arrival instant on the local clock
    remote: float  # remote clock value carried by the message


def make_rng(rng: Optional[random.Random] = None, seed: Optional[int] = None) -> random.Random:
    if rng is not None:
        return rng
    return random.Random(seed)


class ReportGenerator(ABC):
    """Simulated stream of remote time reports.

    Each report is timestamped with its arrival instant on our local clock.
    Driving protocol: init() once, then any mix of peek_local() (read only)
    and consume() (advances the stream). ground_truth() is the oracle used to
    score trackers and is never shown to them.
    """
    source_id = DEFAULT_SOURCE_ID

    @abstractmethod
    def init(self, local: float):
        ...

    @abstractmethod
    def peek_local(self) -> float:
        """Local arrival instant of the next report."""

    @abstractmethod
    def advance(self) -> Tuple[float, float]:
        """Step to the next report and return (sent_local, arrival_local).

        sent_local is the undelayed instant the remote value belongs to.
        """

    @abstractmethod
    def ground_truth(self, local: float) -> float:
        ...

    def reported_value(self, sent_local: float) -> float:
        return self.ground_truth(sent_local)

    def consume(self) -> Report:
        sent, arrival = self.advance()
        return Report(arrival, self.reported_value(sent))


class IdealGenerator(ReportGenerator):
    """Reports at a fixed interval with no delay, dropouts or noise.

    The remote clock is local * rate + bias.
    """
    def __init__(self, interval: float = 0.1, rate: float = 1.0, bias: float = 0.0):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = float(interval)
        self.rate = float(rate)
        self.bias = float(bias)
        self._next_local = 0.0

    def init(self, local: float):
        self._next_local = float(local)

    def peek_local(self) -> float:
        return self._next_local

    def advance(self) -> Tuple[float, float]:
        local = self._next_local
        self._next_local += self.interval
        return local, local

    def ground_truth(self, local: float) -> float:
        return local * self.rate + self.bias


class DelayedGenerator(ReportGenerator):
    """Adds a random arrival delay of up to delay_range to a base generator.

    Arrivals are handed out in the order they physically arrive, so several
    consecutive reports may share a local time but it never goes backward.
    The remote value still belongs to the undelayed send instant.
    """
    def __init__(self, base: ReportGenerator, delay_range: float = 0.0,
                 rng: Optional[random.Random] = None, seed: Optional[int] = None):
        if delay_range < 0:
            raise ValueError(f"delay_range must be >= 0, got {delay_range}")
        self.base = base
        self.delay_range = float(delay_range)
        self.rng = make_rng(rng, seed)
        self._next_local_delayed = 0.0

    @property
    def source_id(self):
        return self.base.source_id

    def _delayed(self, local: float) -> float:
        return local + self.delay_range * self.rng.random()

    def init(self, local: float):
        self.base.init(local)
        self._next_local_delayed = self._delayed(self.base.peek_local())

    def peek_local(self) -> float:
        return self._next_local_delayed

    def advance(self) -> Tuple[float, float]:
        sent, _ = self.base.advance()
        arrival = self._next_local_delayed
        self._next_local_delayed = max(arrival, self._delayed(self.base.peek_local()))
        return sent, arrival

    def ground_truth(self, local: float) -> float:
        return self.base.ground_truth(local)


class SegmentedGenerator(ReportGenerator):
    """Remote clock that may pause or rewind, then continue.

    Timing comes from the base generator untouched; only the remote value is
    taken from the segment model. The default single unbounded segment is the
    same line as an ideal clock with rate 1 and no bias.
    """
    def __init__(self, base: ReportGenerator, segments: Iterable[SegmentLike] = DEFAULT_SEGMENTS):
        self.base = base
        self.model = segments if isinstance(segments, SegmentModel) else SegmentModel(segments)

    @property
    def source_id(self):
        return self.base.source_id

    def init(self, local: float):
        self.base.init(local)

    def peek_local(self) -> float:
        return self.base.peek_local()

    def advance(self) -> Tuple[float, float]:
        return self.base.advance()

    def ground_truth(self, local: float) -> float:
        return self.model.value_at(local)


class GarbageGenerator(ReportGenerator):
    """Occasionally reports a spurious remote time.

    With probability odds_of_garbage per report the remote value is replaced by
    a uniform draw from garbage_range. Timing and ground truth are untouched.
    """
    def __init__(self, base: ReportGenerator, odds_of_garbage: float = 0.0,
                 garbage_range: Tuple[float, float] = (-10.0, 10.0),
                 rng: Optional[random.Random] = None, seed: Optional[int] = None):
        if not 0.0 <= odds_of_garbage <= 1.0:
            raise ValueError(f"odds_of_garbage must be in [0, 1], got {odds_of_garbage}")
        lo, hi = float(garbage_range[0]), float(garbage_range[1])
        if hi < lo:
            raise ValueError(f"garbage_range is inverted: {garbage_range}")
        self.base = base
        self.odds_of_garbage = float(odds_of_garbage)
        self.garbage_range = (lo, hi)
        self.rng = make_rng(rng, seed)
        self.n_garbage = 0

    @property
    def source_id(self):
        return self.base.source_id

    def init(self, local: float):
        self.base.init(local)

    def peek_local(self) -> float:
        return self.base.peek_local()

    def advance(self) -> Tuple[float, float]:
        return self.base.advance()

    def ground_truth(self, local: float) -> float:
        return self.base.ground_truth(local)

    def reported_value(self, sent_local: float) -> float:
        value = self.base.reported_value(sent_local)
        if self.rng.random() < self.odds_of_garbage:
            self.n_garbage += 1
            value = self.rng.uniform(*self.garbage_range)
            log.debug("garbage report at sent_local=%.3f -> %.3f", sent_local, value)
        return value

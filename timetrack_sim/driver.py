import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from .generators import ReportGenerator
from .metrics import TrackingMetrics, compute_metrics
from .trackers import Tracker

log = logging.getLogger(__name__)

ARRIVAL = "arrival"
QUERY = "query"


@dataclass
class SimEvent:
    kind: str                       # ARRIVAL | QUERY
    local: float
    remote: float                   # reported value (arrival) or tracker prediction (query)
    actual: Optional[float] = None  # ground truth, queries only

    @property
    def error(self) -> Optional[float]:
        if self.actual is None:
            return None
        return self.remote - self.actual


@dataclass
class SimulationResult:
    events: List[SimEvent] = field(default_factory=list)

    @property
    def arrivals(self) -> List[SimEvent]:
        return [e for e in self.events if e.kind == ARRIVAL]

    @property
    def queries(self) -> List[SimEvent]:
        return [e for e in self.events if e.kind == QUERY]

    def errors(self) -> np.ndarray:
        return np.array([e.error for e in self.queries], dtype=np.float64)

    def metrics(self, warmup_local: float = 0.0) -> TrackingMetrics:
        q = [e for e in self.queries if e.local >= warmup_local]
        return compute_metrics(np.array([e.error for e in q], dtype=np.float64))


class Simulation:
    """Steps simulated local time, feeding a tracker and scoring it.

    Two event sources are merged in local-time order: report arrivals from the
    generator and query ticks every local_incr. An arrival due at or before the
    next tick is delivered first. Each tick asks the tracker for its estimate
    and records it next to the generator's ground truth.
    """
    def __init__(self, generator: ReportGenerator, tracker: Tracker,
                 initial_local: float = 0.0, local_incr: float = 0.03, n_samples: int = 50,
                 on_event: Optional[Callable[[SimEvent], None]] = None):
        if local_incr <= 0:
            raise ValueError(f"local_incr must be positive, got {local_incr}")
        if n_samples < 0:
            raise ValueError(f"n_samples must be >= 0, got {n_samples}")
        self.gen = generator
        self.tracker = tracker
        self.initial_local = float(initial_local)
        self.local_incr = float(local_incr)
        self.n_samples = int(n_samples)
        self.on_event = on_event

    def _emit(self, result: SimulationResult, event: SimEvent):
        result.events.append(event)
        if self.on_event is not None:
            self.on_event(event)

    def _deliver(self, result: SimulationResult) -> float:
        local, remote = self.gen.consume()
        self.tracker.set(self.gen.source_id, local, remote)
        self._emit(result, SimEvent(ARRIVAL, local, remote))
        return local

    def run(self) -> SimulationResult:
        result = SimulationResult()

        # first report goes straight to the tracker
        self.gen.init(self.initial_local)
        local = self._deliver(result)

        reporting_local = local + self.local_incr
        i_sample = 0
        while i_sample < self.n_samples:
            if self.gen.peek_local() <= reporting_local:
                self._deliver(result)
            else:
                tracked = self.tracker.get_remote(reporting_local)
                actual = self.gen.ground_truth(reporting_local)
                self._emit(result, SimEvent(QUERY, reporting_local, tracked, actual))
                reporting_local += self.local_incr
                i_sample += 1

        log.debug("simulation done: %d arrivals, %d queries",
                  len(result.arrivals), len(result.queries))
        return result


def run_simulation(generator: ReportGenerator, tracker: Tracker, **kwargs) -> SimulationResult:
    return Simulation(generator, tracker, **kwargs).run()

from abc import ABC, abstractmethod
from typing import Optional


class Tracker(ABC):
    """Estimates remote time from a stream of (local, remote) reports.

    set() is called once per received report, at arbitrary and possibly
    repeated local times. get_remote() may be called at any time, usually far
    more often than reports arrive, and may ask about a local time ahead of the
    last report. It must not raise, even before the first report.
    """
    @abstractmethod
    def set(self, source_id: int, local: float, remote: float) -> None:
        ...

    @abstractmethod
    def get_remote(self, local: float) -> float:
        ...


class SimpleTracker(Tracker):
    """Exponential smoothing toward the last reported remote time.

    Each get_remote() call moves the estimate a fraction new_weight of the way
    toward the last remote value seen. It ignores the rate of the remote clock
    so it always lags.
    """
    def __init__(self, new_weight: float = 0.3):
        if not 0.0 < new_weight <= 1.0:
            raise ValueError(f"new_weight must be in (0, 1], got {new_weight}")
        self.new_weight = float(new_weight)
        self.last_remote = 0.0
        self.filtered_remote = 0.0
        self.last_source: Optional[int] = None
        self._first = True

    def set(self, source_id: int, local: float, remote: float) -> None:
        if self._first:
            # trust the first report completely
            self._first = False
            self.filtered_remote = float(remote)
        self.last_remote = float(remote)
        self.last_source = source_id

    def get_remote(self, local: float) -> float:
        w = self.new_weight
        self.filtered_remote = (1.0 - w) * self.filtered_remote + w * self.last_remote
        return self.filtered_remote

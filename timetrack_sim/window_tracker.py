from collections import deque
from typing import Optional

import numpy as np

from .trackers import Tracker

WINDOW_DEFAULT = 16


class OffsetWindow:
    def __init__(self, W: int):
        W = int(W)
        if W < 1:
            raise ValueError(f"window must be >= 1, got {W}")
        self.W = W
        self.buf = deque(maxlen=self.W)

    def add(self, x: float) -> float:
        self.buf.append(float(x))
        return self.median()

    def median(self) -> float:
        return float(np.median(np.array(self.buf, dtype=np.float64))) if len(self.buf) else 0.0

    def __len__(self):
        return len(self.buf)


class WindowTracker(Tracker):
    """Median of the last W observed offsets (remote - local).

    Assumes the remote clock runs at the local rate. A single garbage report
    cannot move the median, and a rewind is followed once it fills more than
    half the window. Larger windows are steadier but react later.
    """
    def __init__(self, window: int = WINDOW_DEFAULT):
        self.offsets = OffsetWindow(window)
        self.offset: Optional[float] = None

    def set(self, source_id: int, local: float, remote: float) -> None:
        self.offset = self.offsets.add(float(remote) - float(local))

    def get_remote(self, local: float) -> float:
        if self.offset is None:
            return 0.0
        return float(local) + self.offset

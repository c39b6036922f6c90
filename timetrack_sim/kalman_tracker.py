import logging
from typing import Optional

import numpy as np

from .trackers import Tracker

log = logging.getLogger(__name__)


class KalmanTracker(Tracker):
    """Linear Kalman filter tracking the remote clock over local time.

    State x = [remote, rate]^T
      remote: remote clock value at the last report's local time
      rate  : remote seconds per local second
    Observation z = remote time carried by a report, H = [1, 0].

    Process noise grows with the local time between reports, so bursts of
    reports at the same local time act as repeated measurements. Innovations
    larger than gate_sigma standard deviations are treated as garbage and
    skipped; after max_rejects of them in a row the filter assumes the remote
    clock really jumped (pause, rewind) and re-seeds on the latest report.
    """
    def __init__(self, nominal_rate: float = 1.0,
                 q_remote: float = 1e-4, q_rate: float = 1e-3,
                 r_remote: float = 1e-2,
                 p0_remote: float = 1.0, p0_rate: float = 1.0,
                 gate_sigma: float = 4.0, max_rejects: int = 3):
        self.nominal_rate = float(nominal_rate)
        self.Q_rate = np.array([float(q_remote), float(q_rate)], dtype=np.float64)
        self.R = float(r_remote)
        self.P0 = np.diag([float(p0_remote), float(p0_rate)]).astype(np.float64)
        self.gate_sigma = float(gate_sigma)
        self.max_rejects = int(max_rejects)

        self.H = np.array([[1.0, 0.0]], dtype=np.float64)
        self.x = np.zeros((2, 1), dtype=np.float64)
        self.P = self.P0.copy()
        self.t_last: Optional[float] = None
        self.n_rejects = 0
        self.n_rejected_total = 0
        self.n_reseeds = 0

    def _seed(self, local: float, remote: float, rate: float):
        self.x = np.array([[float(remote)], [float(rate)]], dtype=np.float64)
        self.P = self.P0.copy()
        self.t_last = float(local)
        self.n_rejects = 0

    def predict(self, local: float):
        dt = float(local) - self.t_last
        F = np.array([
            [1.0, dt],
            [0.0, 1.0]
        ], dtype=np.float64)
        Q = np.diag(self.Q_rate * abs(dt))
        self.x = F @ self.x
        self.P = F @ self.P @ F.T + Q
        self.t_last = float(local)

    def update(self, remote: float) -> bool:
        """Fold one measurement in. Returns False if it was gated out."""
        y = float(remote) - float((self.H @ self.x)[0, 0])
        S = float((self.H @ self.P @ self.H.T)[0, 0]) + self.R
        if abs(y) > self.gate_sigma * np.sqrt(S):
            return False
        K = self.P @ self.H.T / S
        self.x = self.x + K * y
        I = np.eye(2, dtype=np.float64)
        self.P = (I - K @ self.H) @ self.P
        return True

    def set(self, source_id: int, local: float, remote: float) -> None:
        if self.t_last is None:
            self._seed(local, remote, self.nominal_rate)
            return
        self.predict(local)
        if self.update(remote):
            self.n_rejects = 0
            return
        self.n_rejects += 1
        self.n_rejected_total += 1
        if self.n_rejects >= self.max_rejects:
            log.info("re-seeding after %d rejected reports at local=%.3f", self.n_rejects, local)
            self.n_reseeds += 1
            self._seed(local, remote, self.rate)

    def get_remote(self, local: float) -> float:
        if self.t_last is None:
            return 0.0
        return self.remote + self.rate * (float(local) - self.t_last)

    @property
    def remote(self) -> float:
        return float(self.x[0, 0])

    @property
    def rate(self) -> float:
        return float(self.x[1, 0])

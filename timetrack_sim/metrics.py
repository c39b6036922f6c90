from dataclasses import dataclass

import numpy as np


@dataclass
class TrackingMetrics:
    n: int
    mean: float
    std: float
    mse: float
    rmse: float
    max_abs: float

    def as_row(self) -> str:
        return (f"n={self.n} mean={self.mean:+.4f} std={self.std:.4f} "
                f"rmse={self.rmse:.4f} max|err|={self.max_abs:.4f}")


def compute_metrics(err) -> TrackingMetrics:
    err = np.asarray(err, dtype=np.float64)
    if err.size == 0:
        nan = float("nan")
        return TrackingMetrics(0, nan, nan, nan, nan, nan)
    mse = float(np.mean(err**2))
    return TrackingMetrics(
        n=int(err.size),
        mean=float(np.mean(err)),
        std=float(np.std(err)),
        mse=mse,
        rmse=float(np.sqrt(mse)),
        max_abs=float(np.max(np.abs(err))),
    )

import math
import numpy as np
import pytest

from timetrack_sim.metrics import compute_metrics


def test_known_values():
    m = compute_metrics([1.0, -1.0, 3.0, -3.0])
    assert m.n == 4
    assert m.mean == pytest.approx(0.0)
    assert m.mse == pytest.approx(5.0)
    assert m.rmse == pytest.approx(np.sqrt(5.0))
    assert m.std == pytest.approx(np.sqrt(5.0))
    assert m.max_abs == 3.0
    assert "rmse=" in m.as_row()


def test_empty():
    m = compute_metrics([])
    assert m.n == 0
    assert math.isnan(m.rmse)

import math
import pytest

from timetrack_sim.segments import Segment, SegmentLookupError, SegmentModel, as_segment


def test_value_inside_segment():
    model = SegmentModel([(0, 2, 0.5, 10.0), (2, math.inf, 2.0, 11.0)])
    assert model.value_at(1.0) == pytest.approx(10.5)
    assert model.value_at(2.0) == pytest.approx(11.0)   # end is exclusive
    assert model.value_at(3.5) == pytest.approx(14.0)


def test_default_is_unit_line():
    model = SegmentModel()
    for x in (0.0, 0.37, 12.0, 1e6):
        assert model.value_at(x) == pytest.approx(x)


def test_default_covers_negative_local_times():
    model = SegmentModel()
    for x in (-1e6, -1.0, -0.5, -0.03):
        assert model.value_at(x) == pytest.approx(x)


def test_first_match_wins_on_overlap():
    # second segment claims [0.5, 3) but the first one is listed first
    model = SegmentModel([(0, 1, 1, 0.0), (0.5, 3, 1, 100.0)])
    assert model.value_at(0.75) == pytest.approx(0.75)
    assert model.value_at(1.25) == pytest.approx(100.75)


def test_rewind_restarts_value():
    model = SegmentModel([(0, 1, 1, 1.7), (1, 9999, 1, 1.7)])
    assert model.value_at(0.5) == pytest.approx(2.2)
    assert model.value_at(1.5) == pytest.approx(2.2)


def test_lookup_past_last_end_raises():
    model = SegmentModel([(0, 1, 1, 0)])
    with pytest.raises(SegmentLookupError):
        model.value_at(1.0)


def test_lookup_before_first_start_raises():
    model = SegmentModel([(1, math.inf, 1, 0)])
    with pytest.raises(SegmentLookupError):
        model.find(0.5)


def test_lookup_in_gap_raises():
    model = SegmentModel([(0, 1, 1, 0), (2, math.inf, 1, 5)])
    with pytest.raises(LookupError):
        model.find(1.5)


def test_invalid_segments():
    with pytest.raises(ValueError):
        SegmentModel([])
    with pytest.raises(ValueError):
        Segment(1.0, 1.0, 1.0, 0.0)


def test_as_segment_open_end():
    seg = as_segment((0, None, 0, 4))
    assert seg.end_local == math.inf
    assert seg.value_at(123.0) == 4.0

# tests/conftest.py
import random
import pytest

from timetrack_sim.generators import (DelayedGenerator, GarbageGenerator,
                                      IdealGenerator, SegmentedGenerator)

REWIND = [(0, 1, 1, 1.7), (1, 9999, 1, 1.7)]
PAUSE = [(0, 1, 1, 1.7), (1, 1.5, 0, 2.7), (1.5, float("inf"), 1, 2.7)]


@pytest.fixture
def rewind_segments():
    return list(REWIND)


@pytest.fixture
def pause_segments():
    return list(PAUSE)


@pytest.fixture
def rng():
    return random.Random(123)


@pytest.fixture
def chain_factory():
    """Builds the standard Ideal -> Delayed -> Segmented -> Garbage chain, cut at `upto`."""
    def _make(upto="garbage", seed=0, interval=0.1, rate=1.0, bias=0.0,
              delay_range=0.0, segments=None, odds_of_garbage=0.0, garbage_range=(-10.0, 10.0)):
        gen = IdealGenerator(interval=interval, rate=rate, bias=bias)
        if upto == "ideal":
            return gen
        gen = DelayedGenerator(gen, delay_range=delay_range, rng=random.Random(seed))
        if upto == "delays":
            return gen
        gen = SegmentedGenerator(gen, segments) if segments is not None else SegmentedGenerator(gen)
        if upto == "segments":
            return gen
        return GarbageGenerator(gen, odds_of_garbage=odds_of_garbage,
                                garbage_range=garbage_range, rng=random.Random(seed + 1))
    return _make

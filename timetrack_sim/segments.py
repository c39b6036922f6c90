import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union


class SegmentLookupError(LookupError):
    """Raised when no segment covers a requested local time."""


@dataclass(frozen=True)
class Segment:
    """One linear piece of the remote clock's ground truth.

    Covers the half-open local interval [start_local, end_local); inside it the
    remote clock reads start_val + rate * (local - origin). origin defaults to
    start_local, so only a segment unbounded below needs it set.
    """
    start_local: float
    end_local: float
    rate: float
    start_val: float
    origin: Optional[float] = None

    def __post_init__(self):
        if not self.end_local > self.start_local:
            raise ValueError(
                f"segment end_local ({self.end_local}) must exceed start_local ({self.start_local})")

    def value_at(self, local: float) -> float:
        origin = self.start_local if self.origin is None else self.origin
        return (local - origin) * self.rate + self.start_val


SegmentLike = Union[Segment, Sequence[float]]

# remote == local for every local time
DEFAULT_SEGMENTS: Tuple[Segment, ...] = (Segment(-math.inf, math.inf, 1.0, 0.0, origin=0.0),)


def as_segment(seg: SegmentLike) -> Segment:
    if isinstance(seg, Segment):
        return seg
    start_local, end_local, rate, start_val = seg
    if end_local is None:
        end_local = math.inf
    return Segment(float(start_local), float(end_local), float(rate), float(start_val))


class SegmentModel:
    """Piecewise-linear ground truth built from an ordered list of segments.

    Lookup is a plain linear scan: the first segment (in list order) whose
    end_local exceeds the query wins. Overlapping segments are allowed and are
    resolved by that rule, which is how rewinds are expressed. Segments need
    not join up, so pauses and jumps are fine too.
    """
    def __init__(self, segments: Iterable[SegmentLike] = DEFAULT_SEGMENTS):
        self.segments: List[Segment] = [as_segment(s) for s in segments]
        if not self.segments:
            raise ValueError("segment model needs at least one segment")

    def find(self, local: float) -> Segment:
        for seg in self.segments:
            if seg.end_local > local:
                if local < seg.start_local:
                    raise SegmentLookupError(
                        f"local={local} falls before segment starting at {seg.start_local}")
                return seg
        raise SegmentLookupError(
            f"local={local} is past the last segment end ({self.segments[-1].end_local})")

    def value_at(self, local: float) -> float:
        return self.find(local).value_at(local)

    def __len__(self):
        return len(self.segments)

    def __repr__(self):
        return f"SegmentModel({self.segments!r})"

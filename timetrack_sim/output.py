import os
import time
from typing import Iterable, Optional, TextIO

from .driver import ARRIVAL, SimEvent

CSV_HEADER = "local, actual remote, messages, tracked remote"


def default_filename(now: Optional[float] = None) -> str:
    return "test_" + time.strftime("%y%m%d_%H%M%S", time.localtime(now)) + ".csv"


def format_event(event: SimEvent) -> str:
    # messages and predictions go in separate columns so they plot as two series
    if event.kind == ARRIVAL:
        return f"{event.local:.2f},, {event.remote:.2f}"
    return f"{event.local:.2f}, {event.actual:.2f},, {event.remote:.2f}"


def write_events(events: Iterable[SimEvent], f: TextIO):
    f.write(CSV_HEADER + "\n")
    for ev in events:
        f.write(format_event(ev) + "\n")


def write_csv(events: Iterable[SimEvent], path: Optional[str] = None, outdir: str = ".") -> str:
    if path is None:
        os.makedirs(outdir, exist_ok=True)
        path = os.path.join(outdir, default_filename())
    with open(path, "w", encoding="utf-8", newline="") as f:
        write_events(events, f)
    return path

from .driver import Simulation, SimulationResult, SimEvent, run_simulation
from .generators import (DelayedGenerator, GarbageGenerator, IdealGenerator,
                         Report, ReportGenerator, SegmentedGenerator)
from .kalman_tracker import KalmanTracker
from .segments import Segment, SegmentLookupError, SegmentModel
from .trackers import SimpleTracker, Tracker
from .window_tracker import WindowTracker

__version__ = "0.1.0"

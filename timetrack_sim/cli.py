import argparse
import logging
import sys

from .driver import Simulation
from .kalman_tracker import KalmanTracker
from .logging_utils import JsonlLogger, default_log_dir, setup_logging, to_dict
from .output import write_csv
from .scenarios import PRESETS, ScenarioError, build_generator, get_preset, load_scenario
from .segments import SegmentLookupError
from .trackers import SimpleTracker
from .window_tracker import WindowTracker

log = logging.getLogger("timetrack_sim")

TRACKERS = {
    "simple": SimpleTracker,
    "kalman": KalmanTracker,
    "window": WindowTracker,
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="timetrack-sim",
        description="Feed simulated remote time reports to a clock tracker and score its predictions.")
    src = ap.add_mutually_exclusive_group()
    src.add_argument('--scenario', type=str, default='ideal', choices=sorted(PRESETS))
    src.add_argument('--scenario-file', type=str, default=None, help='YAML scenario file')
    ap.add_argument('--tracker', type=str, default='simple', choices=sorted(TRACKERS))
    ap.add_argument('--initial-local', type=float, default=0.0)
    ap.add_argument('--local-incr', type=float, default=0.03, help='query period in local seconds')
    ap.add_argument('--n-samples', type=int, default=50, help='number of tracker queries')
    ap.add_argument('--seed', type=int, default=None)
    ap.add_argument('--out', type=str, default=None, help='CSV path (default: test_<timestamp>.csv)')
    ap.add_argument('--outdir', type=str, default='.')
    ap.add_argument('--no-csv', action='store_true')
    ap.add_argument('--jsonl', type=str, default=None,
                    help="JSONL event log path, or 'auto' for ~/.timetrack_logs")
    ap.add_argument('--log-level', type=str, default='INFO')
    ap.add_argument('--list-scenarios', action='store_true')
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.list_scenarios:
        for name in sorted(PRESETS):
            print(f"{name:12s} {PRESETS[name].get('description', '')}")
        return 0

    try:
        cfg = load_scenario(args.scenario_file) if args.scenario_file else get_preset(args.scenario)
        gen = build_generator(cfg, seed=args.seed)
    except ScenarioError as e:
        log.error("%s", e)
        return 2

    tracker = TRACKERS[args.tracker]()

    jsonl = None
    if args.jsonl:
        path = args.jsonl
        if path == 'auto':
            path = f"{default_log_dir('timetrack_sim')}/{cfg['name']}_{args.tracker}.jsonl"
        jsonl = JsonlLogger(path)
        log.info("Logging events to %s", jsonl.path)

    def on_event(ev):
        if jsonl is not None:
            rec = to_dict(ev)
            rec["scenario"] = cfg["name"]
            jsonl.log(rec)

    sim = Simulation(gen, tracker,
                     initial_local=args.initial_local,
                     local_incr=args.local_incr,
                     n_samples=args.n_samples,
                     on_event=on_event)
    try:
        result = sim.run()
    except SegmentLookupError as e:
        log.error("scenario %s does not cover the simulated time: %s", cfg["name"], e)
        return 2
    finally:
        if jsonl is not None:
            jsonl.close()

    if not args.no_csv:
        path = write_csv(result.events, path=args.out, outdir=args.outdir)
        log.info("Wrote %s", path)

    m = result.metrics()
    print(f"[{cfg['name']}/{args.tracker}] arrivals={len(result.arrivals)} {m.as_row()}")
    return 0


if __name__ == '__main__':
    sys.exit(main())

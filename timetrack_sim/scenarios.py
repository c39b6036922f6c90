import copy
import logging
import math
import os
import random
from typing import Any, Dict, List, Optional

import yaml

from .generators import (DelayedGenerator, GarbageGenerator, IdealGenerator,
                         ReportGenerator, SegmentedGenerator)
from .segments import Segment

log = logging.getLogger(__name__)


class ScenarioError(ValueError):
    """A scenario mapping or file cannot be turned into a generator."""


# generator kind -> keys it accepts, each kind extends the previous one
KIND_KEYS = {
    "ideal": {"interval", "rate", "bias"},
}
KIND_KEYS["delays"] = KIND_KEYS["ideal"] | {"delay_range"}
KIND_KEYS["segments"] = KIND_KEYS["delays"] | {"segments"}
KIND_KEYS["garbage"] = KIND_KEYS["segments"] | {"odds_of_garbage", "garbage_range"}

META_KEYS = {"generator", "name", "description", "seed"}

REWIND = [[0, 1, 1, 1.7], [1, 9999, 1, 1.7]]

PRESETS: Dict[str, Dict[str, Any]] = {
    "ideal": {
        "description": "1x speed, no delays, no jumps in time, no noise",
        "generator": "ideal", "bias": 0.3,
    },
    "delays": {
        "description": "up to 0.3 s delay in the receipt of each message",
        "generator": "delays", "delay_range": 0.3,
    },
    "fast_clock": {
        "description": "remote clock 10% fast, with delays",
        "generator": "delays", "rate": 1.1, "delay_range": 0.3,
    },
    "slow_clock": {
        "description": "remote clock 10% slow, with delays",
        "generator": "delays", "rate": 0.9, "delay_range": 0.3,
    },
    "pause": {
        "description": "remote time pauses for a moment, then resumes",
        "generator": "segments",
        "segments": [[0, 1, 1, 1.7], [1, 1.5, 0, 2.7], [1.5, math.inf, 1, 2.7]],
    },
    "rewind": {
        "description": "remote time rewinds and resumes",
        "generator": "segments", "segments": REWIND,
    },
    "garbage": {
        "description": "perfect remote time except for occasional garbage",
        "generator": "garbage", "odds_of_garbage": 0.1,
    },
    "everything": {
        "description": "a little of everything (segments set the truth, so bias and rate are unused)",
        "generator": "garbage",
        "bias": 0.3, "rate": 1.07, "delay_range": 0.3,
        "segments": REWIND, "odds_of_garbage": 0.1,
    },
}


def _float(cfg: Dict[str, Any], key: str, default: float) -> float:
    value = cfg.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ScenarioError(f"{key} must be a number, got {value!r}") from None


def _segments(raw: Any) -> List[Segment]:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ScenarioError("segments must be a non-empty list of [start_local, end_local, rate, start_val]")
    segs = []
    for i, item in enumerate(raw):
        if isinstance(item, dict):
            item = [item.get("start_local"), item.get("end_local"), item.get("rate"), item.get("start_val")]
        if not isinstance(item, (list, tuple)) or len(item) != 4:
            raise ScenarioError(f"segment {i} must have 4 fields, got {item!r}")
        start_local, end_local, rate, start_val = item
        if end_local is None:
            end_local = math.inf
        try:
            segs.append(Segment(float(start_local), float(end_local), float(rate), float(start_val)))
        except (TypeError, ValueError) as e:
            raise ScenarioError(f"segment {i} is invalid: {e}") from None
    return segs


def _garbage_range(raw: Any):
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ScenarioError(f"garbage_range must be [low, high], got {raw!r}")
    try:
        return float(raw[0]), float(raw[1])
    except (TypeError, ValueError):
        raise ScenarioError(f"garbage_range must be numbers, got {raw!r}") from None


def build_generator(cfg: Dict[str, Any], seed: Optional[int] = None) -> ReportGenerator:
    """Build the generator chain a scenario mapping describes.

    An explicit seed overrides the scenario's own.
    """
    if not isinstance(cfg, dict):
        raise ScenarioError(f"scenario must be a mapping, got {type(cfg).__name__}")
    kind = cfg.get("generator", "ideal")
    if kind not in KIND_KEYS:
        raise ScenarioError(f"unknown generator {kind!r}, expected one of {sorted(KIND_KEYS)}")
    unknown = set(cfg) - KIND_KEYS[kind] - META_KEYS
    if unknown:
        raise ScenarioError(f"keys not used by generator {kind!r}: {sorted(unknown)}")

    if seed is None:
        seed = cfg.get("seed")
    master = random.Random(seed)

    def child_rng() -> Optional[random.Random]:
        # each randomised layer owns its own stream
        return random.Random(master.getrandbits(64)) if seed is not None else None

    try:
        gen: ReportGenerator = IdealGenerator(
            interval=_float(cfg, "interval", 0.1),
            rate=_float(cfg, "rate", 1.0),
            bias=_float(cfg, "bias", 0.0),
        )
        if kind == "ideal":
            return gen
        gen = DelayedGenerator(gen, delay_range=_float(cfg, "delay_range", 0.0), rng=child_rng())
        if kind == "delays":
            return gen
        if "segments" in cfg:
            gen = SegmentedGenerator(gen, _segments(cfg["segments"]))
        else:
            gen = SegmentedGenerator(gen)
        if kind == "segments":
            return gen
        kwargs = {}
        if "garbage_range" in cfg:
            kwargs["garbage_range"] = _garbage_range(cfg["garbage_range"])
        return GarbageGenerator(gen, odds_of_garbage=_float(cfg, "odds_of_garbage", 0.0),
                                rng=child_rng(), **kwargs)
    except ScenarioError:
        raise
    except ValueError as e:
        raise ScenarioError(str(e)) from None


def load_scenario(path: str) -> Dict[str, Any]:
    if not path or not os.path.exists(path):
        raise ScenarioError(f"scenario file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            cfg = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ScenarioError(f"cannot parse {path}: {e}") from None
    if not isinstance(cfg, dict):
        raise ScenarioError(f"{path} must hold a mapping at top level")
    cfg.setdefault("name", os.path.splitext(os.path.basename(path))[0])
    log.info("loaded scenario %s from %s", cfg["name"], path)
    return cfg


def get_preset(name: str) -> Dict[str, Any]:
    if name not in PRESETS:
        raise ScenarioError(f"unknown scenario {name!r}, expected one of {sorted(PRESETS)}")
    cfg = copy.deepcopy(PRESETS[name])
    cfg["name"] = name
    return cfg

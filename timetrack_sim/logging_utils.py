import json
import logging
import os
import time
from dataclasses import asdict, is_dataclass
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def default_log_dir(run_name: str, base: str = "~/.timetrack_logs") -> str:
    ts = time.strftime("%Y%m%d")
    path = os.path.join(os.path.expanduser(base), run_name, ts)
    os.makedirs(path, exist_ok=True)
    return path


class JsonlLogger:
    def __init__(self, path: str):
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self.path = path
        self.f = open(self.path, "a", encoding="utf-8")

    def log(self, record: Dict[str, Any]):
        record = to_dict(record)
        record.setdefault("ts_unix", time.time())
        self.f.write(json.dumps(record, ensure_ascii=False) + "\n")
        self.f.flush()

    def close(self):
        if not self.f.closed:
            self.f.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def to_dict(obj: Any) -> Dict[str, Any]:
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, dict):
        return dict(obj)
    if hasattr(obj, "_asdict"):
        return dict(obj._asdict())
    return {"value": obj}

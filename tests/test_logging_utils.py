import json
import os
import re

from timetrack_sim.driver import QUERY, SimEvent
from timetrack_sim.generators import Report
from timetrack_sim.logging_utils import JsonlLogger, default_log_dir, to_dict


def test_jsonl_logger_appends(tmp_path):
    path = tmp_path / "logs" / "run.jsonl"
    with JsonlLogger(str(path)) as lg:
        lg.log(SimEvent(QUERY, 0.5, 1.0, 1.1))
        lg.log({"event": "done"})
    with JsonlLogger(str(path)) as lg:
        lg.log(Report(0.1, 0.2))
    recs = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert len(recs) == 3
    assert recs[0]["kind"] == QUERY and recs[0]["actual"] == 1.1
    assert recs[1]["event"] == "done"
    assert recs[2] == {"local": 0.1, "remote": 0.2, "ts_unix": recs[2]["ts_unix"]}
    assert all("ts_unix" in r for r in recs)


def test_to_dict_scalar():
    assert to_dict(3) == {"value": 3}


def test_default_log_dir(tmp_path):
    d = default_log_dir("x", base=str(tmp_path / "a" / "b"))
    assert os.path.isdir(d)
    assert os.path.dirname(d) == str(tmp_path / "a" / "b" / "x")
    assert re.fullmatch(r"\d{8}", os.path.basename(d))

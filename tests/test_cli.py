import json

from timetrack_sim.cli import main
from timetrack_sim.output import CSV_HEADER


def test_cli_default_run(capsys):
    assert main(["--no-csv"]) == 0
    out = capsys.readouterr().out
    assert "[ideal/simple]" in out
    assert "rmse=" in out


def test_cli_writes_csv_and_jsonl(tmp_path):
    csv_path = tmp_path / "run.csv"
    jsonl_path = tmp_path / "run.jsonl"
    rc = main(["--scenario", "everything", "--tracker", "kalman", "--seed", "4",
               "--n-samples", "80", "--out", str(csv_path), "--jsonl", str(jsonl_path)])
    assert rc == 0
    lines = csv_path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == CSV_HEADER
    recs = [json.loads(x) for x in jsonl_path.read_text(encoding="utf-8").splitlines()]
    assert len(recs) == len(lines) - 1
    assert sum(r["kind"] == "query" for r in recs) == 80
    assert all(r["scenario"] == "everything" for r in recs)


def test_cli_scenario_file(tmp_path, capsys):
    p = tmp_path / "slow.yaml"
    p.write_text("generator: delays\nrate: 0.9\ndelay_range: 0.2\nseed: 1\n", encoding="utf-8")
    assert main(["--scenario-file", str(p), "--tracker", "window", "--no-csv"]) == 0
    assert "[slow/window]" in capsys.readouterr().out


def test_cli_bad_scenario_file(tmp_path):
    p = tmp_path / "bad.yaml"
    p.write_text("generator: warp\n", encoding="utf-8")
    assert main(["--scenario-file", str(p), "--no-csv"]) == 2


def test_cli_list_scenarios(capsys):
    assert main(["--list-scenarios"]) == 0
    out = capsys.readouterr().out
    for name in ("ideal", "rewind", "everything"):
        assert name in out


def test_cli_negative_initial_local(capsys):
    assert main(["--scenario", "garbage", "--initial-local", "-1", "--no-csv"]) == 0
    assert "[garbage/simple]" in capsys.readouterr().out


def test_cli_segments_not_covering_run(tmp_path, caplog):
    p = tmp_path / "late.yaml"
    p.write_text("generator: segments\nsegments:\n  - [1, .inf, 1, 0]\n", encoding="utf-8")
    jsonl_path = tmp_path / "late.jsonl"
    rc = main(["--scenario-file", str(p), "--no-csv", "--jsonl", str(jsonl_path)])
    assert rc == 2
    assert "does not cover the simulated time" in caplog.text
    assert jsonl_path.exists()

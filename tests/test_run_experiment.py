"""
Tests for the multi-seed experiment entry point.
"""
import json

import run_experiment


SMALL = ["--seeds", "2", "--hosts", "3", "--pes-per-host", "8", "--vms", "30",
         "--arrival-rate", "10", "--mean-lifetime", "2"]


def test_main_prints_summary(capsys):
    assert run_experiment.main(SMALL) == 0
    out = capsys.readouterr().out
    assert "vcluster" in out
    assert "first-fit" in out
    assert "acceptance" in out


def test_main_writes_json(tmp_path):
    output = tmp_path / "results.json"
    assert run_experiment.main(SMALL + ["--output", str(output)]) == 0

    data = json.loads(output.read_text())
    assert set(data["per_seed"]) == {"vcluster", "first-fit"}
    assert len(data["per_seed"]["vcluster"]["acceptance"]) == 2
    stats = data["stats"]["vcluster"]["acceptance"]
    assert stats["ci_lower"] <= stats["mean"] <= stats["ci_upper"]
    assert 0.0 <= stats["mean"] <= 1.0


def test_main_rejects_invalid_catalog(capsys):
    assert run_experiment.main(SMALL + ["--critical-mass", "0"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


def test_summarize_single_value():
    stats = run_experiment.summarize([0.5])
    assert stats == {"mean": 0.5, "std_err": 0.0, "ci_lower": 0.5, "ci_upper": 0.5}

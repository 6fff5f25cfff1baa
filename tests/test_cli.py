from __future__ import annotations

import json

import pytest

from slowstart.cli import main


def test_peak_json(capsys):
    rc = main(["peak", "--total-bytes", "10000000", "--min-rtt-us", "20000", "--json"])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["role"] == "peak"
    assert out["status"] == "OK"
    assert out["bytes_per_second"] == 186_880_000
    assert out["rounds_in_slow_start"] == 9


def test_infer_json(capsys):
    argv = [
        "infer",
        "--total-bytes", "10000000",
        "--min-rtt-us", "20000",
        "--total-time-us", "529019",
        "--json",
    ]
    assert main(argv) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["rounds_in_slow_start"] == 5
    assert out["last_full_window_packets"] == 320


def test_infer_error_exit_code(capsys):
    argv = ["infer", "--total-bytes", "1000", "--min-rtt-us", "0", "--total-time-us", "5", "--json"]
    assert main(argv) == 1
    out = json.loads(capsys.readouterr().out)
    assert out["status"] == "ERROR_MINRTT_IS_ZERO"
    assert out["bytes_per_second"] == 0


def test_report_json(capsys):
    argv = [
        "report",
        "--total-bytes", "10000000",
        "--min-rtt-us", "20000",
        "--total-time-us", "1000000",
        "--json",
    ]
    assert main(argv) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["peak"]["status"] == "OK"
    assert out["achieved"]["status"] == "OK"
    assert 0 < out["efficiency"] < 1


def test_rejects_non_positive_mss():
    with pytest.raises(SystemExit):
        main(["peak", "--total-bytes", "1000", "--mss", "0", "--min-rtt-us", "20000"])

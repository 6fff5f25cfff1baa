from __future__ import annotations

from slowstart.model import Status
from slowstart.report import analyze_transfer


def test_report_one_second_transfer():
    r = analyze_transfer(total_bytes=10_000_000, min_rtt=20_000, total_time=1_000_000)
    assert r.ok
    assert r.observed_time_s == 1.0
    assert r.observed_mbps == 80.0
    assert r.peak.bytes_per_second == 186_880_000
    assert r.achieved.rounds_in_slow_start == 4
    assert r.efficiency is not None
    assert 0 < r.efficiency < 1
    assert r.efficiency == r.achieved.bytes_per_second / r.peak.bytes_per_second


def test_report_without_efficiency_on_error():
    r = analyze_transfer(total_bytes=10_000_000, min_rtt=20_000, total_time=10_000)
    assert not r.ok
    assert r.peak.ok
    assert r.achieved.status is Status.ERROR_TRANSFER_FASTER_THAN_MODEL
    assert r.efficiency is None


def test_report_zero_time():
    r = analyze_transfer(total_bytes=1000, min_rtt=20_000, total_time=0)
    assert r.observed_mbps == 0.0
    assert r.achieved.status is Status.ERROR_TRANSFER_FASTER_THAN_MODEL

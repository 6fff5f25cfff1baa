from __future__ import annotations

import argparse
import json
import logging

from .constants import DEFAULT_INIT_CWND, DEFAULT_SEGMENT_SIZE
from .model import RateEstimate, infer_achieved_rate, peak_rate_bound
from .report import analyze_transfer

log = logging.getLogger(__name__)


def estimate_payload(est: RateEstimate) -> dict:
    return {
        "status": est.status.name,
        "bytes_per_second": est.bytes_per_second,
        "rounds_in_slow_start": est.rounds_in_slow_start,
        "projected_window_packets": est.projected_window_packets,
        "last_full_window_packets": est.last_full_window_packets,
    }


def emit(payload: dict, as_json: bool) -> None:
    print(json.dumps(payload, indent=2) if as_json else payload)


def exit_code(*estimates: RateEstimate) -> int:
    for est in estimates:
        if not est.ok:
            log.warning("model rejected inputs: %s", est.status.name)
            return 1
    return 0


def cmd_peak(args: argparse.Namespace) -> int:
    est = peak_rate_bound(args.total_bytes, args.init_cwnd, args.mss, args.min_rtt_us)
    emit({"role": "peak", **estimate_payload(est)}, args.json)
    return exit_code(est)


def cmd_infer(args: argparse.Namespace) -> int:
    est = infer_achieved_rate(
        args.total_bytes,
        args.init_cwnd,
        args.mss,
        args.min_rtt_us,
        args.total_time_us,
    )
    emit({"role": "infer", **estimate_payload(est)}, args.json)
    return exit_code(est)


def cmd_report(args: argparse.Namespace) -> int:
    r = analyze_transfer(
        total_bytes=args.total_bytes,
        min_rtt=args.min_rtt_us,
        total_time=args.total_time_us,
        init_cwnd=args.init_cwnd,
        segment_size=args.mss,
    )
    payload = {
        "role": "report",
        "total_bytes": r.total_bytes,
        "seconds": r.observed_time_s,
        "mbps": r.observed_mbps,
        "peak": estimate_payload(r.peak),
        "achieved": estimate_payload(r.achieved),
        "efficiency": r.efficiency,
    }
    emit(payload, args.json)
    return exit_code(r.peak, r.achieved)


def positive_int(raw: str) -> int:
    value = int(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return value


def non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        prog="slowstart",
        description="Slow-start throughput bounds for measured TCP transfers.",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(x: argparse.ArgumentParser) -> None:
        x.add_argument("--total-bytes", type=positive_int, required=True)
        x.add_argument("--init-cwnd", type=positive_int, default=DEFAULT_INIT_CWND)
        x.add_argument("--mss", type=positive_int, default=DEFAULT_SEGMENT_SIZE)
        x.add_argument("--min-rtt-us", type=non_negative_int, required=True)
        x.add_argument("--json", action="store_true")

    peak = sub.add_parser("peak", help="peak single-RTT rate if the transfer never leaves slow start")
    add_common(peak)
    peak.set_defaults(func=cmd_peak)

    infer = sub.add_parser("infer", help="rounds in slow start and rate achieved afterwards")
    add_common(infer)
    infer.add_argument("--total-time-us", type=non_negative_int, required=True)
    infer.set_defaults(func=cmd_infer)

    report = sub.add_parser("report", help="peak bound, achieved rate and their ratio")
    add_common(report)
    report.add_argument("--total-time-us", type=non_negative_int, required=True)
    report.set_defaults(func=cmd_report)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())

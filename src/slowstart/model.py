from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Union

from .constants import MICROS_IN_SEC

Duration = Union[int, timedelta]


class Status(enum.IntEnum):
    OK = 0
    ERROR_MINRTT_IS_ZERO = 1
    ERROR_INIT_CWND_SLOWER_THAN_1BPMS = 2
    ERROR_TRANSFER_FASTER_THAN_MODEL = 3


@dataclass(frozen=True, slots=True)
class RateEstimate:
    bytes_per_second: int
    rounds_in_slow_start: int
    projected_window_packets: int
    last_full_window_packets: int
    status: Status = Status.OK

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @staticmethod
    def failed(status: Status) -> "RateEstimate":
        # numeric fields stay zero so unchecked callers read nothing plausible
        return RateEstimate(0, 0, 0, 0, status)


def as_micros(d: Duration) -> int:
    """Microsecond count of an int (already in µs) or a timedelta."""
    if isinstance(d, timedelta):
        us = d // timedelta(microseconds=1)
    else:
        us = int(d)
    if us < 0:
        raise ValueError(f"negative duration: {us}us")
    return us


def transfer_packets(total_bytes: int, segment_bytes: int) -> int:
    return -(-total_bytes // segment_bytes)


def round_rate(window_packets: int, segment_bytes: int, min_rtt: Duration) -> int:
    """Bytes per second of one full window delivered every min_rtt."""
    return window_packets * segment_bytes * MICROS_IN_SEC // as_micros(min_rtt)


def modeled_completion_time(
    total_bytes: int,
    init_window_packets: int,
    segment_bytes: int,
    min_rtt: Duration,
    rounds: int,
) -> int:
    """Total transfer time in µs had the window stopped doubling after `rounds` RTTs.

    The ramp costs rounds + 1 RTTs. Everything not yet sent in the ramp is
    then serialized at the frozen window's rate, plus one segment's
    transmission time per ramp round.
    """
    rtt_us = as_micros(min_rtt)
    window = init_window_packets << rounds
    sent_packets = init_window_packets * ((1 << rounds) - 1)

    rate = round_rate(window, segment_bytes, rtt_us)
    if rate == 0:
        raise ValueError(f"window of {window} packets rounds to 0 B/s at rtt={rtt_us}us")

    xmission = (total_bytes - sent_packets * segment_bytes) * MICROS_IN_SEC // rate
    ramp_xmission = rounds * segment_bytes * MICROS_IN_SEC // rate
    return rtt_us * (rounds + 1) + xmission + ramp_xmission


def peak_rate_bound(
    total_bytes: int,
    init_window_packets: int,
    segment_bytes: int,
    min_rtt: Duration,
) -> RateEstimate:
    rtt_us = as_micros(min_rtt)
    if rtt_us == 0:
        return RateEstimate.failed(Status.ERROR_MINRTT_IS_ZERO)

    xfer_pkts = transfer_packets(total_bytes, segment_bytes)

    # Inverting the geometric series gives the RTTs needed to finish without
    # leaving slow start; the last of those may not fill its window.
    rtts_to_last = math.ceil(math.log2(xfer_pkts / init_window_packets + 1)) - 1
    assert rtts_to_last >= 0

    last_full_pkts = 0
    if rtts_to_last > 0:
        last_full_pkts = init_window_packets << (rtts_to_last - 1)

    before_last_pkts = ((1 << rtts_to_last) - 1) * init_window_packets
    assert before_last_pkts <= xfer_pkts
    last_rtt_pkts = xfer_pkts - before_last_pkts

    # whichever of the last two rounds moved more packets sets the peak
    peak_pkts = max(last_full_pkts, last_rtt_pkts)

    return RateEstimate(
        bytes_per_second=peak_pkts * segment_bytes * MICROS_IN_SEC // rtt_us,
        rounds_in_slow_start=rtts_to_last,
        projected_window_packets=init_window_packets + xfer_pkts,
        last_full_window_packets=max(init_window_packets, last_full_pkts),
    )


def infer_achieved_rate(
    total_bytes: int,
    init_window_packets: int,
    segment_bytes: int,
    min_rtt: Duration,
    observed_total_time: Duration,
) -> RateEstimate:
    rtt_us = as_micros(min_rtt)
    if rtt_us == 0:
        return RateEstimate.failed(Status.ERROR_MINRTT_IS_ZERO)
    total_us = as_micros(observed_total_time)

    xfer_pkts = transfer_packets(total_bytes, segment_bytes)

    rtts = 0
    cumulative_pkts = 0
    cwnd = init_window_packets
    # O(log2(xfer_pkts / init_window_packets)) iterations
    while cumulative_pkts < xfer_pkts:
        if round_rate(cwnd, segment_bytes, rtt_us) == 0:
            return RateEstimate.failed(Status.ERROR_INIT_CWND_SLOWER_THAN_1BPMS)

        model_us = modeled_completion_time(
            total_bytes, init_window_packets, segment_bytes, rtt_us, rtts
        )
        if total_us >= model_us:
            # the next window's rate is not needed to explain the observation
            break
        rtts += 1
        cumulative_pkts += cwnd
        cwnd <<= 1

    if cumulative_pkts >= xfer_pkts:
        # Finished while apparently still in slow start: undo the last
        # speculative doubling to get the last fully transmitted window.
        cwnd >>= 1
        cumulative_pkts -= cwnd
        rtts -= 1

    remaining_us = total_us - rtt_us * (rtts + 1)
    if remaining_us <= 0:
        return RateEstimate.failed(Status.ERROR_TRANSFER_FASTER_THAN_MODEL)

    # One packet per ramp round was charged to the RTTs above; hand their
    # transmission time back to the remaining bytes.
    remaining_pkts = xfer_pkts - cumulative_pkts + rtts
    assert remaining_pkts > 0
    achieved_bps = remaining_pkts * segment_bytes * MICROS_IN_SEC // remaining_us

    return RateEstimate(
        bytes_per_second=achieved_bps,
        rounds_in_slow_start=rtts,
        projected_window_packets=achieved_bps * rtt_us // MICROS_IN_SEC // segment_bytes,
        last_full_window_packets=cwnd,
    )

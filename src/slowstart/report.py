from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import DEFAULT_INIT_CWND, DEFAULT_SEGMENT_SIZE, MICROS_IN_SEC
from .model import Duration, RateEstimate, as_micros, infer_achieved_rate, peak_rate_bound

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransferReport:
    total_bytes: int
    observed_time_s: float
    observed_mbps: float
    peak: RateEstimate
    achieved: RateEstimate

    @property
    def ok(self) -> bool:
        return self.peak.ok and self.achieved.ok

    @property
    def efficiency(self) -> Optional[float]:
        """Achieved rate as a fraction of the slow-start peak bound."""
        if not self.ok or self.peak.bytes_per_second == 0:
            return None
        return self.achieved.bytes_per_second / self.peak.bytes_per_second


def analyze_transfer(
    *,
    total_bytes: int,
    min_rtt: Duration,
    total_time: Duration,
    init_cwnd: int = DEFAULT_INIT_CWND,
    segment_size: int = DEFAULT_SEGMENT_SIZE,
) -> TransferReport:
    rtt_us = as_micros(min_rtt)
    total_us = as_micros(total_time)

    peak = peak_rate_bound(total_bytes, init_cwnd, segment_size, rtt_us)
    achieved = infer_achieved_rate(total_bytes, init_cwnd, segment_size, rtt_us, total_us)
    log.debug("peak=%s achieved=%s", peak, achieved)

    observed_time_s = total_us / MICROS_IN_SEC
    observed_mbps = 0.0
    if total_us > 0:
        observed_mbps = (total_bytes * 8 / 1_000_000) / observed_time_s

    return TransferReport(
        total_bytes=total_bytes,
        observed_time_s=observed_time_s,
        observed_mbps=observed_mbps,
        peak=peak,
        achieved=achieved,
    )

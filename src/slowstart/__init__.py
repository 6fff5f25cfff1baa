"""Slow-start throughput model

Closed-form and inverse estimates of TCP throughput under an idealized
slow start where the congestion window doubles every round trip:
- peak_rate_bound: best single-RTT rate a transfer could reach
- infer_achieved_rate: how long a measured transfer stayed in slow start,
  and the average rate it achieved afterwards

Both functions are pure and report model failures through a Status, never
by raising.
"""

from .model import RateEstimate, Status, infer_achieved_rate, peak_rate_bound

__all__ = ["RateEstimate", "Status", "infer_achieved_rate", "peak_rate_bound"]

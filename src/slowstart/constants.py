from __future__ import annotations

MICROS_IN_SEC = 1_000_000

DEFAULT_SEGMENT_SIZE = 1460
DEFAULT_INIT_CWND = 10

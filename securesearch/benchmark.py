"""
Brute-force cost floor for the IV derivation.

Encrypts a slice of Austrian social security numbers for one birth date and
extrapolates to all of them over a human lifetime, assuming the key leaked.
An SSN is 4 digits (1000-9999, 9000 values) followed by the birth date DDMMYY.
A coarse regression guard, not a cryptographic proof.
"""

import csv
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from . import config
from .deterministic import BytesLike, encrypt

logger = logging.getLogger(__name__)

PREFIX_COUNT = 9000
# 72 years (average life expectancy in 2014 was 71.5)
DAYS = 26298
DEFAULT_POSTFIX = "010170"


def candidates(start: int = 1000, stop: int = 1500, postfix: str = DEFAULT_POSTFIX) -> List[bytes]:
    """SSN candidates for one birth date, prefixes start..stop-1."""
    return [("%04d%s" % (i, postfix)).encode("ascii") for i in range(start, stop)]


def estimate_rainbow_table(
    key: BytesLike,
    start: int = 1000,
    stop: int = 1500,
    postfix: str = DEFAULT_POSTFIX,
    threshold_sec: Optional[int] = None,
    timer: Callable[[], float] = time.perf_counter,
) -> Dict[str, Any]:
    """
    Time encryption of stop-start candidates and extrapolate to a full table.
    passed is True when a single thread would need more than threshold_sec.
    """
    if threshold_sec is None:
        threshold_sec = config.rainbow_min_seconds()
    batch = candidates(start, stop, postfix)
    if not batch:
        raise ValueError("empty candidate range")
    t0 = timer()
    for data in batch:
        encrypt(data, key)
    duration = timer() - t0
    estimated = duration * (PREFIX_COUNT / len(batch)) * DAYS
    result = {
        "candidates": len(batch),
        "duration_sec": round(duration, 4),
        "per_candidate_ms": round(duration / len(batch) * 1000, 3),
        "estimated_sec": round(estimated, 1),
        "estimated_days": round(estimated / 86400, 2),
        "threshold_sec": threshold_sec,
        "passed": estimated > threshold_sec,
    }
    logger.info(
        "rainbow table estimate: %.1f days for %d candidates/day (%s)",
        result["estimated_days"], PREFIX_COUNT, "ok" if result["passed"] else "TOO FAST",
    )
    return result


def write_csv(results: List[Dict[str, Any]], path: Path) -> None:
    fieldnames = [
        "candidates", "duration_sec", "per_candidate_ms",
        "estimated_sec", "estimated_days", "threshold_sec", "passed",
    ]
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        w.writeheader()
        w.writerows(results)

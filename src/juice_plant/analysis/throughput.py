# src/juice_plant/analysis/throughput.py

"""
Provides functions for throughput analysis of a plant's timeline.

This module turns the list of `ThroughputSample`s recorded by a
`PlantStats` object into NumPy arrays and derived rates:
1. Cumulative supplied and processed counts over time, and the
   backlog between them.
2. Processing rates over a sliding window of samples.

This module requires 'numpy', which is an optional dependency for
the [analysis] feature set.
"""

import logging
from typing import Any, Dict, Optional

# Optional Dependency Handling
try:
    import numpy as np
except ImportError:
    log = logging.getLogger(__name__)
    log.error("NumPy dependency not found.")
    log.error("Please install it with: pip install juice-plant[analysis]")
    raise

from ..measure import PlantStats

log = logging.getLogger(__name__)


def calculate_throughput(stats: PlantStats) -> Optional[Dict[str, Any]]:
    """
    Converts the timeline of a PlantStats object into NumPy arrays.

    Args:
        stats (PlantStats): The tracker of a (preferably stopped) plant.

    Returns:
        Optional[Dict[str, Any]]: A dictionary with the arrays
        'elapsed', 'supplied', 'processed' and 'backlog', and the
        scalars 'mean_supply_rate' and 'mean_processing_rate'
        (items per second). Returns None if fewer than two samples
        were recorded.
    """
    timeline = list(stats.timeline)
    if len(timeline) < 2:
        log.warning(f"Only {len(timeline)} sample(s) recorded; "
                    "cannot calculate throughput.")
        return None

    elapsed = np.array([s.timestamp for s in timeline]) - stats.start_time
    supplied = np.array([s.supplied for s in timeline])
    processed = np.array([s.processed for s in timeline])
    backlog = supplied - processed

    span = elapsed[-1] - elapsed[0]
    if span > 0:
        mean_supply_rate = (supplied[-1] - supplied[0]) / span
        mean_processing_rate = (processed[-1] - processed[0]) / span
    else:
        mean_supply_rate = mean_processing_rate = 0.0

    log.debug(f"Throughput calculated over {len(timeline)} samples "
              f"({span:.2f}s)")

    return {
        "elapsed": elapsed,
        "supplied": supplied,
        "processed": processed,
        "backlog": backlog,
        "mean_supply_rate": float(mean_supply_rate),
        "mean_processing_rate": float(mean_processing_rate)
    }


def windowed_processing_rate(throughput: Dict[str, Any],
                             window: int = 10) -> np.ndarray:
    """
    Processing rate over a sliding window of samples.

    Entry i is the number of oranges processed between sample i and
    sample i + window, divided by the time between them. Windows that
    span no time yield 0.

    Args:
        throughput (Dict[str, Any]): Output of calculate_throughput().
        window (int): Window width in samples. Must be > 0.

    Returns:
        np.ndarray: One rate per complete window; empty if the timeline
                    is shorter than the window.
    """
    if window <= 0:
        raise ValueError("window must be > 0.")

    elapsed = throughput["elapsed"]
    processed = throughput["processed"]
    if len(elapsed) <= window:
        return np.array([], dtype=float)

    dt = elapsed[window:] - elapsed[:-window]
    dn = (processed[window:] - processed[:-window]).astype(float)

    rates = np.zeros_like(dn)
    np.divide(dn, dt, out=rates, where=dt > 0)
    return rates

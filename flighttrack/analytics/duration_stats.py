"""
Duration statistics using NumPy.

Summaries over a batch of observed flight durations, used for the route
query average and the history endpoint.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np


@dataclass
class DurationStats:
    """
    Summary statistics for a set of durations (minutes).

    - mean: arithmetic mean
    - std: population standard deviation
    - min/max: observed bounds
    """
    mean: float
    std: float
    min_val: int
    max_val: int
    count: int

    def to_dict(self) -> dict:
        return {
            'mean': round(self.mean, 2),
            'std': round(self.std, 2),
            'min': self.min_val,
            'max': self.max_val,
            'count': self.count,
        }


def mean_duration(durations: Iterable[int]) -> Optional[float]:
    """Arithmetic mean, or None for an empty input."""
    values = np.fromiter(durations, dtype=np.float64)
    if values.size == 0:
        return None
    return float(np.mean(values))


def summarize_durations(durations: Iterable[int]) -> Optional[DurationStats]:
    """Compute DurationStats, or None if there is nothing to summarize."""
    values = np.fromiter(durations, dtype=np.float64)
    if values.size == 0:
        return None

    return DurationStats(
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        min_val=int(np.min(values)),
        max_val=int(np.max(values)),
        count=int(values.size),
    )

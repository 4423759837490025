"""Percolation threshold estimates from trial step counts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

_CONFIDENCE_Z = 1.96


@dataclass
class PercolationEstimate:
    """Summary of a batch of percolation trials on one grid size."""

    trials: int
    mean_steps: float
    threshold: float
    stddev: float
    confidence_low: float
    confidence_high: float


def summarize(steps: Iterable[int], side: int) -> PercolationEstimate:
    """Return the mean open fraction at percolation and its 95% interval."""

    if side <= 0:
        raise ValueError(f"side must be positive, got {side}")
    counts = np.asarray(list(steps), dtype=np.int64)
    if counts.size == 0:
        raise ValueError("cannot summarize zero trials")

    fractions = counts / float(side * side)
    threshold = float(fractions.mean())
    if counts.size > 1:
        stddev = float(fractions.std(ddof=1))
        margin = _CONFIDENCE_Z * stddev / math.sqrt(counts.size)
    else:
        stddev = math.nan
        margin = math.nan
    return PercolationEstimate(
        trials=int(counts.size),
        mean_steps=float(counts.mean()),
        threshold=threshold,
        stddev=stddev,
        confidence_low=threshold - margin,
        confidence_high=threshold + margin,
    )

"""Union-find connectivity and Monte Carlo percolation."""

from .structures import Connectivity, DisjointSet
from .naive import GroupList
from .grid import neighbors, to_coords, to_index
from .simulation import PercolationSimulator
from .statistics import PercolationEstimate, summarize
from .trials import BatchResult, TrialConfig, TrialRunner, TrialRunResult, TrialRunStats
from .runner import run_to_file

__all__ = [
    "Connectivity",
    "DisjointSet",
    "GroupList",
    "neighbors",
    "to_coords",
    "to_index",
    "PercolationSimulator",
    "PercolationEstimate",
    "summarize",
    "BatchResult",
    "TrialConfig",
    "TrialRunner",
    "TrialRunResult",
    "TrialRunStats",
    "run_to_file",
]

"""Parallel Monte Carlo driver for the percolation simulator."""

from __future__ import annotations

import concurrent.futures
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd
from tqdm import tqdm

from .simulation import PercolationSimulator
from .statistics import PercolationEstimate, summarize

_EXECUTORS = {
    "process": concurrent.futures.ProcessPoolExecutor,
    "thread": concurrent.futures.ThreadPoolExecutor,
}


def _env_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None


@dataclass
class TrialConfig:
    """Configuration parameters for :class:TrialRunner."""

    side: int = 20
    trials: int = 1000
    workers: int | None = None
    seed: int | None = None
    executor: str = "process"
    time_limit: float | None = None
    use_tqdm: bool = True
    verbose: bool = True

    def __post_init__(self) -> None:
        if self.workers is None:
            self.workers = _env_int("PERCOLATION_WORKERS") or os.cpu_count() or 1
        if self.seed is None:
            self.seed = _env_int("PERCOLATION_SEED")
        if self.side <= 0:
            raise ValueError(f"side must be positive, got {self.side}")
        if self.trials < 1:
            raise ValueError(f"trials must be at least 1, got {self.trials}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.executor not in _EXECUTORS:
            raise ValueError(f"executor must be one of {sorted(_EXECUTORS)}, got '{self.executor}'")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {self.time_limit}")


@dataclass
class BatchResult:
    """Step counts published by one worker once its batch is finished."""

    batch: int
    steps: List[int]
    total: int


@dataclass
class TrialRunStats:
    """Summary metrics for a trial run."""

    side: int
    trials: int
    workers: int
    seed: int
    total_steps: int
    estimate: PercolationEstimate
    runtime_seconds: float


@dataclass
class TrialRunResult:
    """Result bundle returned by :class:TrialRunner."""

    dataframe: pd.DataFrame
    batches: List[BatchResult] = field(repr=False)
    stats: TrialRunStats


def split_trials(trials: int, workers: int) -> List[int]:
    """Split `trials` into at most `workers` batch sizes differing by at most one."""

    workers = max(1, min(workers, trials))
    base, extra = divmod(trials, workers)
    return [base + (1 if index < extra else 0) for index in range(workers)]


def run_batch(
    batch: int,
    side: int,
    trials: int,
    seed: np.random.SeedSequence,
    deadline: float | None = None,
) -> BatchResult:
    """Run up to `trials` simulations on a private simulator.

    When `deadline` (a ``time.time()`` value) passes, no new trial is started;
    at least one trial always runs.
    """

    simulator = PercolationSimulator(side, rng=np.random.default_rng(seed))
    steps: List[int] = []
    for _ in range(trials):
        steps.append(simulator.simulate())
        if deadline is not None and time.time() >= deadline:
            break
    return BatchResult(batch=batch, steps=steps, total=sum(steps))


class TrialRunner:
    """Estimate the site percolation threshold by repeated simulation."""

    def __init__(self, config: TrialConfig | None = None) -> None:
        self.config = config or TrialConfig()

    def run(self, output_path: str | Path | None = None) -> TrialRunResult:
        """Run every batch, optionally save the per-trial table, and return the results."""

        config = self.config
        verbose = config.verbose
        overall_start_time = time.time()
        seed = config.seed if config.seed is not None else time.time_ns()
        sizes = split_trials(config.trials, config.workers)
        if verbose:
            print("--- Percolation Monte Carlo Started ---")
            print(f"\n1. Scheduling {config.trials} trials on a {config.side}x{config.side} grid...")
            print(f"   {len(sizes)} batches, seed {seed}")

        t0 = time.time()
        if verbose:
            print("2. Running simulations...")
        deadline = overall_start_time + config.time_limit if config.time_limit is not None else None
        batches = self._run_batches(sizes, np.random.SeedSequence(seed), deadline)
        if verbose:
            print(f"   Done in {time.time() - t0:.2f}s")

        if verbose:
            print("3. Aggregating results...")
        total_steps = sum(result.total for result in batches)
        dataframe = self._build_dataframe(batches, config.side)
        estimate = summarize(dataframe["steps"], config.side)

        if output_path is not None:
            output_str = str(output_path)
            self._save_dataframe(dataframe, output_str)
            if verbose:
                print(f"   Results saved to '{output_str}'")

        elapsed = time.time() - overall_start_time
        stats = TrialRunStats(
            side=config.side,
            trials=len(dataframe),
            workers=len(sizes),
            seed=seed,
            total_steps=total_steps,
            estimate=estimate,
            runtime_seconds=elapsed,
        )

        if verbose:
            print("\n--- Results Summary ---")
            print(f"   - Trials completed: {stats.trials}")
            print(f"   - Mean cells opened: {estimate.mean_steps:.2f} of {config.side * config.side}")
            print(f"   - Threshold estimate: {estimate.threshold:.6f}")
            print(f"   - 95% confidence: [{estimate.confidence_low:.6f}, {estimate.confidence_high:.6f}]")
            print(f"\n--- Percolation Monte Carlo Finished in {elapsed:.2f} seconds ---")

        return TrialRunResult(dataframe=dataframe, batches=batches, stats=stats)

    def _run_batches(
        self,
        sizes: List[int],
        seed: np.random.SeedSequence,
        deadline: float | None,
    ) -> List[BatchResult]:
        config = self.config
        seeds = seed.spawn(len(sizes))
        if len(sizes) == 1:
            return [run_batch(0, config.side, sizes[0], seeds[0], deadline)]

        results: List[BatchResult] = []
        executor_cls = _EXECUTORS[config.executor]
        with executor_cls(max_workers=len(sizes)) as executor:
            futures = [
                executor.submit(run_batch, index, config.side, size, batch_seed, deadline)
                for index, (size, batch_seed) in enumerate(zip(sizes, seeds))
            ]
            completed = concurrent.futures.as_completed(futures)
            if config.use_tqdm:
                completed = tqdm(completed, total=len(futures), desc="   Batches", unit="batch")
            for future in completed:
                results.append(future.result())
        results.sort(key=lambda result: result.batch)
        return results

    @staticmethod
    def _build_dataframe(batches: List[BatchResult], side: int) -> pd.DataFrame:
        rows = [(result.batch, steps) for result in batches for steps in result.steps]
        df = pd.DataFrame(rows, columns=["batch", "steps"])
        df.insert(0, "trial", np.arange(len(df)))
        df["open_fraction"] = df["steps"] / float(side * side)
        return df

    @staticmethod
    def _save_dataframe(dataframe: pd.DataFrame, output_path: str | Path) -> None:
        path = Path(output_path)
        suffix = path.suffix.lower()
        if suffix == ".csv":
            dataframe.to_csv(path, index=False)
            return
        if suffix == ".xlsx":
            dataframe.to_excel(path, index=False)
            return
        raise ValueError(f"Unsupported output file format: '{suffix}'")


__all__ = [
    "BatchResult",
    "TrialConfig",
    "TrialRunResult",
    "TrialRunStats",
    "TrialRunner",
    "run_batch",
    "split_trials",
]

"""Convenience helpers for running percolation trials end-to-end."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .trials import TrialConfig, TrialRunner, TrialRunResult

_SUPPORTED_SUFFIXES = {".csv", ".xlsx"}


def run_to_file(
    output_path: str | Path | None,
    config: Optional[TrialConfig] = None,
) -> TrialRunResult | None:
    """Run the trials described by `config` and write the per-trial table to `output_path`."""

    if output_path is not None:
        output_path = Path(output_path)
        if output_path.suffix.lower() not in _SUPPORTED_SUFFIXES:
            print(f"ERROR: Unsupported file format for '{output_path}'. Please provide a .csv or .xlsx path.")
            return None
        if not output_path.parent.exists():
            print(f"ERROR: Output directory '{output_path.parent}' does not exist.")
            return None

    runner = TrialRunner(config or TrialConfig())
    try:
        return runner.run(output_path)
    except ValueError as exc:
        print(f"ERROR: {exc}")
        return None

import concurrent.futures

import numpy as np
import pandas as pd
import pytest

from percolation.trials import TrialConfig, TrialRunner, run_batch, split_trials


def _config(**overrides):
    params = dict(side=5, trials=40, workers=4, seed=2024, executor="thread", use_tqdm=False, verbose=False)
    params.update(overrides)
    return TrialConfig(**params)


def test_split_trials_balances_batches():
    assert split_trials(10, 3) == [4, 3, 3]
    assert split_trials(2, 8) == [1, 1]
    assert sum(split_trials(1001, 7)) == 1001


def test_run_batch_publishes_sum_of_steps():
    result = run_batch(3, side=4, trials=25, seed=np.random.SeedSequence(5))
    assert result.batch == 3
    assert len(result.steps) == 25
    assert result.total == sum(result.steps)
    assert all(1 <= steps <= 16 for steps in result.steps)


def test_run_batch_stops_after_deadline():
    result = run_batch(0, side=4, trials=50, seed=np.random.SeedSequence(5), deadline=0.0)
    assert len(result.steps) == 1


def test_runner_aggregates_all_trials():
    result = TrialRunner(_config()).run()
    stats = result.stats
    assert stats.trials == 40
    assert stats.workers == 4
    assert stats.seed == 2024
    assert stats.total_steps == sum(batch.total for batch in result.batches)
    assert stats.total_steps == result.dataframe["steps"].sum()
    assert list(result.dataframe.columns) == ["trial", "batch", "steps", "open_fraction"]
    assert [batch.batch for batch in result.batches] == [0, 1, 2, 3]
    assert 0.0 < stats.estimate.threshold <= 1.0
    assert stats.estimate.mean_steps == pytest.approx(stats.total_steps / 40)


def test_runner_is_reproducible_for_fixed_seed():
    first = TrialRunner(_config()).run()
    second = TrialRunner(_config()).run()
    pd.testing.assert_frame_equal(first.dataframe, second.dataframe)
    assert first.stats.total_steps == second.stats.total_steps


def test_single_worker_runs_inline():
    result = TrialRunner(_config(workers=1, trials=12)).run()
    assert len(result.batches) == 1
    assert result.stats.trials == 12


def test_process_pool_matches_thread_pool():
    threads = TrialRunner(_config(trials=8, workers=2)).run()
    processes = TrialRunner(_config(trials=8, workers=2, executor="process")).run()
    assert threads.dataframe["steps"].tolist() == processes.dataframe["steps"].tolist()


def test_runner_resolves_missing_seed(monkeypatch):
    monkeypatch.delenv("PERCOLATION_SEED", raising=False)
    result = TrialRunner(_config(seed=None, trials=4, workers=2)).run()
    assert isinstance(result.stats.seed, int)


def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("PERCOLATION_SEED", "17")
    monkeypatch.setenv("PERCOLATION_WORKERS", "3")
    config = TrialConfig(side=4, seed=None, workers=None)
    assert config.seed == 17
    assert config.workers == 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"side": 0},
        {"trials": 0},
        {"workers": 0},
        {"executor": "fiber"},
        {"time_limit": 0},
    ],
)
def test_config_rejects_invalid_values(overrides):
    with pytest.raises(ValueError):
        _config(**overrides)


def test_runner_saves_csv(tmp_path):
    output = tmp_path / "trials.csv"
    result = TrialRunner(_config(trials=6, workers=2)).run(output)
    saved = pd.read_csv(output)
    assert saved["steps"].tolist() == result.dataframe["steps"].tolist()


def test_runner_rejects_unknown_output_format(tmp_path):
    with pytest.raises(ValueError):
        TrialRunner(_config(trials=2, workers=1)).run(tmp_path / "trials.json")


def test_runner_stops_at_time_limit():
    result = TrialRunner(_config(side=30, trials=100000, workers=2, time_limit=0.05)).run()
    assert 2 <= result.stats.trials < 100000
    assert result.stats.trials == len(result.dataframe)
    assert result.stats.total_steps == result.dataframe["steps"].sum()


def _reverse_completion(futures):
    futures = list(futures)
    concurrent.futures.wait(futures)
    return reversed(futures)


def test_reduction_ignores_completion_order(monkeypatch):
    in_order = TrialRunner(_config()).run()
    monkeypatch.setattr(concurrent.futures, "as_completed", _reverse_completion)
    reversed_order = TrialRunner(_config()).run()
    assert reversed_order.stats.total_steps == in_order.stats.total_steps
    assert [batch.batch for batch in reversed_order.batches] == [0, 1, 2, 3]
    pd.testing.assert_frame_equal(reversed_order.dataframe, in_order.dataframe)


def test_config_rejects_malformed_environment(monkeypatch):
    monkeypatch.setenv("PERCOLATION_WORKERS", "abc")
    with pytest.raises(ValueError, match="PERCOLATION_WORKERS"):
        TrialConfig(side=4, workers=None)


def test_config_ignores_empty_environment(monkeypatch):
    monkeypatch.setenv("PERCOLATION_WORKERS", "")
    monkeypatch.setenv("PERCOLATION_SEED", "")
    config = TrialConfig(side=4, workers=None, seed=None)
    assert config.workers >= 1
    assert config.seed is None

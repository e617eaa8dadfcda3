"""Tests for result tables and pool dumps."""

import numpy as np
import pandas as pd

from oligosim.simulate.pcr.config import StageConfig
from oligosim.simulate.pcr.engine import AmplificationEngine
from oligosim.simulate.pcr.io_utils import (
    OUTCOME_COLS,
    load_pools,
    outcomes_to_frame,
    save_pools,
    write_outcomes,
)
from oligosim.simulate.pcr.random_access import RandomAccessSimulator, initial_pool


def _outcomes():
    sim = RandomAccessSimulator(AmplificationEngine("deterministic"), 0.1)
    stages = [StageConfig(0.5, 1, 2.0, 1.0), StageConfig(0.5, 1, 2.0, 1.0)]
    return sim.simulate_all(initial_pool(8, 10, dtype=np.float64), stages)


def test_outcomes_to_frame():
    df = outcomes_to_frame(_outcomes())
    assert list(df.columns) == OUTCOME_COLS
    assert df["stage"].tolist() == [1, 2]
    assert df["n_desired"].tolist() == [4, 2]
    assert df["n_spurious"].tolist() == [4, 6]


def test_write_outcomes(tmp_path):
    path = tmp_path / "out" / "outcomes.tsv"
    write_outcomes(_outcomes(), path)
    df = pd.read_csv(path, sep="\t")
    assert len(df) == 2
    assert df.loc[0, "false_positive_percent"] == 100.0


def test_save_and_load_pools(tmp_path):
    outcomes = _outcomes()
    path = tmp_path / "pools.npz"
    save_pools(outcomes, path)
    pools = load_pools(path)
    assert set(pools) == {"stage1_desired", "stage1_spurious", "stage2_desired", "stage2_spurious"}
    np.testing.assert_array_equal(pools["stage2_desired"], outcomes[1].desired_pool)

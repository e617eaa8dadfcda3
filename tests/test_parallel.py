"""Tests for parallel simulation jobs."""

import numpy as np
import pytest

from oligosim.simulate.pcr.config import SimConfig, StageParams


def _config(target_percent):
    config = SimConfig()
    config.pool.n = 40
    config.stages = [StageParams(target_percent, 5, 1.9, 1.1)] * 2
    return config


class TestResolveWorkers:
    """Requested process counts are clamped to CPUs and jobs."""

    def test_clamped_to_cpu_count(self, monkeypatch):
        from oligosim.simulate.pcr import parallel

        monkeypatch.setattr(parallel.mp, "cpu_count", lambda: 2)
        assert parallel.resolve_workers(8, 10) == 2

    def test_clamped_to_job_count(self, monkeypatch):
        from oligosim.simulate.pcr import parallel

        monkeypatch.setattr(parallel.mp, "cpu_count", lambda: 16)
        assert parallel.resolve_workers(8, 3) == 3

    def test_zero_means_all_cpus(self, monkeypatch):
        from oligosim.simulate.pcr import parallel

        monkeypatch.setattr(parallel.mp, "cpu_count", lambda: 4)
        assert parallel.resolve_workers(0, 10) == 4

    def test_never_below_one(self, monkeypatch):
        from oligosim.simulate.pcr import parallel

        monkeypatch.setattr(parallel.mp, "cpu_count", lambda: 4)
        assert parallel.resolve_workers(-3, 1) == 1

    def test_single_cpu_runs_in_process(self, monkeypatch):
        from oligosim.simulate.pcr import parallel

        def no_pool(*args, **kwargs):
            raise AssertionError("process pool should not be created")

        monkeypatch.setattr(parallel.mp, "cpu_count", lambda: 1)
        monkeypatch.setattr(parallel.mp, "Pool", no_pool)
        results = parallel.parallel_simulate([_config(0.5), _config(0.5)], num_workers=4, seed=2)
        assert len(results) == 2


class TestParallelSimulate:
    """Independent seeded jobs."""

    def test_empty(self):
        from oligosim.simulate.pcr.parallel import parallel_simulate

        assert parallel_simulate([]) == []

    def test_one_result_per_config(self):
        from oligosim.simulate.pcr.parallel import parallel_simulate

        results = parallel_simulate([_config(0.3), _config(0.5), _config(0.7)], seed=1)
        assert len(results) == 3
        assert [len(r) for r in results] == [2, 2, 2]
        assert results[0][0].target_percent == 0.3
        assert len(results[2][0].desired_pool) == 28

    def test_reproducible(self):
        from oligosim.simulate.pcr.parallel import parallel_simulate

        a = parallel_simulate([_config(0.5), _config(0.5)], seed=3)
        b = parallel_simulate([_config(0.5), _config(0.5)], seed=3)
        for ra, rb in zip(a, b):
            np.testing.assert_array_equal(ra[-1].spurious_pool, rb[-1].spurious_pool)

    def test_jobs_use_independent_streams(self):
        from oligosim.simulate.pcr.parallel import parallel_simulate

        a, b = parallel_simulate([_config(0.5), _config(0.5)], seed=3)
        assert not np.array_equal(a[0].desired_pool, b[0].desired_pool)

    @pytest.mark.slow
    def test_worker_count_does_not_change_results(self):
        from oligosim.simulate.pcr.parallel import parallel_simulate

        configs = [_config(p) for p in (0.2, 0.4, 0.6, 0.8)]
        serial = parallel_simulate(configs, num_workers=1, seed=8)
        pooled = parallel_simulate(configs, num_workers=2, seed=8)
        for rs, rp in zip(serial, pooled):
            np.testing.assert_array_equal(rs[-1].desired_pool, rp[-1].desired_pool)
            np.testing.assert_array_equal(rs[-1].spurious_pool, rp[-1].spurious_pool)

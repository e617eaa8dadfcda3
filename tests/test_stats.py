"""Tests for retrieval error statistics."""

import numpy as np
import pytest

from oligosim.simulate.pcr.engine import amplify_deterministic
from oligosim.simulate.pcr.errors import InvalidParameterError
from oligosim.simulate.pcr.stats import summarize, summarize_random_access


class TestSummarize:
    """Single pool detection."""

    def test_end_to_end_uniform_pool(self):
        pool = amplify_deterministic(np.full(10, 10), 2.0, 3)
        summary = summarize(pool, 0.1)
        assert summary.mean == 80
        assert summary.threshold == pytest.approx(8.0)
        assert summary.false_negative_count == 0
        assert summary.false_negative_percent == 0

    def test_false_negatives_strictly_below(self):
        summary = summarize(np.array([10, 10, 1]), 0.5)
        assert summary.threshold == pytest.approx(3.5)
        assert summary.false_negative_count == 1
        assert summary.false_negative_percent == pytest.approx(100 / 3)

    def test_entry_at_threshold_is_detected(self):
        summary = summarize(np.array([1.0, 3.0]), 0.5)
        assert summary.threshold == 1.0
        assert summary.false_negative_count == 0

    @pytest.mark.parametrize("ratio", [0.0, 1.0, -0.2, 1.5])
    def test_bad_ratio(self, ratio):
        with pytest.raises(InvalidParameterError):
            summarize(np.array([1, 2]), ratio)

    def test_empty_pool(self):
        with pytest.raises(InvalidParameterError):
            summarize(np.array([]), 0.1)


class TestSummarizeRandomAccess:
    """Desired/spurious detection."""

    def test_false_positive_rate_per_desired_oligo(self):
        desired = np.full(5, 10)
        spurious = np.array([5, 5, 5] + [0] * 17)
        summary = summarize_random_access(desired, spurious, 0.1)
        assert summary.false_positive_count == 3
        assert summary.false_positive_percent == pytest.approx(60.0)

    def test_threshold_from_desired_only(self):
        summary = summarize_random_access(np.array([20, 20]), np.array([1000, 1000]), 0.1)
        assert summary.threshold == pytest.approx(2.0)
        assert summary.false_positive_count == 2
        assert summary.false_positive_percent == pytest.approx(100.0)

    def test_spurious_at_threshold_not_counted(self):
        summary = summarize_random_access(np.array([1.0, 3.0]), np.array([1.0, 0.5]), 0.5)
        assert summary.false_positive_count == 0

    def test_empty_spurious_pool(self):
        summary = summarize_random_access(np.array([4, 4]), np.array([]), 0.1)
        assert summary.false_positive_count == 0
        assert summary.false_positive_percent == 0

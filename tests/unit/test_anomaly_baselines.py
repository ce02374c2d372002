"""
Unit tests for rolling feature baselines.
"""

from math import isclose

from trafficsentinel.anomaly.baselines import FeatureBaselines, RollingFeatureStats


def test_rolling_stats_warmup_and_values():
    stats = RollingFeatureStats(window_size=4, min_samples=3)

    stats.update(1.0)
    stats.update(2.0)
    assert (stats.mean, stats.std) == (0.0, 0.0)  # warm-up
    assert not stats.is_ready

    stats.update(3.0)
    assert stats.is_ready
    assert isclose(stats.mean, 2.0)
    assert isclose(stats.std, 1.0)  # sample std of 1, 2, 3


def test_rolling_stats_evicts_oldest():
    stats = RollingFeatureStats(window_size=3, min_samples=2)
    for value in [100.0, 1.0, 2.0, 3.0]:
        stats.update(value)

    assert stats.values == [1.0, 2.0, 3.0]
    assert isclose(stats.mean, 2.0)
    assert stats.peek().count == 3


def test_feature_baselines_sample_count_is_minimum():
    baselines = FeatureBaselines(["a", "b"], window_size=5, min_samples=2)
    baselines.update({"a": 1.0, "b": 2.0})
    baselines.update({"a": 1.5, "b": 2.5})

    assert baselines.sample_count == 2
    snapshot = baselines.snapshot()
    assert set(snapshot) == {"a", "b"}
    assert isclose(snapshot["b"].mean, 2.25)

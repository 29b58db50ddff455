"""
Property-based tests for partition selection strategies.
"""
# 说明：分区选择策略的属性测试。
# 覆盖：
# - 任意合法参数下 0 用户永不保留
# - Preagg 保留概率随用户数单调不减，1 用户时等于每分区 delta，超过第二交叉点恒为 1
# - 交叉点顺序满足 1 <= first_crossover <= second_crossover
# - Laplace 阈值与 delta 的互逆换算
# - 非法 epsilon / delta / k 总是被拒绝
# - 相同种子下的决策可复现

import math

import pytest
from hypothesis import given, strategies as st

from dpselect.cdp.mechanisms import MechanismBuilder
from dpselect.cdp.partition_selection import (
    LaplacePartitionSelection,
    PreaggPartitionSelection,
    create_partition_selection_strategy,
)
from dpselect.cdp.partition_selection.base import adjust_delta
from dpselect.core.privacy import ValidationError

# ------------------------------------------------------------------ Strategies
epsilons = st.floats(min_value=1e-3, max_value=20.0, allow_nan=False, allow_infinity=False)
deltas = st.floats(min_value=1e-9, max_value=0.99, allow_nan=False, allow_infinity=False)
partitions = st.integers(min_value=1, max_value=50)
methods = st.sampled_from(["preagg", "laplace"])
seeds = st.integers(min_value=0, max_value=2**32 - 1)
outside_unit_interval = st.one_of(
    st.floats(max_value=0.0, allow_nan=False, allow_infinity=False),
    st.floats(min_value=1.0, allow_nan=False, allow_infinity=False),
)


# ---------------------------------------------------------------- Empty partitions
@given(methods, epsilons, deltas, partitions, seeds)
def test_empty_partition_never_kept(method, epsilon, delta, k, seed):
    strategy = create_partition_selection_strategy(method, epsilon, delta, k, rng=seed)
    assert not any(strategy.should_keep(0) for _ in range(20))


# ---------------------------------------------------------------- Preagg
@given(epsilons, deltas, partitions)
def test_preagg_crossovers_ordered(epsilon, delta, k):
    strategy = PreaggPartitionSelection(epsilon, delta, k)
    assert 1 <= strategy.first_crossover <= strategy.second_crossover


@given(epsilons, deltas, partitions, st.data())
def test_preagg_probability_monotone(epsilon, delta, k, data):
    strategy = PreaggPartitionSelection(epsilon, delta, k)
    upper = min(strategy.second_crossover + 5, 2000)
    n = data.draw(st.integers(min_value=0, max_value=upper))
    low, high = strategy.probability_of_keep(n), strategy.probability_of_keep(n + 1)
    assert 0.0 <= low <= 1.0
    assert low <= high + 1e-12


@given(epsilons, deltas, partitions)
def test_preagg_single_user_probability_is_adjusted_delta(epsilon, delta, k):
    strategy = PreaggPartitionSelection(epsilon, delta, k)
    expected = min(1.0, adjust_delta(delta, k))
    assert strategy.probability_of_keep(1) == pytest.approx(expected, rel=1e-9)


@given(epsilons, deltas, partitions, seeds, st.integers(min_value=1, max_value=100))
def test_preagg_always_keeps_past_second_crossover(epsilon, delta, k, seed, extra):
    strategy = PreaggPartitionSelection(epsilon, delta, k, rng=seed)
    n = strategy.second_crossover + extra
    assert strategy.probability_of_keep(n) == 1.0
    assert all(strategy.should_keep(n) for _ in range(20))


@given(epsilons, deltas, partitions, seeds)
def test_preagg_reproducible(epsilon, delta, k, seed):
    a = PreaggPartitionSelection(epsilon, delta, k, rng=seed)
    b = PreaggPartitionSelection(epsilon, delta, k, rng=seed)
    n = a.first_crossover
    assert [a.should_keep(n) for _ in range(30)] == [b.should_keep(n) for _ in range(30)]


# ---------------------------------------------------------------- Laplace
@given(epsilons, deltas, partitions)
def test_laplace_threshold_delta_inverse(epsilon, delta, k):
    threshold = LaplacePartitionSelection.calculate_threshold(epsilon, delta, k)
    assert math.isfinite(threshold)
    implied = LaplacePartitionSelection.calculate_delta(epsilon, threshold, k)
    assert implied == pytest.approx(delta, abs=1e-3)


@given(epsilons, partitions, st.floats(min_value=-50.0, max_value=50.0))
def test_laplace_delta_decreases_with_threshold(epsilon, k, threshold):
    calc = LaplacePartitionSelection.calculate_delta
    assert calc(epsilon, threshold + 1.0, k) <= calc(epsilon, threshold, k)


@given(epsilons, deltas, partitions, st.integers(min_value=1, max_value=500))
def test_laplace_zero_noise_is_threshold_comparison(epsilon, delta, k, n):
    strategy = LaplacePartitionSelection(
        epsilon,
        delta,
        k,
        mechanism_builder=MechanismBuilder.zero_noise(),
    )
    assert strategy.should_keep(n) is (n >= strategy.threshold)


# ---------------------------------------------------------------- Validation
@given(methods, st.floats(max_value=0.0, allow_nan=False, allow_infinity=False), deltas, partitions)
def test_non_positive_epsilon_rejected(method, epsilon, delta, k):
    with pytest.raises(ValidationError, match=r"^Epsilon has to be positive"):
        create_partition_selection_strategy(method, epsilon, delta, k)


@given(methods, epsilons, outside_unit_interval, partitions)
def test_delta_outside_open_interval_rejected(method, epsilon, delta, k):
    with pytest.raises(ValidationError, match=r"^Delta has to be in the interval"):
        create_partition_selection_strategy(method, epsilon, delta, k)


@given(methods, epsilons, deltas, st.integers(max_value=0))
def test_non_positive_partitions_rejected(method, epsilon, delta, k):
    with pytest.raises(ValidationError, match=r"^Max number of partitions"):
        create_partition_selection_strategy(method, epsilon, delta, k)

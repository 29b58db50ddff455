"""
Pre-aggregation partition selection with a closed-form keep probability.

The keep probability ``p(n)`` for a partition with ``n`` users is the
pointwise largest sequence allowed by (eps, d)-DP between neighbouring
counts, with ``eps``/``d`` the per-partition budget:

    * growth (``0 < n <= first_crossover``): ``p(n) = e^eps p(n-1) + d``
    * saturation (``first_crossover < n <= second_crossover``): the drop
      probability ``q = 1 - p`` follows ``q(n) = e^-eps (q(n-1) - d)``
    * ``n > second_crossover``: the partition is always kept

``p(second_crossover)`` is still below 1: keeping deterministically at
``n == second_crossover`` would violate ``q(n-1) <= e^eps q(n) + d``.

Both recurrences have closed forms, so ``should_keep`` costs one uniform draw.
"""
# 说明：预聚合分区选择策略（截断几何 / “magic partition selection”）。
# 职责：
# - 构建时由 (ε/k, δ 的每分区分配) 计算两个交叉点 first_crossover 与 second_crossover
# - probability_of_keep(n)：按三段区间给出精确的保留概率（0 / 增长段 / 饱和段 / 1）
# - should_keep(n)：抽取一次 [0, 1) 均匀随机数并与 p(n) 比较
# 数值约定：
# - 所有闭式公式改写为 expm1 / log1p / tanh 形式，使极小 ε（如 1e-20）与较大 ε 下均不溢出、不丢精度
# - 次正规 δ 使 (1-d)/d 等比值溢出时改在对数域计算；交叉点不超过 _MAX_USERS
# - 每分区 δ 下溢为 0 时两个交叉点均取 _MAX_USERS，保留概率恒为 0

from __future__ import annotations

import math
import sys
from typing import Any, Optional

from dpselect.core.utils.logging import get_logger

from .base import PartitionSelectionBuilder, PartitionSelectionStrategy, ValidatedParams

logger = get_logger(__name__)

# 交叉点上限，远超任何可能出现的分区人数
_MAX_USERS = sys.maxsize


def _floor_count(x: float) -> int:
    if not x < _MAX_USERS:
        return _MAX_USERS
    return int(math.floor(x))


def _growth_probability(n: int, eps: float, d: float) -> float:
    # d * expm1(n eps) / expm1(eps)，改写为 d e^{(n-1) eps} (1 - e^{-n eps}) / (1 - e^{-eps})，
    # d 与 e^{(n-1) eps} 在对数域相乘
    if d <= 0.0:
        return 0.0
    return math.exp(math.log(d) + (n - 1) * eps) * (-math.expm1(-n * eps)) / (-math.expm1(-eps))


def _saturation_drop_probability(m: int, eps: float, d: float, q1: float) -> float:
    # q(c1 + m) = e^{-m eps} q1 - d e^{-eps} (1 - e^{-m eps}) / (1 - e^{-eps})
    decay = math.exp(-m * eps)
    return decay * q1 - d * math.exp(-eps) * (-math.expm1(-m * eps)) / (-math.expm1(-eps))


def _log_expm1(eps: float) -> float:
    if eps < 1.0:
        return math.log(math.expm1(eps))
    return eps + math.log1p(-math.exp(-eps))


def _log_saturation_span(eps: float, q1: float, d: float) -> float:
    """Stable log(1 + (e^eps - 1) * q1 / d)."""
    x = q1 / d
    if eps < 1.0:
        scaled = math.expm1(eps) * x
        if not math.isinf(scaled):
            return math.log1p(scaled)
    elif not math.isinf(x):
        return eps + math.log(x * (-math.expm1(-eps)) + math.exp(-eps))
    # 比值溢出时 1 可忽略
    return _log_expm1(eps) + math.log(q1) - math.log(d)


def calculate_first_crossover(eps: float, d: float) -> int:
    """Last user count at which the growth recurrence is the binding bound."""
    if d <= 0.0:
        return _MAX_USERS
    # 增长段在 p(n-1) <= (1 - d) / (1 + e^eps) 时仍是更紧的约束；
    # expm1(eps) / (1 + e^eps) == tanh(eps / 2)
    half = math.tanh(eps / 2.0)
    ratio = (1.0 - d) * half / d
    if math.isinf(ratio):
        log_span = math.log((1.0 - d) * half) - math.log(d)
    else:
        log_span = math.log1p(ratio)
    return min(_MAX_USERS, 1 + _floor_count(log_span / eps))


def calculate_second_crossover(eps: float, d: float, first_crossover: int) -> int:
    """Last user count whose drop probability is still positive."""
    if first_crossover >= _MAX_USERS:
        return _MAX_USERS
    q1 = max(0.0, 1.0 - _growth_probability(first_crossover, eps, d))
    steps = _log_saturation_span(eps, q1, d) / eps
    return min(_MAX_USERS, first_crossover + _floor_count(steps))


class PreaggPartitionSelection(PartitionSelectionStrategy):
    """Three-regime closed-form partition selection."""

    def __init__(
        self,
        epsilon: float,
        delta: float,
        max_partitions_contributed: int,
        rng: Optional[Any] = None,
    ):
        super().__init__(epsilon, delta, max_partitions_contributed, rng=rng)
        eps, d = self._adjusted_epsilon, self._adjusted_delta
        self._first_crossover = calculate_first_crossover(eps, d)
        self._first_crossover_probability = _growth_probability(self._first_crossover, eps, d)
        self._second_crossover = calculate_second_crossover(eps, d, self._first_crossover)
        logger.debug(
            "built %s eps=%s delta=%s k=%s crossovers=(%s, %s)",
            self.__class__.__name__,
            self._epsilon,
            self._delta,
            self._max_partitions_contributed,
            self._first_crossover,
            self._second_crossover,
        )

    @classmethod
    def builder(cls) -> "PreaggPartitionSelectionBuilder":
        return PreaggPartitionSelectionBuilder()

    @property
    def first_crossover(self) -> int:
        return self._first_crossover

    @property
    def second_crossover(self) -> int:
        return self._second_crossover

    def get_first_crossover(self) -> int:
        return self._first_crossover

    def get_second_crossover(self) -> int:
        return self._second_crossover

    def probability_of_keep(self, num_users: int) -> float:
        """Exact probability that should_keep(num_users) returns True."""
        if num_users <= 0:
            return 0.0
        eps, d = self._adjusted_epsilon, self._adjusted_delta
        if num_users <= self._first_crossover:
            return min(1.0, _growth_probability(num_users, eps, d))
        if num_users <= self._second_crossover:
            q = _saturation_drop_probability(
                num_users - self._first_crossover,
                eps,
                d,
                1.0 - self._first_crossover_probability,
            )
            return min(1.0, max(0.0, 1.0 - q))
        return 1.0

    def should_keep(self, num_users: int) -> bool:
        if num_users <= 0:
            return False
        if num_users > self._second_crossover:
            return True
        return self._uniform() < self.probability_of_keep(num_users)

    def __repr__(self) -> str:
        return (
            f"<PreaggPartitionSelection eps={self._epsilon} delta={self._delta} "
            f"max_partitions_contributed={self._max_partitions_contributed} "
            f"crossovers=({self._first_crossover}, {self._second_crossover})>"
        )


class PreaggPartitionSelectionBuilder(PartitionSelectionBuilder):
    """Builder for PreaggPartitionSelection."""

    def build(self) -> PreaggPartitionSelection:
        return super().build()  # type: ignore[return-value]

    def _build(self, params: ValidatedParams) -> PreaggPartitionSelection:
        return PreaggPartitionSelection(
            params.epsilon,
            params.delta,
            params.max_partitions_contributed,
            rng=self.rng,
        )

"""
Factory helpers to build partition selection strategies by identifier.

Responsibilities
  - Resolve a method name/enum through the registry.
  - Apply shared parameters and an optional RNG.
  - Optionally wrap the result with a pre-threshold.

A pre-threshold ``t`` drops every partition with fewer than ``t`` users and
shifts the count seen by the wrapped strategy so that a partition with
exactly ``t`` users is treated like a single-user partition. This keeps the
privacy guarantee of the wrapped strategy while never releasing partitions
that are too small to be useful.
"""
# 说明：按名称创建分区选择策略的工厂函数，可选地叠加预阈值（pre-threshold）。
# 职责：
# - 通过注册表解析方法标识并获取新的构建器
# - 统一设置 ε、δ、k 与 RNG 后构建策略
# - pre_threshold 不为 None 时返回 PreThresholdPartitionSelection 包装器

from __future__ import annotations

from typing import Any, Optional

from dpselect.core.privacy.base_mechanism import ValidationError
from dpselect.core.utils.param_validation import ensure, is_integer

from .base import PartitionSelectionStrategy
from .strategy_registry import PartitionSelectionMethod, get_strategy_builder


class PreThresholdPartitionSelection(PartitionSelectionStrategy):
    """Drops partitions below `pre_threshold` users before consulting `inner`."""

    def __init__(self, inner: PartitionSelectionStrategy, pre_threshold: int):
        ensure(
            is_integer(pre_threshold) and pre_threshold >= 1,
            f"Pre-threshold has to be a positive integer, but is {pre_threshold!r}.",
            error=ValidationError,
        )
        # 不调用基类构造：沿用内部策略已校验的参数，自身不持有 RNG，所有抽样由内部策略完成
        self._set_params(inner.validated_params)
        self._inner = inner
        self._pre_threshold = int(pre_threshold)

    @property
    def inner(self) -> PartitionSelectionStrategy:
        return self._inner

    @property
    def pre_threshold(self) -> int:
        return self._pre_threshold

    def reseed(self, seed: Optional[Any]) -> None:
        self._inner.reseed(seed)

    def should_keep(self, num_users: int) -> bool:
        if num_users < self._pre_threshold:
            return False
        return self._inner.should_keep(num_users - self._pre_threshold + 1)

    def __repr__(self) -> str:
        return f"<PreThresholdPartitionSelection pre_threshold={self._pre_threshold} inner={self._inner!r}>"


def create_partition_selection_strategy(
    method: str | PartitionSelectionMethod,
    epsilon: float,
    delta: float,
    max_partitions_contributed: int,
    *,
    pre_threshold: Optional[int] = None,
    rng: Optional[Any] = None,
) -> PartitionSelectionStrategy:
    """
    Build a partition selection strategy by identifier.

    Args:
        method: PartitionSelectionMethod or string identifier ("preagg", "laplace", aliases).
        epsilon: Privacy budget ε spent on partition selection.
        delta: Privacy budget δ spent on partition selection.
        max_partitions_contributed: Maximum partitions a single user contributes to.
        pre_threshold: Optional minimum number of users a kept partition must have.
        rng: Optional seed or numpy Generator.
    """
    builder = get_strategy_builder(method)
    strategy = (
        builder.set_epsilon(epsilon)
        .set_delta(delta)
        .set_max_partitions_contributed(max_partitions_contributed)
        .set_rng(rng)
        .build()
    )
    if pre_threshold is None:
        return strategy
    return PreThresholdPartitionSelection(strategy, pre_threshold)

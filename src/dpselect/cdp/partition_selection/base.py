"""
Shared abstractions for differentially private partition selection.

Responsibilities:
    * validate (epsilon, delta, max_partitions_contributed) in a fixed order
    * define the PartitionSelectionStrategy capability (should_keep + accessors)
    * provide the fluent builder base that every strategy builder extends
    * split the overall budget into the per-partition budget strategies use

A partition may only be revealed if the keep/drop decision is itself
(epsilon, delta)-DP with respect to adding or removing one user. A user can
touch up to ``max_partitions_contributed`` partitions, so strategies calibrate
to the per-partition budget ``epsilon / k`` and ``1 - (1 - delta) ** (1 / k)``.
"""
# 说明：分区选择（partition selection）的公共抽象层。
# 职责：
# - PartitionSelectionParams：构建器使用的“全部可选字段”配置结构
# - validate_partition_selection_params：按固定顺序校验 ε、δ、k，首个失败规则即抛出 ValidationError
# - PartitionSelectionStrategy：策略抽象基类，约定 should_keep 与参数访问接口，并管理 RNG 与锁
# - PartitionSelectionBuilder：流式 set_* 接口 + 一次性 build() 的构建器基类
# 约定：
# - 策略实例构建后不可变；随机抽样在实例锁内执行，参数读取无需加锁

from __future__ import annotations

import math
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from dpselect.core.privacy.base_mechanism import ValidationError
from dpselect.core.utils.param_validation import ensure, is_integer, is_real
from dpselect.core.utils.random import create_rng

_MAX_PARTITIONS_LABEL = "Max number of partitions a user can contribute to"


@dataclass
class PartitionSelectionParams:
    """Builder-side configuration; every field may still be unset."""

    epsilon: Optional[float] = None
    delta: Optional[float] = None
    max_partitions_contributed: Optional[int] = None


@dataclass(frozen=True)
class ValidatedParams:
    """Parameters that passed validation; the only input strategies accept."""

    epsilon: float
    delta: float
    max_partitions_contributed: int


def validate_partition_selection_params(params: PartitionSelectionParams) -> ValidatedParams:
    """
    Validate builder parameters; the first failing rule raises ValidationError.

    Order: epsilon (set, real, finite, positive), delta (set, real, finite,
    inside (0, 1)), max partitions contributed (set, integer, positive).
    """
    eps = params.epsilon
    ensure(eps is not None, "Epsilon has to be set.", error=ValidationError)
    ensure(is_real(eps), f"Epsilon has to be a real number, but is {eps!r}.", error=ValidationError)
    ensure(math.isfinite(eps), f"Epsilon has to be finite, but is {eps}.", error=ValidationError)
    ensure(eps > 0, f"Epsilon has to be positive, but is {eps}.", error=ValidationError)

    delta = params.delta
    ensure(delta is not None, "Delta has to be set.", error=ValidationError)
    ensure(is_real(delta), f"Delta has to be a real number, but is {delta!r}.", error=ValidationError)
    ensure(math.isfinite(delta), f"Delta has to be finite, but is {delta}.", error=ValidationError)
    ensure(
        0 < delta < 1,
        f"Delta has to be in the interval (0, 1), but is {delta}.",
        error=ValidationError,
    )

    k = params.max_partitions_contributed
    ensure(k is not None, f"{_MAX_PARTITIONS_LABEL} has to be set.", error=ValidationError)
    ensure(is_integer(k), f"{_MAX_PARTITIONS_LABEL} has to be an integer, but is {k!r}.", error=ValidationError)
    ensure(k > 0, f"{_MAX_PARTITIONS_LABEL} has to be positive, but is {k}.", error=ValidationError)

    return ValidatedParams(epsilon=float(eps), delta=float(delta), max_partitions_contributed=int(k))


def adjust_epsilon(epsilon: float, max_partitions_contributed: int) -> float:
    """Per-partition epsilon under basic composition over k partitions."""
    return epsilon / max_partitions_contributed


def adjust_delta(delta: float, max_partitions_contributed: int) -> float:
    """Per-partition delta such that k independent failures compose to delta."""
    # 1 - (1 - delta) ** (1 / k)，用 log1p/expm1 避免小 delta 下的精度损失
    return -math.expm1(math.log1p(-delta) / max_partitions_contributed)


def compose_delta(adjusted_delta: float, max_partitions_contributed: int) -> float:
    """Inverse of adjust_delta."""
    if adjusted_delta >= 1.0:
        return 1.0
    return -math.expm1(max_partitions_contributed * math.log1p(-adjusted_delta))


class PartitionSelectionStrategy(ABC):
    """
    Randomized keep/drop decision for a partition given its user count.

    - Contract
      - should_keep(0) is always False.
      - The keep probability is non-decreasing in the number of users and
        reaches 1 at a finite count.
      - Every call is an independent random experiment.
    """

    def __init__(
        self,
        epsilon: float,
        delta: float,
        max_partitions_contributed: int,
        rng: Optional[Any] = None,
    ):
        self._set_params(
            validate_partition_selection_params(
                PartitionSelectionParams(epsilon, delta, max_partitions_contributed)
            )
        )
        self._rng: np.random.Generator = create_rng(rng)
        self._rng_lock = threading.Lock()

    def _set_params(self, params: ValidatedParams) -> None:
        self._params = params
        self._epsilon = params.epsilon
        self._delta = params.delta
        self._max_partitions_contributed = params.max_partitions_contributed
        self._adjusted_epsilon = adjust_epsilon(params.epsilon, params.max_partitions_contributed)
        self._adjusted_delta = adjust_delta(params.delta, params.max_partitions_contributed)

    @abstractmethod
    def should_keep(self, num_users: int) -> bool:
        """Return whether a partition with `num_users` distinct users is kept."""

    # Accessors ---------------------------------------------------------------
    @property
    def validated_params(self) -> ValidatedParams:
        return self._params

    @property
    def epsilon(self) -> float:
        return self._epsilon

    @property
    def delta(self) -> float:
        return self._delta

    @property
    def max_partitions_contributed(self) -> int:
        return self._max_partitions_contributed

    @property
    def adjusted_epsilon(self) -> float:
        return self._adjusted_epsilon

    @property
    def adjusted_delta(self) -> float:
        return self._adjusted_delta

    def get_epsilon(self) -> float:
        return self._epsilon

    def get_delta(self) -> float:
        return self._delta

    def get_max_partitions_contributed(self) -> int:
        return self._max_partitions_contributed

    def reseed(self, seed: Optional[Any]) -> None:
        """Replace the random source, e.g. for reproducible experiments."""
        with self._rng_lock:
            self._rng = create_rng(seed)

    def _uniform(self) -> float:
        with self._rng_lock:
            return float(self._rng.random())

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} eps={self._epsilon} delta={self._delta} "
            f"max_partitions_contributed={self._max_partitions_contributed}>"
        )


class PartitionSelectionBuilder(ABC):
    """
    Fluent configuration for a partition selection strategy.

    Setters only record values; all validation happens in build(). Use each
    builder for a single build() call.
    """

    def __init__(self) -> None:
        self.params = PartitionSelectionParams()
        self.rng: Optional[Any] = None

    def set_epsilon(self, epsilon: float) -> "PartitionSelectionBuilder":
        self.params.epsilon = epsilon
        return self

    def set_delta(self, delta: float) -> "PartitionSelectionBuilder":
        self.params.delta = delta
        return self

    def set_max_partitions_contributed(self, max_partitions_contributed: int) -> "PartitionSelectionBuilder":
        self.params.max_partitions_contributed = max_partitions_contributed
        return self

    def set_rng(self, rng: Optional[Any]) -> "PartitionSelectionBuilder":
        """Seed or numpy Generator used for the strategy's random draws."""
        self.rng = rng
        return self

    def build(self) -> PartitionSelectionStrategy:
        """Validate the configuration and construct the strategy."""
        validated = validate_partition_selection_params(self.params)
        return self._build(validated)

    @abstractmethod
    def _build(self, params: ValidatedParams) -> PartitionSelectionStrategy:
        """Strategy specific derivation after shared validation passed."""

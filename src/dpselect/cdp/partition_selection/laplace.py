"""
Partition selection by thresholding a Laplace-noised user count.

A partition is kept iff ``num_users + Laplace(k / epsilon) >= threshold``.
The threshold is the smallest value for which a partition with a single
user is kept with probability at most the per-partition delta.
"""
# 说明：基于拉普拉斯噪声阈值的分区选择策略。
# 职责：
# - calculate_threshold / calculate_delta：基于拉普拉斯分布尾部概率的一对互逆闭式换算
#   （使用每分区预算 ε/k 与 1-(1-δ)^{1/k}，k=1 时退化为 1 - ln(2δ)/ε）
# - 构建时解析阈值（显式指定或由参数推导）与噪声机制（注入的构建器或默认拉普拉斯机制）
# - should_keep(n)：对 n 加一次噪声，判断是否不小于阈值
# 约定：
# - 噪声机制由策略独占，其 epsilon 与 L1 敏感度总是由策略的已校验参数覆盖

from __future__ import annotations

import math
from typing import Any, Optional

from dpselect.cdp.mechanisms.mechanism_builder import MechanismBuilder
from dpselect.core.privacy.base_mechanism import BaseMechanism, ValidationError
from dpselect.core.utils.config import get_config
from dpselect.core.utils.logging import get_logger
from dpselect.core.utils.param_validation import ensure, is_real

from .base import (
    PartitionSelectionBuilder,
    PartitionSelectionStrategy,
    ValidatedParams,
    adjust_delta,
    adjust_epsilon,
    compose_delta,
)

logger = get_logger(__name__)


class LaplacePartitionSelection(PartitionSelectionStrategy):
    """Keep a partition when its noised user count reaches the threshold."""

    def __init__(
        self,
        epsilon: float,
        delta: float,
        max_partitions_contributed: int,
        *,
        threshold: Optional[float] = None,
        mechanism_builder: Optional[Any] = None,
        rng: Optional[Any] = None,
    ):
        super().__init__(epsilon, delta, max_partitions_contributed, rng=rng)
        k = self._max_partitions_contributed

        if threshold is None:
            self._threshold = self.calculate_threshold(self._epsilon, self._delta, k)
            self._check_roundtrip()
        else:
            ensure(is_real(threshold), f"Threshold has to be a real number, but is {threshold!r}.", error=ValidationError)
            ensure(math.isfinite(threshold), f"Threshold has to be finite, but is {threshold}.", error=ValidationError)
            self._threshold = float(threshold)
            logger.debug(
                "explicit threshold %s implies delta=%s",
                self._threshold,
                self.calculate_delta(self._epsilon, self._threshold, k),
            )

        builder = mechanism_builder if mechanism_builder is not None else MechanismBuilder.laplace()
        builder.set_epsilon(self._epsilon).set_l1_sensitivity(k)
        if getattr(builder, "rng", None) is None and hasattr(builder, "set_rng"):
            builder.set_rng(self._rng)
        self._mechanism: BaseMechanism = builder.build()

        logger.debug(
            "built %s eps=%s delta=%s k=%s threshold=%s mechanism=%s",
            self.__class__.__name__,
            self._epsilon,
            self._delta,
            k,
            self._threshold,
            self._mechanism.mechanism_id,
        )

    @classmethod
    def builder(cls) -> "LaplacePartitionSelectionBuilder":
        return LaplacePartitionSelectionBuilder()

    # Threshold <-> delta conversions -----------------------------------------
    @staticmethod
    def calculate_threshold(epsilon: float, delta: float, max_partitions_contributed: int) -> float:
        """
        Smallest threshold keeping a single-user partition with probability <= delta.

        With ``ae = epsilon / k`` and ``ad = 1 - (1 - delta) ** (1 / k)`` this is
        ``1 - ln(2 ad) / ae`` for ``ad <= 0.5`` and ``1 + ln(2 (1 - ad)) / ae``
        otherwise.
        """
        adjusted_epsilon = adjust_epsilon(epsilon, max_partitions_contributed)
        adjusted_delta = adjust_delta(delta, max_partitions_contributed)
        if adjusted_delta <= 0.0:
            # 每分区 delta 下溢为 0：没有有限阈值满足约束
            return math.inf
        if adjusted_delta > 0.5:
            return 1.0 + math.log(2.0 * (1.0 - adjusted_delta)) / adjusted_epsilon
        return 1.0 - math.log(2.0 * adjusted_delta) / adjusted_epsilon

    @staticmethod
    def calculate_delta(epsilon: float, threshold: float, max_partitions_contributed: int) -> float:
        """Inverse of calculate_threshold: the delta a given threshold provides."""
        adjusted_epsilon = adjust_epsilon(epsilon, max_partitions_contributed)
        if threshold >= 1.0:
            adjusted_delta = 0.5 * math.exp(-adjusted_epsilon * (threshold - 1.0))
        else:
            adjusted_delta = 1.0 - 0.5 * math.exp(adjusted_epsilon * (threshold - 1.0))
        return compose_delta(adjusted_delta, max_partitions_contributed)

    def _check_roundtrip(self) -> None:
        config = get_config()
        implied = self.calculate_delta(self._epsilon, self._threshold, self._max_partitions_contributed)
        if abs(implied - self._delta) <= config.threshold_tolerance:
            return
        log = logger.warning if config.strict_validation else logger.debug
        log("threshold %s implies delta=%s, configured delta=%s", self._threshold, implied, self._delta)

    # Accessors ---------------------------------------------------------------
    @property
    def threshold(self) -> float:
        return self._threshold

    def get_threshold(self) -> float:
        return self._threshold

    @property
    def mechanism(self) -> BaseMechanism:
        return self._mechanism

    def reseed(self, seed: Optional[Any]) -> None:
        super().reseed(seed)
        self._mechanism.reseed(self._rng)

    def should_keep(self, num_users: int) -> bool:
        if num_users <= 0:
            return False
        return self._mechanism.randomise(float(num_users)) >= self._threshold

    def __repr__(self) -> str:
        return (
            f"<LaplacePartitionSelection eps={self._epsilon} delta={self._delta} "
            f"max_partitions_contributed={self._max_partitions_contributed} "
            f"threshold={self._threshold}>"
        )


class LaplacePartitionSelectionBuilder(PartitionSelectionBuilder):
    """Builder for LaplacePartitionSelection."""

    def __init__(self) -> None:
        super().__init__()
        self.mechanism_builder: Optional[Any] = None
        self.threshold: Optional[float] = None

    def set_laplace_mechanism(self, mechanism_builder: Any) -> "LaplacePartitionSelectionBuilder":
        """Noise mechanism builder; epsilon and L1 sensitivity are filled in at build()."""
        self.mechanism_builder = mechanism_builder
        return self

    def set_threshold(self, threshold: float) -> "LaplacePartitionSelectionBuilder":
        self.threshold = threshold
        return self

    def build(self) -> LaplacePartitionSelection:
        return super().build()  # type: ignore[return-value]

    def _build(self, params: ValidatedParams) -> LaplacePartitionSelection:
        return LaplacePartitionSelection(
            params.epsilon,
            params.delta,
            params.max_partitions_contributed,
            threshold=self.threshold,
            mechanism_builder=self.mechanism_builder,
            rng=self.rng,
        )

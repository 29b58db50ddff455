"""
Deterministic mechanism that adds no noise.

Only meant for tests: it satisfies the mechanism contract so that
threshold-based partition selection becomes reproducible.
"""
# 说明：零噪声机制，满足与拉普拉斯机制相同的能力约定，但噪声恒为 0。
# 用途：在测试中替换默认噪声来源，使 LaplacePartitionSelection 的阈值边界行为可确定地验证。

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np

from dpselect.core.privacy.base_mechanism import BaseMechanism


class ZeroNoiseMechanism(BaseMechanism):
    """Mechanism whose noise is always exactly zero. Not differentially private."""

    def __init__(
        self,
        epsilon: float = 1.0,
        sensitivity: float = 1.0,
        rng: Optional[Any] = None,
        name: Optional[str] = None,
    ):
        super().__init__(epsilon=epsilon, rng=rng, name=name)
        self._validate_sensitivity(sensitivity)
        self.sensitivity = float(sensitivity)

    def _calibrate_parameters(self, *, sensitivity: Optional[float], **kwargs: Any) -> None:
        del kwargs
        if sensitivity is not None:
            self.sensitivity = float(sensitivity)
        self._meta["distribution"] = "zero"

    def _draw(self, size: Optional[Tuple[int, ...]]) -> Any:
        if size is None:
            return 0.0
        return np.zeros(size)

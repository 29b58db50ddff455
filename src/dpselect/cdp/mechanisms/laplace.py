"""
Laplace mechanism for pure differential privacy.

Responsibilities:
    * calibrate Laplace scale (diversity) from epsilon and sensitivity
    * draw Laplace noise for scalars, sequences, and arrays
"""
# 说明：实现纯 (ε, 0)-DP 的拉普拉斯机制，是 LaplacePartitionSelection 的默认噪声来源。
# 主要职责：
# 1) 由 epsilon 与 L1 敏感度 sensitivity 计算拉普拉斯噪声尺度 scale = sensitivity / epsilon
# 2) 对标量、序列、NumPy 数组逐元素加噪

from __future__ import annotations

from typing import Any, Optional, Tuple

from dpselect.core.privacy.base_mechanism import BaseMechanism, CalibrationError


class LaplaceMechanism(BaseMechanism):
    """Pure (epsilon, 0)-DP Laplace mechanism."""

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
        self.scale: Optional[float] = None

    def _calibrate_parameters(self, *, sensitivity: Optional[float], **kwargs: Any) -> None:
        """Refresh the L1 sensitivity (if provided) and compute the Laplace scale."""
        del kwargs
        if sensitivity is not None:
            self.sensitivity = float(sensitivity)
        self.scale = self.sensitivity / self.epsilon
        self._meta["distribution"] = "laplace"

    @property
    def diversity(self) -> Optional[float]:
        """Alias for the Laplace scale parameter b."""
        return self.scale

    def _draw(self, size: Optional[Tuple[int, ...]]) -> Any:
        if self.scale is None:
            raise CalibrationError("Laplace mechanism missing scale; call calibrate()")
        return self._rng.laplace(0.0, self.scale, size=size)

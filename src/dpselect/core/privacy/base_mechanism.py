"""
Core abstractions shared by every noise mechanism implementation.

Responsibilities:
    * common parameter validation and RNG management
    * consistent calibration lifecycle
    * the noise sampling capability consumed by partition selection
    * purpose specific exceptions
"""
# 说明：定义本库噪声机制共享的抽象基类与异常类型。
# 职责：
# - 通用参数校验与随机数生成器（RNG）管理
# - 统一的校准生命周期（calibrate / require_calibrated）
# - 约定噪声采样能力：sample_noise() 产生一次独立噪声，randomise() 将噪声加到输入上
# - 特定用途的异常类型（分区选择构建失败同样使用 ValidationError）

from __future__ import annotations

import math
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import numpy as np

from dpselect.core.utils.param_validation import is_real
from dpselect.core.utils.random import create_rng


# Exceptions -----------------------------------------------------------------
class MechanismError(Exception):
    """Base exception for mechanism errors."""


class ValidationError(MechanismError, ValueError):
    """Raised when input parameters are invalid."""


class CalibrationError(MechanismError):
    """Raised when calibration fails or is inconsistent."""


class NotCalibratedError(MechanismError):
    """Raised when an operation requires prior calibration."""


# Base abstraction ------------------------------------------------------------
# 所有噪声机制的抽象基类：
#  - 负责 epsilon/delta 校验与 RNG 管理
#  - 约定统一的校准生命周期
#  - 采样操作在实例锁内执行，numpy Generator 本身不是线程安全的
class BaseMechanism(ABC):
    """Abstract base class for all noise mechanisms."""

    def __init__(
        self,
        epsilon: float,
        delta: float = 0.0,
        rng: Optional[Any] = None,
        name: Optional[str] = None,
    ):
        self._validate_epsilon(epsilon)
        self._validate_delta(delta)

        self.epsilon: float = float(epsilon)
        self.delta: float = float(delta)
        self.name: str = name or self.__class__.__name__
        self._rng: np.random.Generator = create_rng(rng)
        self._rng_lock = threading.Lock()
        self._calibrated: bool = False
        self._meta: Dict[str, Any] = {}

    # Validation helpers ------------------------------------------------------
    @staticmethod
    def _validate_epsilon(eps: float) -> None:
        if not is_real(eps) or not math.isfinite(eps) or eps <= 0:
            raise ValidationError("epsilon must be a positive finite real number")

    @staticmethod
    def _validate_delta(delta: float) -> None:
        if not is_real(delta) or not 0 <= delta < 1:
            raise ValidationError("delta must be a real number in [0, 1)")

    @staticmethod
    def _validate_sensitivity(sensitivity: float) -> None:
        if not is_real(sensitivity) or not math.isfinite(sensitivity) or sensitivity <= 0:
            raise ValidationError("sensitivity must be a positive real number")

    # Calibration lifecycle ---------------------------------------------------
    def calibrate(self, sensitivity: Optional[float] = None, **kwargs: Any) -> "BaseMechanism":
        """
        Common calibration entry point.
        - Args:
            - sensitivity: Optional numeric sensitivity override.
            - **kwargs: Mechanism specific calibration kwargs.
        - Returns:
            - self (allows chaining).
        """
        if sensitivity is not None:
            self._validate_sensitivity(sensitivity)
        # 仅在子类成功应用参数后才切换生命周期标志位
        self._calibrate_parameters(sensitivity=sensitivity, **kwargs)
        self._calibrated = True
        return self

    @abstractmethod
    def _calibrate_parameters(self, *, sensitivity: Optional[float], **kwargs: Any) -> None:
        """Subclasses implement their own calibration logic."""

    @abstractmethod
    def _draw(self, size: Optional[Tuple[int, ...]]) -> Any:
        """Draw raw noise; called with the RNG lock held."""

    def sample_noise(self) -> float:
        """Return one independent noise sample."""
        self.require_calibrated()
        with self._rng_lock:
            return float(self._draw(None))

    def randomise(self, value: Any) -> Any:
        """Add mechanism specific noise to the provided value."""
        self.require_calibrated()
        arr, was_scalar = self._coerce_numeric(value)
        size = None if was_scalar else arr.shape
        with self._rng_lock:
            noise = self._draw(size)
        return float(arr + noise) if was_scalar else arr + noise

    @property
    def calibrated(self) -> bool:
        return self._calibrated

    # Utilities ---------------------------------------------------------------
    def require_calibrated(self) -> None:
        if not self._calibrated:
            raise NotCalibratedError("mechanism not calibrated; call calibrate() first")

    def reseed(self, seed: Optional[Any]) -> None:
        """Replace RNG with a new generator constructed from `seed`."""
        with self._rng_lock:
            self._rng = create_rng(seed)

    @property
    def mechanism_id(self) -> str:
        """Stable identifier used in logs and registries."""
        lowered = self.__class__.__name__.lower()
        suffix = "mechanism"
        if lowered.endswith(suffix):
            return lowered[: -len(suffix)] or lowered
        return lowered

    # Shared numeric helpers --------------------------------------------------
    @staticmethod
    def _coerce_numeric(value: Any) -> Tuple[np.ndarray, bool]:
        if isinstance(value, (str, bytes)):
            raise ValidationError("value must be numeric or array-like")
        try:
            arr = np.asarray(value, dtype=float)
        except (TypeError, ValueError) as exc:
            raise ValidationError("value must be numeric or array-like") from exc
        return arr, arr.ndim == 0

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} name={self.name} "
            f"eps={self.epsilon} delta={self.delta} calibrated={self._calibrated}>"
        )

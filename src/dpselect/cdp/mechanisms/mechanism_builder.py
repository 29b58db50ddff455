"""
Fluent builder that configures and calibrates a noise mechanism.

Responsibilities
  - Collect epsilon, L1 sensitivity and RNG before any mechanism exists.
  - Construct the mechanism class and calibrate it in one step.

Usage Context
  - Handed to LaplacePartitionSelectionBuilder, which fills in epsilon and
    sensitivity from its own validated parameters and takes ownership of
    the built mechanism.

Limitations
  - A builder is meant for a single build() call.
"""
# 说明：噪声机制构建器，按“先配置、后一次性构建并校准”的方式创建机制实例。
# 职责：
# - 收集 epsilon、L1 敏感度与 RNG 配置
# - 调用机制构造函数并立即完成 calibrate，返回可直接采样的机制
# - 分区选择构建器在内部覆盖 epsilon 与敏感度，调用方只需选择机制类型

from __future__ import annotations

from typing import Any, Optional, Type

from dpselect.core.privacy.base_mechanism import BaseMechanism, ValidationError
from dpselect.core.utils.param_validation import ensure

from .laplace import LaplaceMechanism
from .zero_noise import ZeroNoiseMechanism


class MechanismBuilder:
    """Configure-then-build helper for BaseMechanism subclasses."""

    def __init__(self, mechanism_cls: Type[BaseMechanism] = LaplaceMechanism):
        ensure(
            isinstance(mechanism_cls, type) and issubclass(mechanism_cls, BaseMechanism),
            "mechanism_cls must be a BaseMechanism subclass",
            error=ValidationError,
        )
        self.mechanism_cls = mechanism_cls
        self.epsilon: Optional[float] = None
        self.l1_sensitivity: Optional[float] = None
        self.rng: Optional[Any] = None

    @classmethod
    def laplace(cls) -> "MechanismBuilder":
        return cls(LaplaceMechanism)

    @classmethod
    def zero_noise(cls) -> "MechanismBuilder":
        return cls(ZeroNoiseMechanism)

    def set_epsilon(self, epsilon: float) -> "MechanismBuilder":
        self.epsilon = epsilon
        return self

    def set_l1_sensitivity(self, sensitivity: float) -> "MechanismBuilder":
        self.l1_sensitivity = sensitivity
        return self

    def set_rng(self, rng: Optional[Any]) -> "MechanismBuilder":
        self.rng = rng
        return self

    def build(self) -> BaseMechanism:
        """Construct and calibrate the configured mechanism."""
        ensure(self.epsilon is not None, "Epsilon has to be set.", error=ValidationError)
        sensitivity = 1.0 if self.l1_sensitivity is None else self.l1_sensitivity
        mechanism = self.mechanism_cls(epsilon=self.epsilon, sensitivity=sensitivity, rng=self.rng)
        return mechanism.calibrate()

    def __repr__(self) -> str:
        return (
            f"<MechanismBuilder cls={self.mechanism_cls.__name__} "
            f"eps={self.epsilon} l1={self.l1_sensitivity}>"
        )

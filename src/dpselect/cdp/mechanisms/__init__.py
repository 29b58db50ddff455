"""Noise mechanisms consumed by partition selection."""
from .laplace import LaplaceMechanism
from .zero_noise import ZeroNoiseMechanism
from .mechanism_builder import MechanismBuilder

__all__ = [
    "LaplaceMechanism",
    "ZeroNoiseMechanism",
    "MechanismBuilder",
]

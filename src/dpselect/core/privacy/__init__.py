"""Core privacy abstractions and shared exceptions."""
from .base_mechanism import (
    BaseMechanism,
    MechanismError,
    ValidationError,
    CalibrationError,
    NotCalibratedError,
)

__all__ = [
    "BaseMechanism",
    "MechanismError",
    "ValidationError",
    "CalibrationError",
    "NotCalibratedError",
]

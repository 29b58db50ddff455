"""Entry point for the core library components."""

from __future__ import annotations

from .utils import (
    ParamValidationError,
    RuntimeConfig,
    configure,
    get_config,
    get_logger,
)
from .privacy import (
    BaseMechanism,
    CalibrationError,
    MechanismError,
    NotCalibratedError,
    ValidationError,
)

__all__: list[str] = [
    "ParamValidationError",
    "RuntimeConfig",
    "configure",
    "get_config",
    "get_logger",
    "BaseMechanism",
    "CalibrationError",
    "MechanismError",
    "NotCalibratedError",
    "ValidationError",
]

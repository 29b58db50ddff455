"""Shared utility helpers used across the core library."""

from .random import (
    create_rng,
    split_rng,
)
from .config import (
    RuntimeConfig,
    get_config,
    configure,
)
from .logging import (
    PrivacyFilter,
    get_logger,
    configure_logging,
)
from .param_validation import (
    ensure,
    is_integer,
    is_real,
    ParamValidationError,
)

__all__ = [
    "create_rng",
    "split_rng",
    "RuntimeConfig",
    "get_config",
    "configure",
    "PrivacyFilter",
    "get_logger",
    "configure_logging",
    "ensure",
    "is_integer",
    "is_real",
    "ParamValidationError",
]

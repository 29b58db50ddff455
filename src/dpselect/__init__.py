"""Differentially private partition selection."""

from __future__ import annotations

from .cdp.mechanisms import LaplaceMechanism, MechanismBuilder, ZeroNoiseMechanism
from .cdp.partition_selection import (
    LaplacePartitionSelection,
    LaplacePartitionSelectionBuilder,
    PartitionSelectionMethod,
    PartitionSelectionStrategy,
    PreaggPartitionSelection,
    PreaggPartitionSelectionBuilder,
    PreThresholdPartitionSelection,
    create_partition_selection_strategy,
)
from .core.privacy import MechanismError, ValidationError

__version__ = "0.1.0"

__all__ = [
    "LaplaceMechanism",
    "MechanismBuilder",
    "ZeroNoiseMechanism",
    "LaplacePartitionSelection",
    "LaplacePartitionSelectionBuilder",
    "PartitionSelectionMethod",
    "PartitionSelectionStrategy",
    "PreaggPartitionSelection",
    "PreaggPartitionSelectionBuilder",
    "PreThresholdPartitionSelection",
    "create_partition_selection_strategy",
    "MechanismError",
    "ValidationError",
]

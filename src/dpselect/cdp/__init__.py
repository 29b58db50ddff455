"""Entry point for the central differential privacy (CDP) package."""

from __future__ import annotations

from .mechanisms import LaplaceMechanism, MechanismBuilder, ZeroNoiseMechanism
from .partition_selection import (
    LaplacePartitionSelection,
    PartitionSelectionMethod,
    PartitionSelectionStrategy,
    PreaggPartitionSelection,
    create_partition_selection_strategy,
)

__all__: list[str] = [
    "LaplaceMechanism",
    "MechanismBuilder",
    "ZeroNoiseMechanism",
    "LaplacePartitionSelection",
    "PartitionSelectionMethod",
    "PartitionSelectionStrategy",
    "PreaggPartitionSelection",
    "create_partition_selection_strategy",
]

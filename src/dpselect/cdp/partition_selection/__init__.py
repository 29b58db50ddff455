"""Differentially private partition selection strategies."""
from .base import (
    PartitionSelectionBuilder,
    PartitionSelectionParams,
    PartitionSelectionStrategy,
    ValidatedParams,
    validate_partition_selection_params,
)
from .preagg import PreaggPartitionSelection, PreaggPartitionSelectionBuilder
from .laplace import LaplacePartitionSelection, LaplacePartitionSelectionBuilder
from .strategy_registry import (
    STRATEGY_REGISTRY,
    PartitionSelectionMethod,
    get_strategy_builder,
    normalize_method,
    registered_strategies_snapshot,
)
from .strategy_factory import PreThresholdPartitionSelection, create_partition_selection_strategy

__all__ = [
    "PartitionSelectionBuilder",
    "PartitionSelectionParams",
    "PartitionSelectionStrategy",
    "ValidatedParams",
    "validate_partition_selection_params",
    "PreaggPartitionSelection",
    "PreaggPartitionSelectionBuilder",
    "LaplacePartitionSelection",
    "LaplacePartitionSelectionBuilder",
    "STRATEGY_REGISTRY",
    "PartitionSelectionMethod",
    "get_strategy_builder",
    "normalize_method",
    "registered_strategies_snapshot",
    "PreThresholdPartitionSelection",
    "create_partition_selection_strategy",
]

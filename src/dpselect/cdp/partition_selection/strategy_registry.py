"""
Light-weight registry mapping partition selection methods to their builders.

Responsibilities
  - Provide a single source of truth for strategy lookups by name.
  - Normalise identifiers (string/enum) including common aliases.

Limitations
  - Only includes strategies registered in STRATEGY_REGISTRY.
"""
# 说明：维护 PartitionSelectionMethod 与具体策略构建器映射关系的轻量级注册表。
# 职责：
# - 作为按名称创建分区选择策略的单一事实来源
# - 提供方法标识符的归一化（大小写、空格、连字符与别名）以及未注册方法的错误报告
# - 暴露注册表快照，供工具或文档查询

from __future__ import annotations

import enum
from typing import Dict, Type

from dpselect.core.utils.param_validation import ParamValidationError

from .base import PartitionSelectionBuilder
from .laplace import LaplacePartitionSelectionBuilder
from .preagg import PreaggPartitionSelectionBuilder

_ALIASES = {
    "truncated_geometric": "preagg",
    "magic": "preagg",
    "laplace_thresholding": "laplace",
}


class PartitionSelectionMethod(enum.Enum):
    """Supported partition selection strategies."""

    PREAGG = "preagg"
    LAPLACE = "laplace"
    TRUNCATED_GEOMETRIC = "preagg"
    LAPLACE_THRESHOLDING = "laplace"

    @classmethod
    def from_str(cls, name: str) -> "PartitionSelectionMethod":
        normalized = str(name).strip().lower().replace(" ", "_").replace("-", "_")
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ParamValidationError(f"unknown partition selection method '{name}'") from exc


STRATEGY_REGISTRY: Dict[PartitionSelectionMethod, Type[PartitionSelectionBuilder]] = {
    PartitionSelectionMethod.PREAGG: PreaggPartitionSelectionBuilder,
    PartitionSelectionMethod.LAPLACE: LaplacePartitionSelectionBuilder,
}


def normalize_method(method: str | PartitionSelectionMethod) -> PartitionSelectionMethod:
    """Coerce string or enum to PartitionSelectionMethod, raising on unknown identifiers."""
    if isinstance(method, PartitionSelectionMethod):
        return method
    return PartitionSelectionMethod.from_str(method)


def get_strategy_builder(method: str | PartitionSelectionMethod) -> PartitionSelectionBuilder:
    """Return a fresh builder for the given method."""
    resolved = normalize_method(method)
    if resolved not in STRATEGY_REGISTRY:
        raise ParamValidationError(f"partition selection method '{resolved.value}' not registered")
    return STRATEGY_REGISTRY[resolved]()


def registered_strategies_snapshot() -> Dict[str, str]:
    """Snapshot of registered strategies for tooling or docs."""
    return {method.value: cls.__name__ for method, cls in STRATEGY_REGISTRY.items()}

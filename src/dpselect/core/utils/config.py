"""
Runtime options for partition selection.

A single RuntimeConfig instance is shared by the whole library. It is
populated from ``DPSELECT_*`` environment variables when the module is
imported and may be changed afterwards with ``configure(...)``.
"""
# 说明：分区选择库的运行时选项。
# 职责：
# - RuntimeConfig：严格校验开关、日志等级、默认随机种子、阈值往返换算容差
# - load_from_env(...)：按字段表逐项解析 DPSELECT_ 前缀环境变量
# - get_config() / configure(...)：访问与更新全局单例
# 约定：
# - 未知配置键在 update(...) 中触发 AttributeError
# - 环境变量 DPSELECT_RNG_SEED 为空字符串时表示不固定种子

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

ENV_PREFIX = "DPSELECT_"


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _parse_seed(raw: str) -> Optional[int]:
    raw = raw.strip()
    return int(raw) if raw else None


@dataclass
class RuntimeConfig:
    # 为 True 时，推导阈值的往返换算偏差以 WARNING 记录，否则以 DEBUG 记录
    strict_validation: bool = True
    log_level: str = "INFO"
    # 未显式提供 rng 时使用的种子；None 表示从操作系统熵源初始化
    rng_seed: Optional[int] = None
    # calculate_delta(calculate_threshold(delta)) 与 delta 的允许偏差
    threshold_tolerance: float = 1e-3
    extra: Dict[str, Any] = field(default_factory=dict)

    def update(self, **kwargs: Any) -> None:
        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise AttributeError(f"unknown config option '{key}'")
            setattr(self, key, value)

    def load_from_env(self, prefix: str = ENV_PREFIX) -> None:
        """Override fields from ``<prefix><FIELD>`` environment variables that are set."""
        for name, parse in _ENV_PARSERS.items():
            raw = os.environ.get(f"{prefix}{name.upper()}")
            if raw is not None:
                setattr(self, name, parse(raw))


_ENV_PARSERS: Dict[str, Callable[[str], Any]] = {
    "strict_validation": _parse_bool,
    "log_level": lambda raw: raw.strip().upper(),
    "rng_seed": _parse_seed,
    "threshold_tolerance": float,
}

_GLOBAL_CONFIG = RuntimeConfig()
_GLOBAL_CONFIG.load_from_env()


def get_config() -> RuntimeConfig:
    return _GLOBAL_CONFIG


def configure(**kwargs: Any) -> RuntimeConfig:
    _GLOBAL_CONFIG.update(**kwargs)
    return _GLOBAL_CONFIG

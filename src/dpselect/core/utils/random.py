"""
Random number generation helpers.

Responsibilities
  - Centralize RNG creation and seeding.
  - Provide reproducible splits for parallel workloads.

Usage Context
  - Strategies and mechanisms accept a seed or an existing Generator.
  - Worker pools that want one strategy per worker derive their streams
    with split_rng.

Limitations
  - Relies on numpy Generator behavior for reproducibility; the streams
    are not a cryptographically secure randomness source.
"""
# 说明：随机数生成辅助工具，用于在库中统一管理 RNG 的创建、复用与分配。
# 职责：
# - create_rng：集中封装 numpy Generator 的创建逻辑，支持显式种子与已有生成器
# - split_rng：从单一 RNG 派生出多个独立生成器，便于并行场景下为每个工作线程构造独立策略
# - 未显式提供种子时回退到运行时配置中的 rng_seed

from __future__ import annotations

from typing import Any, List, Optional

import numpy as np

from .config import get_config


def create_rng(seed: Optional[Any] = None) -> np.random.Generator:
    """Create a numpy Generator from a seed, SeedSequence, or existing generator."""
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None:
        seed = get_config().rng_seed
    return np.random.default_rng(seed)


def split_rng(rng: np.random.Generator, num: int) -> List[np.random.Generator]:
    """Split an RNG into `num` independent generators."""
    if num <= 0:
        raise ValueError("num must be positive")
    seeds = rng.bit_generator.seed_seq.spawn(num)
    return [np.random.default_rng(seed) for seed in seeds]

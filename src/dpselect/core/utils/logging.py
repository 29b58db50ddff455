"""
Logging helpers for dpselect.

Loggers returned by get_logger carry a PrivacyFilter that blanks values
describing a single partition (its user count or key) when they are passed
through ``extra``. Strategies only log their construction parameters, the
filter guards against callers attaching partition data to library records.
"""
# 说明：dpselect 的日志工具。
# 职责：
# - PrivacyFilter：将 extra 中描述单个分区的字段（num_users / partition_key / user_id）替换为占位符
# - configure_logging(...)：安装统一格式的处理器，并设置 dpselect 包 logger 的级别
# - get_logger(...)：首次调用时完成初始化，并确保返回的 logger 挂载且仅挂载一个 PrivacyFilter
# 约定：
# - 过滤器挂在各模块 logger 上而非根 logger，子 logger 的记录才会经过过滤
# - 日志级别优先级：显式参数 level > 运行时配置 log_level（可由 DPSELECT_LOG_LEVEL 设置）

from __future__ import annotations

import logging
from typing import Optional

from .config import get_config

PACKAGE_LOGGER = "dpselect"
_FORMAT = "[%(levelname)s] %(name)s %(asctime)s | %(message)s"
_MASKED_FIELDS = ("num_users", "partition_key", "user_id")

_configured = False


class PrivacyFilter(logging.Filter):
    """Replace per-partition values attached to a record with ``***``."""

    def filter(self, record: logging.LogRecord) -> bool:
        for attr in _MASKED_FIELDS:
            if attr in record.__dict__:
                record.__dict__[attr] = "***"
        return True


def configure_logging(level: Optional[str] = None) -> None:
    global _configured
    logging.basicConfig(format=_FORMAT)
    logging.getLogger(PACKAGE_LOGGER).setLevel((level or get_config().log_level).upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    if not _configured:
        configure_logging()
    logger = logging.getLogger(name)
    if not any(isinstance(f, PrivacyFilter) for f in logger.filters):
        logger.addFilter(PrivacyFilter())
    return logger

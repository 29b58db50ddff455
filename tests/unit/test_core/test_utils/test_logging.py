"""
Unit tests for logging utilities.
"""
# 说明：日志初始化与分区信息脱敏过滤的单元测试。
# 覆盖：
# - get_logger(...)：返回的 logger 挂载且仅挂载一个 PrivacyFilter
# - PrivacyFilter：掩码 num_users / partition_key / user_id，其余字段保持不变
# - 经模块 logger 输出的记录在被处理器捕获前已完成脱敏
# - configure_logging(...)：显式级别作用于 dpselect 包 logger

import logging

import pytest

from dpselect.core.utils import PrivacyFilter, configure_logging, get_logger


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("dpselect.test", logging.INFO, __file__, 1, "message", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def package_level():
    logger = logging.getLogger("dpselect")
    saved = logger.level
    yield logger
    logger.setLevel(saved)


def test_get_logger_installs_single_privacy_filter() -> None:
    get_logger("dpselect.test.single")
    logger = get_logger("dpselect.test.single")
    assert sum(isinstance(f, PrivacyFilter) for f in logger.filters) == 1


def test_privacy_filter_masks_partition_fields() -> None:
    record = _record(num_users=42, partition_key="de", user_id="u1", strategy="preagg")
    assert PrivacyFilter().filter(record) is True
    assert record.num_users == "***"
    assert record.partition_key == "***"
    assert record.user_id == "***"
    assert record.strategy == "preagg"


def test_records_masked_before_capture(caplog) -> None:
    logger = get_logger("dpselect.test.capture")
    with caplog.at_level(logging.INFO, logger="dpselect"):
        logger.info("decided", extra={"num_users": 7})
    assert "decided" in caplog.text
    assert caplog.records[-1].num_users == "***"


def test_configure_logging_sets_package_level(package_level) -> None:
    configure_logging(level="debug")
    assert package_level.level == logging.DEBUG
    configure_logging(level="WARNING")
    assert package_level.level == logging.WARNING

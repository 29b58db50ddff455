"""
Unit tests for shared partition selection parameter validation.
"""
# 说明：分区选择构建器的参数校验测试（Preagg 与 Laplace 两种构建器共用同一规则）。
# 覆盖：
# - 8 条校验规则各自的拒绝路径及错误消息前缀
# - 规则顺序：首个失败的规则决定错误消息
# - 非数值类型、布尔值、非整数 k 的拒绝
# - 直接调用策略构造函数同样执行校验，不会产生部分有效的策略

import math

import numpy as np
import pytest

from dpselect.cdp.mechanisms import MechanismBuilder
from dpselect.cdp.partition_selection import (
    LaplacePartitionSelection,
    LaplacePartitionSelectionBuilder,
    PartitionSelectionParams,
    PreaggPartitionSelection,
    PreaggPartitionSelectionBuilder,
    validate_partition_selection_params,
)
from dpselect.core.privacy import ValidationError


def _preagg_builder():
    return PreaggPartitionSelectionBuilder()


def _laplace_builder():
    return LaplacePartitionSelectionBuilder().set_laplace_mechanism(MechanismBuilder.laplace())


BUILDERS = pytest.mark.parametrize(
    "make_builder", [_preagg_builder, _laplace_builder], ids=["preagg", "laplace"]
)


def _build(builder, epsilon=None, delta=None, k=None):
    if epsilon is not None:
        builder.set_epsilon(epsilon)
    if delta is not None:
        builder.set_delta(delta)
    if k is not None:
        builder.set_max_partitions_contributed(k)
    return builder.build()


@BUILDERS
def test_unset_epsilon(make_builder) -> None:
    with pytest.raises(ValidationError, match=r"^Epsilon has to be set"):
        _build(make_builder(), delta=0.1, k=2)


@BUILDERS
def test_not_finite_epsilon(make_builder) -> None:
    with pytest.raises(ValidationError, match=r"^Epsilon has to be finite"):
        _build(make_builder(), epsilon=math.nan, delta=0.3, k=4)
    with pytest.raises(ValidationError, match=r"^Epsilon has to be finite"):
        _build(make_builder(), epsilon=math.inf, delta=0.3, k=4)


@BUILDERS
def test_negative_epsilon(make_builder) -> None:
    with pytest.raises(ValidationError, match=r"^Epsilon has to be positive"):
        _build(make_builder(), epsilon=-5.0, delta=0.6, k=7)
    with pytest.raises(ValidationError, match=r"^Epsilon has to be positive"):
        _build(make_builder(), epsilon=0.0, delta=0.6, k=7)


@BUILDERS
def test_unset_delta(make_builder) -> None:
    with pytest.raises(ValidationError, match=r"^Delta has to be set"):
        _build(make_builder(), epsilon=8.0, k=9)


@BUILDERS
def test_not_finite_delta(make_builder) -> None:
    with pytest.raises(ValidationError, match=r"^Delta has to be finite"):
        _build(make_builder(), epsilon=1.2, delta=math.nan, k=3)


@BUILDERS
@pytest.mark.parametrize("delta", [6.0, 5.2, 1.0, 0.0, -0.1])
def test_delta_outside_interval(make_builder, delta) -> None:
    with pytest.raises(ValidationError, match=r"^Delta has to be in the interval"):
        _build(make_builder(), epsilon=4.5, delta=delta, k=7)


@BUILDERS
def test_unset_max_partitions_contributed(make_builder) -> None:
    with pytest.raises(
        ValidationError,
        match=r"^Max number of partitions a user can contribute to has to be set",
    ):
        _build(make_builder(), epsilon=0.8, delta=0.9)


@BUILDERS
@pytest.mark.parametrize("k", [-3, 0])
def test_non_positive_max_partitions_contributed(make_builder, k) -> None:
    with pytest.raises(
        ValidationError,
        match=r"^Max number of partitions a user can contribute to has to be positive",
    ):
        _build(make_builder(), epsilon=0.1, delta=0.2, k=k)


@BUILDERS
def test_first_failing_rule_wins(make_builder) -> None:
    # epsilon 与 delta 同时非法时，报告 epsilon 的错误
    with pytest.raises(ValidationError, match=r"^Epsilon has to be positive"):
        _build(make_builder(), epsilon=-1.0, delta=7.0, k=-1)
    with pytest.raises(ValidationError, match=r"^Delta has to be set"):
        _build(make_builder(), epsilon=1.0, k=-1)


@BUILDERS
@pytest.mark.parametrize(
    "epsilon, delta, k, prefix",
    [
        ("1", 0.1, 1, "Epsilon has to be a real number"),
        (True, 0.1, 1, "Epsilon has to be a real number"),
        (1.0, "0.1", 1, "Delta has to be a real number"),
        (1.0, 0.1, 1.5, "Max number of partitions a user can contribute to has to be an integer"),
    ],
)
def test_wrong_types_rejected(make_builder, epsilon, delta, k, prefix) -> None:
    with pytest.raises(ValidationError, match="^" + prefix):
        _build(make_builder(), epsilon=epsilon, delta=delta, k=k)


def test_validation_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        _build(_preagg_builder(), epsilon=4.5, delta=6.0, k=7)


def test_validate_returns_normalised_params() -> None:
    validated = validate_partition_selection_params(
        PartitionSelectionParams(epsilon=np.float32(0.5), delta=0.02, max_partitions_contributed=np.int64(3))
    )
    assert isinstance(validated.epsilon, float)
    assert validated.max_partitions_contributed == 3
    assert type(validated.max_partitions_contributed) is int


@pytest.mark.parametrize("cls", [PreaggPartitionSelection, LaplacePartitionSelection])
def test_direct_construction_validates(cls) -> None:
    with pytest.raises(ValidationError, match=r"^Delta has to be in the interval"):
        cls(1.0, 1.5, 1)


def test_explicit_threshold_must_be_finite() -> None:
    builder = LaplacePartitionSelectionBuilder().set_epsilon(1.0).set_delta(0.1).set_max_partitions_contributed(1)
    with pytest.raises(ValidationError, match=r"^Threshold has to be finite"):
        builder.set_threshold(math.inf).build()

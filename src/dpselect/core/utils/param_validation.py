"""
Reusable validation helpers.
"""
# 说明：参数验证相关的辅助函数，用于在库内部统一进行轻量级参数检查。
# 职责：
# - ParamValidationError：通用参数校验失败的异常类型
# - ensure：基于布尔条件触发参数校验错误的轻量断言工具，可指定抛出的异常类型
# - is_real / is_integer：排除 bool 的数值类型判断，供隐私参数校验复用

from __future__ import annotations

import numbers
from typing import Any, Type


class ParamValidationError(ValueError):
    """Raised when parameter validation fails."""


def ensure(condition: bool, message: str, *, error: Type[Exception] = ParamValidationError) -> None:
    # 条件不满足时抛出指定的异常类型（默认使用 ParamValidationError）
    if not condition:
        raise error(message)


def is_real(value: Any) -> bool:
    # bool 是 int 的子类，这里显式排除
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)

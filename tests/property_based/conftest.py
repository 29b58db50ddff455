"""
Shared Hypothesis configuration for property-based testing across dpselect.
"""
# 说明：属性测试共享的 Hypothesis 配置。
# 职责：
# - 注册并加载 dpselect 配置档：关闭单例耗时截止，抑制较慢用例的健康检查
# - 允许通过 HYPOTHESIS_PROFILE 环境变量切换到更多样本的 ci 配置档

import os

from hypothesis import HealthCheck, settings

settings.register_profile(
    "dpselect",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "ci",
    parent=settings.get_profile("dpselect"),
    max_examples=500,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dpselect"))

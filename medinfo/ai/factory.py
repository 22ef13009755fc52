"""
工厂函数：根据 settings 组装 AI 分析服务。

端点、超时、重试次数和间隔都来自环境变量（见 config/settings.py），
intake 编排层只调用 get_analysis_service()。
"""

from django.conf import settings

from .base import BaseAnalysisService, is_retryable_analysis_error
from .retry import RetryPolicy
from .services import RxValidationService


def get_analysis_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.AI_MAX_ATTEMPTS,
        delay=settings.AI_RETRY_DELAY_SECONDS,
        is_retryable=is_retryable_analysis_error,
    )


def get_analysis_service() -> BaseAnalysisService:
    return RxValidationService(
        url=settings.AI_SERVICE_URL,
        timeout=settings.AI_TIMEOUT_SECONDS,
        retry_policy=get_analysis_retry_policy(),
    )

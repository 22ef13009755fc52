"""
统一异常处理器。

挂到 DRF 的 EXCEPTION_HANDLER setting 上。
所有响应（无论成功还是失败）前端都能用同一套逻辑判断：
  response.type 存在  → 出问题了
  没有 type 字段      → 成功

统一错误响应格式：
{
    "type":    "validation_error" | "not_found" | "upstream_error" | ...,
    "code":    "FILE_TOO_LARGE",
    "message": "file too large (max 10MB)",
    "detail":  { ... }  // 可选
}
"""

from django.http import JsonResponse
from rest_framework import exceptions as drf_exceptions
from rest_framework.views import exception_handler as drf_default_handler

from .exceptions import BaseAppException

# DRF 自带异常 → (type, code)
_DRF_TYPES = (
    (drf_exceptions.ValidationError, 'validation_error', 'VALIDATION_ERROR'),
    (drf_exceptions.ParseError, 'validation_error', 'MALFORMED_REQUEST'),
    (drf_exceptions.NotAuthenticated, 'authentication_error', 'NOT_AUTHENTICATED'),
    (drf_exceptions.AuthenticationFailed, 'authentication_error', 'NOT_AUTHENTICATED'),
    (drf_exceptions.PermissionDenied, 'permission_denied', 'FORBIDDEN'),
    (drf_exceptions.NotFound, 'not_found', 'NOT_FOUND'),
    (drf_exceptions.MethodNotAllowed, 'error', 'METHOD_NOT_ALLOWED'),
    (drf_exceptions.UnsupportedMediaType, 'validation_error', 'UNSUPPORTED_MEDIA_TYPE'),
)


def unified_exception_handler(exc, context):
    """
    DRF exception handler entry point.

    优先级：
    1. BaseAppException 及其子类 → 统一格式
    2. DRF 自带的 APIException（校验、解析、认证、405 ...）→ 转成统一格式
    3. 其他异常 → 交给 DRF 默认处理（最终 500）
    """

    # --- 1. 我们自己的异常体系 ---
    if isinstance(exc, BaseAppException):
        body = {
            'type': exc.type,
            'code': exc.code,
            'message': exc.message,
        }
        if exc.detail is not None:
            body['detail'] = exc.detail
        return JsonResponse(body, status=exc.http_status)

    # --- 2. DRF 自带的异常 ---
    for exc_cls, exc_type, code in _DRF_TYPES:
        if isinstance(exc, exc_cls):
            body = {
                'type': exc_type,
                'code': code,
                'message': _message_for(exc),
            }
            if isinstance(exc, drf_exceptions.ValidationError):
                body['detail'] = exc.detail
            return JsonResponse(body, status=exc.status_code)

    # --- 3. 其他的交给 DRF 默认处理 ---
    return drf_default_handler(exc, context)


def _message_for(exc):
    if isinstance(exc, drf_exceptions.ValidationError):
        return 'Request validation failed'
    return str(exc.detail)

"""
统一异常体系。

所有业务异常继承 BaseAppException，包含：
- type:        错误类型标识（validation_error / not_found / upstream_error / ...）
- code:        业务错误码（FILE_TOO_LARGE / DOCTOR_NOT_FOUND / AI_RETRIES_EXHAUSTED / ...）
- message:     人类可读的描述
- detail:      可选的附加信息（dict / list / None）
- http_status: HTTP 状态码

View / service 层只需 raise，exception_handler 统一捕获并格式化响应。
"""


class BaseAppException(Exception):
    """所有业务异常的基类。"""

    type = 'error'
    code = 'UNKNOWN_ERROR'
    http_status = 500

    def __init__(self, message, code=None, detail=None, http_status=None):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.detail = detail
        super().__init__(message)


class ValidationError(BaseAppException):
    """输入验证失败（缺字段、文件过大、类型不允许等），400。"""

    type = 'validation_error'
    code = 'VALIDATION_ERROR'
    http_status = 400


class AuthenticationError(BaseAppException):
    """缺少 token、token 无效或登录凭据错误，401。"""

    type = 'authentication_error'
    code = 'NOT_AUTHENTICATED'
    http_status = 401


class NotFoundError(BaseAppException):
    type = 'not_found'
    code = 'NOT_FOUND'
    http_status = 404


class BlockError(BaseAppException):
    """业务规则阻止操作（例如 email 已被注册），409。"""

    type = 'block'
    code = 'BUSINESS_BLOCK'
    http_status = 409


class UpstreamError(BaseAppException):
    """
    外部服务（对象存储 / AI 分析）调用失败。

    默认 502；上传失败按 500 报告（构造时覆盖 http_status）。
    """

    type = 'upstream_error'
    code = 'UPSTREAM_ERROR'
    http_status = 502


class PersistenceError(BaseAppException):
    """外部调用都成功后写库失败，500。已写入的行不会回滚。"""

    type = 'persistence_error'
    code = 'PERSISTENCE_ERROR'
    http_status = 500

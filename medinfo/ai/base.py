"""
BaseAnalysisService: 处方图片分析服务的抽象基类，以及分析调用的错误类型。

intake 编排层只依赖 analyze() 的契约，不关心背后是哪个推理端点。
"""

from abc import ABC, abstractmethod

from .types import AIAnalysisResult

RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})


class AnalysisError(Exception):
    """AI 分析调用失败（网络错误、非 200、响应无法解析）。"""


class AnalysisTimeoutError(AnalysisError):
    """单次请求超时。可重试。"""


class AnalysisHTTPError(AnalysisError):
    """远端返回非 200。只有 502 / 503 / 504 可重试。"""

    def __init__(self, status_code: int, body: str = ''):
        self.status_code = status_code
        self.body = body
        super().__init__(f'AI service error: status={status_code} body={body}')


def is_retryable_analysis_error(exc: BaseException) -> bool:
    if isinstance(exc, AnalysisTimeoutError):
        return True
    return isinstance(exc, AnalysisHTTPError) and exc.status_code in RETRYABLE_STATUS_CODES


class BaseAnalysisService(ABC):

    @abstractmethod
    def analyze(self, image_bytes: bytes, symptoms: str, speciality: str) -> AIAnalysisResult:
        """
        分析处方图片。

        Args:
            image_bytes: 原始图片字节
            symptoms:    患者填写的症状
            speciality:  接诊医生的专科，远端当作提示使用，本地不校验

        Returns:
            AIAnalysisResult，每个 finding 的 name 都已填好

        Raises:
            AnalysisError 或 RetriesExhausted
        """

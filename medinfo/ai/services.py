"""
具体的 AI 分析实现。

RxValidationService: POST JSON 到外部推理端点：
  请求: {"file": <base64>, "symptoms": "...", "doctor_speciality": "..."}
  响应: {"tests": {name → finding}, "medicines": {name → finding}}

每次尝试都有整体截止时间（默认 30s，连接加读完响应体）；超时和 502/503/504 按 RetryPolicy 重试，
其他错误（4xx、非超时的网络错误、JSON 解析失败）第一次就终止。
"""

import base64
import json
import logging
import time

import requests

from .base import AnalysisError, AnalysisHTTPError, AnalysisTimeoutError, BaseAnalysisService
from .retry import RetryPolicy
from .types import AIAnalysisResult

logger = logging.getLogger(__name__)


class RxValidationService(BaseAnalysisService):

    def __init__(self, url: str, timeout: float, retry_policy: RetryPolicy, session: requests.Session | None = None):
        self.url = url
        self.timeout = timeout
        self.retry_policy = retry_policy
        self.session = session or requests.Session()

    def analyze(self, image_bytes: bytes, symptoms: str, speciality: str) -> AIAnalysisResult:
        body = json.dumps({
            'file': base64.b64encode(image_bytes).decode('ascii'),
            'symptoms': symptoms,
            'doctor_speciality': speciality,
        })

        result = self.retry_policy.run(lambda: self._attempt(body))
        logger.info(
            "AI analysis returned %d tests, %d medicines",
            len(result.tests), len(result.medicines),
        )
        return result

    def _attempt(self, body: str) -> AIAnalysisResult:
        # timeout 对 requests 只是单次 socket 读的上限，整次尝试的截止时间在这里算
        deadline = time.monotonic() + self.timeout
        try:
            response = self.session.post(
                self.url,
                data=body,
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout,
                stream=True,
            )
            content = self._read_body(response, deadline)
        except requests.Timeout as exc:
            raise AnalysisTimeoutError(f'AI service timed out: {exc}') from exc
        except requests.RequestException as exc:
            raise AnalysisError(f'failed to call AI service: {exc}') from exc

        if response.status_code != 200:
            raise AnalysisHTTPError(response.status_code, content.decode('utf-8', errors='replace'))

        try:
            result = AIAnalysisResult.from_dict(json.loads(content))
        except (ValueError, TypeError) as exc:
            raise AnalysisError(f'failed to decode AI response: {exc}') from exc

        return result.apply_key_names()

    def _read_body(self, response, deadline: float) -> bytes:
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=8192):
                if time.monotonic() > deadline:
                    raise AnalysisTimeoutError(f'AI service response exceeded {self.timeout}s')
                chunks.append(chunk)
        except requests.ConnectionError as exc:
            # 读超时在 iter_content 里会被包成 ConnectionError
            if time.monotonic() > deadline:
                raise AnalysisTimeoutError(f'AI service response exceeded {self.timeout}s') from exc
            raise
        finally:
            response.close()
        return b''.join(chunks)

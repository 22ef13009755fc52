"""
IntakeRequest: 校验通过后的处方提交请求，编排层唯一认识的输入格式。
IntakeResult : 编排完成后的输出（新建处方 + AI 分析结果）。
"""

from dataclasses import dataclass, field

from ..ai.types import AIAnalysisResult
from ..models import Item, Prescription


@dataclass
class IntakeRequest:
    file_bytes: bytes = field(repr=False)
    filename: str
    content_type: str
    symptoms: str
    user_id: int
    doctor_identifier: str   # username 或 email


@dataclass
class IntakeResult:
    prescription: Prescription
    analysis: AIAnalysisResult
    items: list[Item] = field(default_factory=list)

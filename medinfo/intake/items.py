"""
AI 分析结果 → Item 行（未保存）。

tests 里的每个 finding 生成 type="test"，medicines 里的生成 type="med"；
name 用 finding 自带的 name，为空则用 map 的 key；
ai_reasons 是 finding 的 JSON 文本；doc_reason 留空，由医生之后填写。
"""

from ..ai.types import AIAnalysisResult
from ..models import Item, Prescription


def materialize_items(prescription: Prescription, analysis: AIAnalysisResult) -> list[Item]:
    items = []

    for key, finding in analysis.tests.items():
        items.append(Item(
            prescription=prescription,
            name=finding.name or key,
            type=Item.TYPE_TEST,
            ai_reasons=finding.to_json(),
            doc_reason='',
        ))

    for key, finding in analysis.medicines.items():
        items.append(Item(
            prescription=prescription,
            name=finding.name or key,
            type=Item.TYPE_MEDICINE,
            ai_reasons=finding.to_json(),
            doc_reason='',
        ))

    return items

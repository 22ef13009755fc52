"""
AI 分析结果的标准结构。

外部服务返回：
{
  "tests":     { "<name>": { "reason1": ..., "precision1": ..., ... } },
  "medicines": { "<name>": { "description1": ..., "precision1": ..., "price": ... } }
}

服务端经常省略 finding 里的 name 字段，只用 map 的 key 表示名字，
所以 apply_key_names() 会把 key 写回 name。
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any


def _finding_dict(value: Any) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f'finding must be a JSON object, got {type(value).__name__}')
    return value


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise TypeError(f'{key} must be a string, got {type(value).__name__}')
    return value


def _number(data: dict, key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    # "0.9" 和 true 都不算数字
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f'{key} must be a number, got {type(value).__name__}')
    return float(value)


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f'"{key}" must be a JSON object, got {type(value).__name__}')
    return value


@dataclass
class LabTestFinding:
    name: str = ''
    reason1: str = ''
    precision1: float = 0.0
    reason2: str = ''
    precision2: float = 0.0
    reason3: str = ''
    precision3: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> 'LabTestFinding':
        return cls(
            name=_text(data, 'name'),
            reason1=_text(data, 'reason1'),
            precision1=_number(data, 'precision1'),
            reason2=_text(data, 'reason2'),
            precision2=_number(data, 'precision2'),
            reason3=_text(data, 'reason3'),
            precision3=_number(data, 'precision3'),
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        """写入 Item.ai_reasons 的规范文本形式。"""
        return json.dumps(self.to_dict(), separators=(',', ':'))


@dataclass
class MedicineFinding:
    name: str = ''
    description1: str = ''
    precision1: float = 0.0
    description2: str = ''
    precision2: float = 0.0
    description3: str = ''
    precision3: float = 0.0
    price: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> 'MedicineFinding':
        return cls(
            name=_text(data, 'name'),
            description1=_text(data, 'description1'),
            precision1=_number(data, 'precision1'),
            description2=_text(data, 'description2'),
            precision2=_number(data, 'precision2'),
            description3=_text(data, 'description3'),
            precision3=_number(data, 'precision3'),
            price=_number(data, 'price'),
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(',', ':'))


@dataclass
class AIAnalysisResult:
    tests: dict[str, LabTestFinding] = field(default_factory=dict)
    medicines: dict[str, MedicineFinding] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> 'AIAnalysisResult':
        """
        Raises:
            TypeError: 响应结构不对（不是 object，或数值字段不是数字）
        """
        if not isinstance(data, dict):
            raise TypeError(f'expected a JSON object, got {type(data).__name__}')

        tests = _section(data, 'tests')
        medicines = _section(data, 'medicines')

        return cls(
            tests={key: LabTestFinding.from_dict(_finding_dict(value)) for key, value in tests.items()},
            medicines={key: MedicineFinding.from_dict(_finding_dict(value)) for key, value in medicines.items()},
        )

    def apply_key_names(self) -> 'AIAnalysisResult':
        """把每个 finding 的 name 覆盖为它在 map 里的 key。重复调用结果不变。"""
        for key, finding in self.tests.items():
            finding.name = key
        for key, finding in self.medicines.items():
            finding.name = key
        return self

    def to_dict(self) -> dict:
        return {
            'tests': {key: finding.to_dict() for key, finding in self.tests.items()},
            'medicines': {key: finding.to_dict() for key, finding in self.medicines.items()},
        }

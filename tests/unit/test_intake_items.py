"""
Unit tests for materialize_items: AI 结果 → 未保存的 Item 行。
"""
import json

import pytest

from medinfo.ai.types import AIAnalysisResult, LabTestFinding
from medinfo.intake.items import materialize_items
from medinfo.models import Item
from tests.conftest import PrescriptionFactory


@pytest.mark.django_db
class TestMaterializeItems:

    def test_one_row_per_finding(self, ai_result):
        prescription = PrescriptionFactory()

        items = materialize_items(prescription, ai_result)

        assert len(items) == 2
        assert all(item.pk is None for item in items)
        assert all(item.prescription_id == prescription.id for item in items)

    def test_types_and_names(self, ai_result):
        items = materialize_items(PrescriptionFactory(), ai_result)

        assert [(item.name, item.type) for item in items] == [
            ('cbc', Item.TYPE_TEST),
            ('paracetamol', Item.TYPE_MEDICINE),
        ]

    def test_ai_reasons_is_finding_json(self, ai_result):
        test_item, medicine_item = materialize_items(PrescriptionFactory(), ai_result)

        assert json.loads(test_item.ai_reasons) == ai_result.tests['cbc'].to_dict()
        assert json.loads(medicine_item.ai_reasons)['price'] == 2.5

    def test_doc_reason_empty(self, ai_result):
        items = materialize_items(PrescriptionFactory(), ai_result)
        assert {item.doc_reason for item in items} == {''}

    def test_key_used_when_name_blank(self):
        analysis = AIAnalysisResult(tests={'lipid panel': LabTestFinding()})

        (item,) = materialize_items(PrescriptionFactory(), analysis)
        assert item.name == 'lipid panel'

    def test_empty_analysis(self):
        assert materialize_items(PrescriptionFactory(), AIAnalysisResult()) == []

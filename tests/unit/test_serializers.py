"""
Unit tests for response serializers.

camelCase 字段名；密码哈希不能出现在任何输出里。
"""
import json

import pytest

from medinfo.intake import IntakeResult
from medinfo.serializers import (
    serialize_doctor,
    serialize_doctor_login,
    serialize_intake_result,
    serialize_item,
    serialize_prescription,
    serialize_prescription_with_items,
    serialize_user,
    serialize_user_login,
)
from tests.conftest import DoctorFactory, ItemFactory, PrescriptionFactory, UserFactory


@pytest.mark.django_db
class TestAccountSerializers:

    def test_user_has_no_password(self):
        user = UserFactory(name='Bob', phn_number='555')
        data = serialize_user(user)

        assert data['id'] == user.id
        assert data['phnNumber'] == '555'
        assert 'password' not in data
        assert data['createdAt'] is not None

    def test_doctor_fields(self):
        data = serialize_doctor(DoctorFactory(username='dr_house', speciality='diagnostics'))

        assert data['username'] == 'dr_house'
        assert data['speciality'] == 'diagnostics'
        assert data['accuracy'] == 0
        assert 'password' not in data

    def test_login_payloads_carry_token(self):
        assert serialize_user_login(UserFactory(), 'tok')['token'] == 'tok'
        assert serialize_doctor_login(DoctorFactory(), 'tok')['token'] == 'tok'


@pytest.mark.django_db
class TestPrescriptionSerializers:

    def test_prescription_fields(self):
        prescription = PrescriptionFactory(symptoms='cough')
        data = serialize_prescription(prescription)

        assert data == {
            'id': prescription.id,
            'createdAt': prescription.created_at.isoformat(),
            'symptoms': 'cough',
            'link': prescription.link,
            'userId': prescription.user_id,
            'docId': prescription.doctor_id,
            'seenByPatient': False,
        }

    def test_item_fields(self):
        item = ItemFactory(name='cbc', doc_reason='agree')
        data = serialize_item(item)

        assert data['presId'] == item.prescription_id
        assert data['aiReasons'] == '{"name":"cbc"}'
        assert data['docReason'] == 'agree'
        assert data['type'] == 'test'

    def test_with_items(self):
        prescription = PrescriptionFactory()
        ItemFactory(prescription=prescription)

        data = serialize_prescription_with_items(prescription)
        assert len(data['items']) == 1

    def test_intake_result(self, ai_result):
        prescription = PrescriptionFactory()
        data = serialize_intake_result(IntakeResult(prescription=prescription, analysis=ai_result))

        assert data['prescription']['id'] == prescription.id
        assert data['aiAnalysis']['tests']['cbc']['name'] == 'cbc'
        json.dumps(data)

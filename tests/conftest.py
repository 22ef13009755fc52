"""
Shared fixtures for all tests.

factory-boy factories live here so both unit/ and integration/ can import them.
"""
import io
from unittest.mock import MagicMock

import factory
import pytest
from django.contrib.auth.hashers import make_password
from django.test import Client
from PIL import Image

from medinfo.ai.base import BaseAnalysisService
from medinfo.ai.types import AIAnalysisResult
from medinfo.models import Doctor, Item, Prescription, User
from medinfo.storage import SupabaseStorageClient


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    name = 'Alice Wang'
    phn_number = '5550100'
    email = factory.Sequence(lambda n: f'patient{n}@example.com')
    password = factory.LazyFunction(lambda: make_password('secret123'))


class DoctorFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Doctor

    name = 'Dr. Smith'
    phn_number = '5550199'
    speciality = 'general'
    username = factory.Sequence(lambda n: f'dr_{n}')
    email = factory.Sequence(lambda n: f'doctor{n}@example.com')
    password = factory.LazyFunction(lambda: make_password('secret123'))
    accuracy = 0


class PrescriptionFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Prescription

    user = factory.SubFactory(UserFactory)
    doctor = factory.SubFactory(DoctorFactory)
    symptoms = 'fever'
    link = 'https://storage.test/storage/v1/object/public/prescriptions/rx_1.png'


class ItemFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Item

    prescription = factory.SubFactory(PrescriptionFactory)
    name = 'cbc'
    type = Item.TYPE_TEST
    ai_reasons = '{"name":"cbc"}'
    doc_reason = ''


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def image_bytes(fmt='PNG', size=(4, 4)):
    buf = io.BytesIO()
    Image.new('RGB', size, color=(255, 255, 255)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def api_client():
    """Django test client for integration tests."""
    return Client()


@pytest.fixture
def png_bytes():
    return image_bytes('PNG')


@pytest.fixture
def jpeg_bytes():
    return image_bytes('JPEG')


@pytest.fixture
def ai_payload():
    """外部 AI 服务的典型响应：name 字段省略，只靠 key。"""
    return {
        'tests': {
            'cbc': {
                'reason1': 'fever of unknown origin',
                'precision1': 0.91,
                'reason2': 'rule out infection',
                'precision2': 0.72,
                'reason3': '',
                'precision3': 0,
            },
        },
        'medicines': {
            'paracetamol': {
                'description1': 'antipyretic',
                'precision1': 0.88,
                'description2': '',
                'precision2': 0,
                'description3': '',
                'precision3': 0,
                'price': 2.5,
            },
        },
    }


@pytest.fixture
def ai_result(ai_payload):
    return AIAnalysisResult.from_dict(ai_payload).apply_key_names()


@pytest.fixture
def storage_mock():
    storage = MagicMock(spec=SupabaseStorageClient)
    storage.upload.side_effect = lambda bucket, key, data, content_type: (
        f'https://storage.test/storage/v1/object/public/{bucket}/{key}'
    )
    return storage


@pytest.fixture
def analyzer_mock(ai_result):
    analyzer = MagicMock(spec=BaseAnalysisService)
    analyzer.analyze.return_value = ai_result
    return analyzer

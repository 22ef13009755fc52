"""
Unit tests for services.py: users / doctors / prescriptions / items.

需要数据库（pytest-django），不走 HTTP。
"""
import pytest
from django.contrib.auth.hashers import check_password

from medinfo import services
from medinfo.auth import ROLE_DOCTOR, ROLE_USER, verify_token
from medinfo.exceptions import AuthenticationError, BlockError, NotFoundError, ValidationError
from medinfo.models import Item
from tests.conftest import DoctorFactory, ItemFactory, PrescriptionFactory, UserFactory


# ===================================================================
# Users
# ===================================================================

@pytest.mark.django_db
class TestUsers:

    def test_create_user_hashes_password(self):
        user = services.create_user({
            'name': 'Bob', 'email': ' Bob@Example.com ', 'password': 'pw12345', 'phnNumber': '555',
        })

        assert user.email == 'bob@example.com'
        assert user.password != 'pw12345'
        assert check_password('pw12345', user.password)
        assert user.phn_number == '555'

    def test_create_user_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            services.create_user({'name': 'Bob'})

        assert exc_info.value.code == 'MISSING_FIELDS'
        fields = {error['field'] for error in exc_info.value.detail['errors']}
        assert fields == {'email', 'password'}

    def test_duplicate_email_blocked(self):
        UserFactory(email='bob@example.com')

        with pytest.raises(BlockError) as exc_info:
            services.create_user({'email': 'BOB@example.com', 'password': 'x'})
        assert exc_info.value.code == 'EMAIL_TAKEN'

    def test_get_user_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            services.get_user(424242)
        assert exc_info.value.code == 'USER_NOT_FOUND'

    def test_list_users_ordered_by_id(self):
        first, second = UserFactory(), UserFactory()
        assert list(services.list_users()) == [first, second]

    def test_login_returns_user_token(self):
        user = UserFactory(email='bob@example.com')

        logged_in, token = services.login_user('bob@example.com', 'secret123')

        claims = verify_token(token)
        assert logged_in == user
        assert claims.id == user.id
        assert claims.role == ROLE_USER

    @pytest.mark.parametrize('email,password', [
        ('bob@example.com', 'wrong'),
        ('nobody@example.com', 'secret123'),
        (None, None),
    ])
    def test_login_rejected(self, email, password):
        UserFactory(email='bob@example.com')

        with pytest.raises(AuthenticationError) as exc_info:
            services.login_user(email, password)
        assert exc_info.value.code == 'INVALID_CREDENTIALS'


# ===================================================================
# Doctors
# ===================================================================

@pytest.mark.django_db
class TestDoctors:

    def test_create_doctor(self):
        doctor = services.create_doctor({
            'name': 'Dr. House', 'username': 'dr_house', 'email': 'house@example.com',
            'password': 'vicodin', 'speciality': 'diagnostics',
        })

        assert doctor.accuracy == 0
        assert doctor.speciality == 'diagnostics'
        assert check_password('vicodin', doctor.password)

    def test_duplicate_username_blocked(self):
        DoctorFactory(username='dr_house')

        with pytest.raises(BlockError) as exc_info:
            services.create_doctor({'username': 'dr_house', 'email': 'new@example.com', 'password': 'x'})
        assert exc_info.value.code == 'DOCTOR_EXISTS'

    def test_duplicate_email_blocked(self):
        DoctorFactory(email='house@example.com')

        with pytest.raises(BlockError):
            services.create_doctor({'username': 'other', 'email': 'house@example.com', 'password': 'x'})

    def test_find_by_username(self):
        doctor = DoctorFactory(username='dr_house')
        assert services.find_doctor_by_identifier('dr_house') == doctor

    def test_find_by_email_case_insensitive(self):
        doctor = DoctorFactory(email='house@example.com')
        assert services.find_doctor_by_identifier(' House@Example.com ') == doctor

    def test_username_match_wins_over_email(self):
        by_username = DoctorFactory(username='house@example.com', email='a@example.com')
        DoctorFactory(username='other', email='house@example.com')

        assert services.find_doctor_by_identifier('house@example.com') == by_username

    def test_find_unknown(self):
        with pytest.raises(NotFoundError) as exc_info:
            services.find_doctor_by_identifier('ghost')
        assert exc_info.value.code == 'DOCTOR_NOT_FOUND'

    def test_login_doctor(self):
        doctor = DoctorFactory(email='house@example.com')

        _, token = services.login_doctor('house@example.com', 'secret123')
        claims = verify_token(token)
        assert claims.id == doctor.id
        assert claims.role == ROLE_DOCTOR

    def test_get_doctor_not_found(self):
        with pytest.raises(NotFoundError):
            services.get_doctor(424242)


# ===================================================================
# Prescriptions
# ===================================================================

@pytest.mark.django_db
class TestPrescriptions:

    def test_create_prescription_defaults(self):
        user, doctor = UserFactory(), DoctorFactory()

        prescription = services.create_prescription(user, doctor, 'cough', 'https://x/rx.png')

        assert prescription.pk is not None
        assert prescription.seen_by_patient is False
        assert prescription.link == 'https://x/rx.png'

    def test_list_user_prescriptions_newest_first(self):
        user = UserFactory()
        older = PrescriptionFactory(user=user)
        newer = PrescriptionFactory(user=user)
        PrescriptionFactory()  # other user

        assert list(services.list_user_prescriptions(user.id)) == [newer, older]

    def test_with_items_prefetched(self):
        prescription = PrescriptionFactory()
        ItemFactory(prescription=prescription, name='cbc')
        ItemFactory(prescription=prescription, name='ibuprofen', type=Item.TYPE_MEDICINE)

        (loaded,) = services.list_user_prescriptions_with_items(prescription.user_id)
        assert [item.name for item in loaded.items.all()] == ['cbc', 'ibuprofen']

    def test_doctor_prescriptions(self):
        doctor = DoctorFactory()
        mine = PrescriptionFactory(doctor=doctor)
        PrescriptionFactory()

        assert list(services.list_doctor_prescriptions_with_items(doctor.id)) == [mine]

    def test_update_seen_status(self):
        prescription = PrescriptionFactory()

        services.update_seen_status(prescription.id, True)

        prescription.refresh_from_db()
        assert prescription.seen_by_patient is True

    def test_get_prescription_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            services.get_prescription(424242)
        assert exc_info.value.code == 'PRESCRIPTION_NOT_FOUND'


# ===================================================================
# Items
# ===================================================================

@pytest.mark.django_db
class TestItems:

    def test_create_item(self):
        prescription = PrescriptionFactory()

        item = services.create_item({
            'presId': str(prescription.id), 'name': 'cbc', 'type': 'test', 'aiReasons': '{}',
        })

        assert item.prescription == prescription
        assert item.doc_reason == ''

    def test_invalid_type(self):
        prescription = PrescriptionFactory()

        with pytest.raises(ValidationError) as exc_info:
            services.create_item({'presId': prescription.id, 'name': 'cbc', 'type': 'surgery'})
        assert exc_info.value.code == 'INVALID_ITEM_TYPE'

    def test_invalid_prescription_id(self):
        with pytest.raises(ValidationError) as exc_info:
            services.create_item({'presId': 'abc', 'name': 'cbc', 'type': 'test'})
        assert exc_info.value.code == 'INVALID_PRESCRIPTION_ID'

    def test_unknown_prescription(self):
        with pytest.raises(NotFoundError):
            services.create_item({'presId': 424242, 'name': 'cbc', 'type': 'med'})

    def test_bulk_create(self):
        prescription = PrescriptionFactory()
        items = [
            Item(prescription=prescription, name='cbc', type=Item.TYPE_TEST),
            Item(prescription=prescription, name='ibuprofen', type=Item.TYPE_MEDICINE),
        ]

        services.create_items_bulk(items)
        assert Item.objects.filter(prescription=prescription).count() == 2

    def test_bulk_create_empty(self):
        assert services.create_items_bulk([]) == []

    def test_update_doc_reason(self):
        item = ItemFactory()

        services.update_item_doc_reason(item.id, '  confirmed by exam  ')

        item.refresh_from_db()
        assert item.doc_reason == 'confirmed by exam'

    def test_get_item_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            services.get_item(424242)
        assert exc_info.value.code == 'ITEM_NOT_FOUND'

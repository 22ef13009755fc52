"""
Service 层：users / doctors / prescriptions / items 的读写。

View 和 intake 编排层只调这里的函数；找不到记录抛 NotFoundError，
唯一约束冲突抛 BlockError，交给 exception_handler 统一返回。
"""

import logging

from django.contrib.auth.hashers import check_password, make_password
from django.db.models import Prefetch, Q

from .auth import ROLE_DOCTOR, ROLE_USER, issue_token
from .exceptions import AuthenticationError, BlockError, NotFoundError, ValidationError
from .models import Doctor, Item, Prescription, User

logger = logging.getLogger(__name__)


def _clean(data, key):
    value = data.get(key)
    return '' if value is None else str(value).strip()


def _require(data, fields):
    errors = [
        {'field': name, 'message': f'{name} is required.'}
        for name in fields
        if not _clean(data, name)
    ]
    if errors:
        raise ValidationError(
            message='Request validation failed.',
            code='MISSING_FIELDS',
            detail={'errors': errors},
        )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def create_user(data):
    """注册患者。email 唯一，密码哈希后保存。"""
    _require(data, ['email', 'password'])
    email = _clean(data, 'email').lower()

    if User.objects.filter(email__iexact=email).exists():
        raise BlockError(
            message=f"Email {email} is already registered.",
            code='EMAIL_TAKEN',
            detail={'email': email},
        )

    user = User.objects.create(
        name=_clean(data, 'name'),
        phn_number=_clean(data, 'phnNumber'),
        email=email,
        password=make_password(data['password']),
    )
    logger.info("created user id=%s", user.id)
    return user


def get_user(user_id):
    try:
        return User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise NotFoundError(
            message='User not found',
            code='USER_NOT_FOUND',
            detail={'userId': user_id},
        )


def list_users():
    return User.objects.order_by('id')


def login_user(email, password):
    """返回 (user, token)。email 或密码不对统一报 INVALID_CREDENTIALS。"""
    user = User.objects.filter(email__iexact=(email or '').strip()).first()
    if user is None or not check_password(password or '', user.password):
        raise AuthenticationError('invalid email or password', code='INVALID_CREDENTIALS')
    return user, issue_token(user.id, user.email, ROLE_USER)


# ---------------------------------------------------------------------------
# Doctors
# ---------------------------------------------------------------------------

def create_doctor(data):
    """注册医生。email 和 username 都唯一，accuracy 初始为 0。"""
    _require(data, ['username', 'email', 'password'])
    email = _clean(data, 'email').lower()
    username = _clean(data, 'username')

    conflicts = Doctor.objects.filter(Q(email__iexact=email) | Q(username__iexact=username))
    if conflicts.exists():
        raise BlockError(
            message='A doctor with this email or username already exists.',
            code='DOCTOR_EXISTS',
            detail={'email': email, 'username': username},
        )

    doctor = Doctor.objects.create(
        name=_clean(data, 'name'),
        phn_number=_clean(data, 'phnNumber'),
        speciality=_clean(data, 'speciality'),
        username=username,
        email=email,
        password=make_password(data['password']),
    )
    logger.info("created doctor id=%s username=%s", doctor.id, doctor.username)
    return doctor


def get_doctor(doctor_id):
    try:
        return Doctor.objects.get(id=doctor_id)
    except Doctor.DoesNotExist:
        raise NotFoundError(
            message='Doctor not found',
            code='DOCTOR_NOT_FOUND',
            detail={'doctorId': doctor_id},
        )


def list_doctors():
    return Doctor.objects.order_by('id')


def find_doctor_by_identifier(identifier):
    """先按 username 精确匹配，再按 email（不区分大小写）。"""
    identifier = (identifier or '').strip()
    doctor = (
        Doctor.objects.filter(username=identifier).first()
        or Doctor.objects.filter(email__iexact=identifier).first()
    )
    if doctor is None:
        raise NotFoundError(
            message='doctor not found',
            code='DOCTOR_NOT_FOUND',
            detail={'doctorUsername': identifier},
        )
    return doctor


def login_doctor(email, password):
    doctor = Doctor.objects.filter(email__iexact=(email or '').strip()).first()
    if doctor is None or not check_password(password or '', doctor.password):
        raise AuthenticationError('invalid email or password', code='INVALID_CREDENTIALS')
    return doctor, issue_token(doctor.id, doctor.email, ROLE_DOCTOR)


# ---------------------------------------------------------------------------
# Prescriptions
# ---------------------------------------------------------------------------

def create_prescription(user, doctor, symptoms, link):
    """写入一行处方，seen_by_patient 默认 False。autocommit 下立即提交。"""
    return Prescription.objects.create(
        user=user,
        doctor=doctor,
        symptoms=symptoms,
        link=link,
    )


def get_prescription(prescription_id):
    try:
        return Prescription.objects.get(id=prescription_id)
    except Prescription.DoesNotExist:
        raise NotFoundError(
            message='Prescription not found',
            code='PRESCRIPTION_NOT_FOUND',
            detail={'prescriptionId': prescription_id},
        )


def list_user_prescriptions(user_id):
    return Prescription.objects.filter(user_id=user_id).order_by('-created_at', '-id')


def _with_items(queryset):
    return queryset.prefetch_related(
        Prefetch('items', queryset=Item.objects.order_by('id'))
    )


def list_user_prescriptions_with_items(user_id):
    return _with_items(list_user_prescriptions(user_id))


def list_doctor_prescriptions_with_items(doctor_id):
    return _with_items(
        Prescription.objects.filter(doctor_id=doctor_id).order_by('-created_at', '-id')
    )


def update_seen_status(prescription_id, seen):
    prescription = get_prescription(prescription_id)
    prescription.seen_by_patient = seen
    prescription.save(update_fields=['seen_by_patient'])
    return prescription


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

ITEM_TYPES = {Item.TYPE_TEST, Item.TYPE_MEDICINE}


def create_item(data):
    _require(data, ['presId', 'name', 'type'])

    item_type = _clean(data, 'type')
    if item_type not in ITEM_TYPES:
        raise ValidationError(
            message=f"type must be one of {sorted(ITEM_TYPES)}.",
            code='INVALID_ITEM_TYPE',
            detail={'type': item_type},
        )

    try:
        prescription_id = int(data['presId'])
    except (TypeError, ValueError):
        raise ValidationError(message='Invalid Prescription ID', code='INVALID_PRESCRIPTION_ID')

    return Item.objects.create(
        prescription=get_prescription(prescription_id),
        name=_clean(data, 'name'),
        type=item_type,
        ai_reasons=data.get('aiReasons') or '',
        doc_reason=_clean(data, 'docReason'),
    )


def create_items_bulk(items):
    """一次 INSERT 写入多条 Item（都属于同一个 prescription）。空列表直接返回。"""
    if not items:
        return []
    return Item.objects.bulk_create(items)


def get_item(item_id):
    try:
        return Item.objects.get(id=item_id)
    except Item.DoesNotExist:
        raise NotFoundError(
            message='item not found',
            code='ITEM_NOT_FOUND',
            detail={'itemId': item_id},
        )


def list_prescription_items(prescription_id):
    return Item.objects.filter(prescription_id=prescription_id).order_by('id')


def update_item_doc_reason(item_id, doc_reason):
    item = get_item(item_id)
    item.doc_reason = (doc_reason or '').strip()
    item.save(update_fields=['doc_reason'])
    return item

"""
Response serializers: ORM 对象 → JSON-able dict。

只负责「输出格式化」，不做任何解析或校验。字段名用 camelCase，
密码哈希永远不输出。
"""


def _iso(value):
    return value.isoformat() if value else None


def serialize_user(user):
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'phnNumber': user.phn_number,
        'createdAt': _iso(user.created_at),
    }


def serialize_doctor(doctor):
    return {
        'id': doctor.id,
        'name': doctor.name,
        'email': doctor.email,
        'username': doctor.username,
        'speciality': doctor.speciality,
        'accuracy': doctor.accuracy,
        'phnNumber': doctor.phn_number,
        'createdAt': _iso(doctor.created_at),
    }


def serialize_user_login(user, token):
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'phnNumber': user.phn_number,
        'token': token,
    }


def serialize_doctor_login(doctor, token):
    return {
        'id': doctor.id,
        'name': doctor.name,
        'email': doctor.email,
        'username': doctor.username,
        'speciality': doctor.speciality,
        'accuracy': doctor.accuracy,
        'token': token,
    }


def serialize_prescription(prescription):
    return {
        'id': prescription.id,
        'createdAt': _iso(prescription.created_at),
        'symptoms': prescription.symptoms,
        'link': prescription.link,
        'userId': prescription.user_id,
        'docId': prescription.doctor_id,
        'seenByPatient': prescription.seen_by_patient,
    }


def serialize_item(item):
    return {
        'id': item.id,
        'createdAt': _iso(item.created_at),
        'name': item.name,
        'type': item.type,
        'aiReasons': item.ai_reasons,
        'docReason': item.doc_reason,
        'presId': item.prescription_id,
    }


def serialize_prescription_with_items(prescription):
    response = serialize_prescription(prescription)
    response['items'] = [serialize_item(item) for item in prescription.items.all()]
    return response


def serialize_intake_result(result):
    """201 响应：新处方 + 完整 AI 分析，前端不用再查一次。"""
    return {
        'prescription': serialize_prescription(result.prescription),
        'aiAnalysis': result.analysis.to_dict(),
    }

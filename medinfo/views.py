"""
HTTP 层：只做参数提取 → 调 service / intake → 序列化。

业务异常直接 raise，由 exception_handler 统一格式化。
"""

from rest_framework import status
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .auth import ROLE_DOCTOR, ROLE_USER, BearerTokenAuthentication, IsDoctor, IsPatientUser, claims_from_request
from .exceptions import AuthenticationError, NotFoundError, ValidationError
from .intake import parse_intake_request, submit_prescription
from .serializers import (
    serialize_doctor,
    serialize_doctor_login,
    serialize_intake_result,
    serialize_item,
    serialize_prescription,
    serialize_prescription_with_items,
    serialize_user,
    serialize_user_login,
)


def _int_param(value, label):
    if value in (None, ''):
        raise ValidationError(message=f'{label} is required', code='MISSING_FIELDS')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(message=f'Invalid {label}', code='INVALID_ID', detail={'value': value})


class HealthView(APIView):
    def get(self, request):
        return Response({'status': 'ok', 'message': 'Server is running'})


class AuthCheckView(APIView):
    """GET /api/auth/check: 前端据此判断 token 是否有效、跳转到哪个首页。"""

    def get(self, request):
        try:
            claims = claims_from_request(request)
        except AuthenticationError:
            return Response(
                {'authenticated': False, 'message': 'No valid token. Please login/register.'},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        try:
            if claims.role == ROLE_USER:
                profile = serialize_user(services.get_user(claims.id))
            elif claims.role == ROLE_DOCTOR:
                profile = serialize_doctor(services.get_doctor(claims.id))
            else:
                return Response(
                    {'authenticated': False, 'message': 'Invalid role'},
                    status=status.HTTP_401_UNAUTHORIZED,
                )
        except NotFoundError:
            return Response(
                {'authenticated': False, 'message': f'{claims.role.capitalize()} not found'},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        return Response({'authenticated': True, 'role': claims.role, **profile})


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserListView(APIView):
    def get(self, request):
        return Response([serialize_user(user) for user in services.list_users()])


class UserCreateView(APIView):
    def post(self, request):
        user = services.create_user(request.data)
        return Response(serialize_user(user), status=status.HTTP_201_CREATED)


class UserLoginView(APIView):
    def post(self, request):
        user, token = services.login_user(request.data.get('email'), request.data.get('password'))
        return Response(serialize_user_login(user, token))


class UserProfileView(APIView):
    authentication_classes = [BearerTokenAuthentication]
    permission_classes = [IsAuthenticated, IsPatientUser]

    def get(self, request):
        return Response(serialize_user(services.get_user(request.user.id)))


# ---------------------------------------------------------------------------
# Doctors
# ---------------------------------------------------------------------------

class DoctorListView(APIView):
    def get(self, request):
        return Response([serialize_doctor(doctor) for doctor in services.list_doctors()])


class DoctorCreateView(APIView):
    def post(self, request):
        doctor = services.create_doctor(request.data)
        return Response(serialize_doctor(doctor), status=status.HTTP_201_CREATED)


class DoctorDetailView(APIView):
    def get(self, request, doctor_id):
        return Response(serialize_doctor(services.get_doctor(doctor_id)))


class DoctorLoginView(APIView):
    def post(self, request):
        doctor, token = services.login_doctor(request.data.get('email'), request.data.get('password'))
        return Response(serialize_doctor_login(doctor, token))


class DoctorProfileView(APIView):
    authentication_classes = [BearerTokenAuthentication]
    permission_classes = [IsAuthenticated, IsDoctor]

    def get(self, request):
        return Response(serialize_doctor(services.get_doctor(request.user.id)))


class DoctorPrescriptionsWithItemsView(APIView):
    """GET /api/doctors/prescriptions-with-items: 当前医生名下的处方（含 items）。"""

    authentication_classes = [BearerTokenAuthentication]
    permission_classes = [IsAuthenticated, IsDoctor]

    def get(self, request):
        prescriptions = services.list_doctor_prescriptions_with_items(request.user.id)
        return Response([serialize_prescription_with_items(p) for p in prescriptions])


# ---------------------------------------------------------------------------
# Prescriptions
# ---------------------------------------------------------------------------

class PrescriptionCreateView(APIView):
    """
    POST /api/prescriptions/create  (multipart)

    fields: file, symptoms, userId, doctorUsername
    201 → {"prescription": {...}, "aiAnalysis": {"tests": {...}, "medicines": {...}}}
    """

    parser_classes = [MultiPartParser]

    def post(self, request):
        intake_request = parse_intake_request(request)
        result = submit_prescription(intake_request)
        return Response(serialize_intake_result(result), status=status.HTTP_201_CREATED)


class UserPrescriptionListView(APIView):
    def get(self, request):
        user_id = _int_param(request.query_params.get('userId'), 'User ID')
        prescriptions = services.list_user_prescriptions(user_id)
        return Response([serialize_prescription(p) for p in prescriptions])


class UserPrescriptionsWithItemsView(APIView):
    def get(self, request):
        user_id = _int_param(request.query_params.get('userId'), 'User ID')
        prescriptions = services.list_user_prescriptions_with_items(user_id)
        return Response([serialize_prescription_with_items(p) for p in prescriptions])


class PrescriptionDetailView(APIView):
    def get(self, request, prescription_id):
        return Response(serialize_prescription(services.get_prescription(prescription_id)))


class PrescriptionSeenView(APIView):
    """PUT /api/prescriptions/<id>/seen  body: {"seenByPatient": true}"""

    def put(self, request, prescription_id):
        seen = request.data.get('seenByPatient')
        if not isinstance(seen, bool):
            raise ValidationError(message='seenByPatient must be a boolean', code='INVALID_SEEN_STATUS')
        prescription = services.update_seen_status(prescription_id, seen)
        return Response(serialize_prescription(prescription))


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

class PrescriptionItemListView(APIView):
    def get(self, request):
        prescription_id = _int_param(request.query_params.get('presId'), 'Prescription ID')
        return Response([serialize_item(item) for item in services.list_prescription_items(prescription_id)])


class ItemCreateView(APIView):
    def post(self, request):
        item = services.create_item(request.data)
        return Response(serialize_item(item), status=status.HTTP_201_CREATED)


class ItemDetailView(APIView):
    def get(self, request, item_id):
        return Response(serialize_item(services.get_item(item_id)))


class ItemDocReasonView(APIView):
    """PUT /api/items/<id>/doc-reason  body: {"docReason": "..."}"""

    def put(self, request, item_id):
        doc_reason = request.data.get('docReason')
        if doc_reason is not None and not isinstance(doc_reason, str):
            raise ValidationError(message='Invalid request body', code='VALIDATION_ERROR')
        item = services.update_item_doc_reason(item_id, doc_reason)
        return Response(serialize_item(item))

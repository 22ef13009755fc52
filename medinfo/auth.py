"""
JWT 签发 / 校验，以及给 DRF 用的 Bearer 认证和角色权限。

token 由 rest_framework_simplejwt 的 AccessToken 签发，带自定义 claims：
  id   : users.id 或 doctors.id
  email
  role : "user" | "doctor"
签名密钥和有效期来自 settings.SIMPLE_JWT（JWT_SECRET / JWT_LIFETIME_HOURS）。
"""

from dataclasses import dataclass

from rest_framework import exceptions as drf_exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.permissions import BasePermission
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from .exceptions import AuthenticationError

ROLE_USER = 'user'
ROLE_DOCTOR = 'doctor'


@dataclass(frozen=True)
class TokenClaims:
    id: int
    email: str
    role: str

    # DRF 的 IsAuthenticated / permission_denied 会看这个属性
    @property
    def is_authenticated(self):
        return True


def issue_token(subject_id, email, role):
    token = AccessToken()
    token['id'] = subject_id
    token['email'] = email
    token['role'] = role
    return str(token)


def verify_token(raw_token):
    """
    Raises:
        AuthenticationError: 签名不对、过期、或 claims 不完整
    """
    try:
        token = AccessToken(raw_token)
    except TokenError as exc:
        raise AuthenticationError('Invalid or expired token', code='INVALID_TOKEN') from exc

    try:
        return TokenClaims(id=int(token['id']), email=token['email'], role=token['role'])
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError('Invalid or expired token', code='INVALID_TOKEN') from exc


def extract_bearer_token(request):
    """从 Authorization: Bearer <token> 中取出 token。"""
    header = request.META.get('HTTP_AUTHORIZATION', '')
    if not header:
        raise AuthenticationError('Missing authorization header', code='MISSING_TOKEN')

    parts = header.split(' ')
    if len(parts) != 2 or parts[0] != 'Bearer':
        raise AuthenticationError('Invalid authorization header format', code='INVALID_TOKEN')
    return parts[1]


def claims_from_request(request):
    return verify_token(extract_bearer_token(request))


class BearerTokenAuthentication(BaseAuthentication):
    """request.user 是 TokenClaims，request.auth 是原始 token。"""

    def authenticate(self, request):
        if not request.META.get('HTTP_AUTHORIZATION'):
            return None
        try:
            raw_token = extract_bearer_token(request)
            claims = verify_token(raw_token)
        except AuthenticationError as exc:
            raise drf_exceptions.AuthenticationFailed(exc.message) from exc
        return claims, raw_token

    def authenticate_header(self, request):
        return 'Bearer'


class _RolePermission(BasePermission):
    role = ''

    def has_permission(self, request, view):
        claims = request.user
        if claims is None or not getattr(claims, 'is_authenticated', False):
            return False
        return claims.role == self.role


class IsPatientUser(_RolePermission):
    role = ROLE_USER
    message = 'Forbidden'


class IsDoctor(_RolePermission):
    role = ROLE_DOCTOR
    message = 'Forbidden'

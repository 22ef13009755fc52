"""
处方上传请求的校验，全部在任何 I/O 之前完成：

  1. 请求体大小上限（解析 multipart 之前看 Content-Length）
  2. 必须有文件；文件大小上限（多读 1 字节判断超限）
  3. Content-Type：优先用声明的，没有就按字节嗅探；必须在白名单里
  4. 扩展名（不区分大小写）必须在白名单里
  5. userId（整数）和 doctorUsername 必填

任何一步失败都抛 ValidationError（400）。
"""

import io

from django.conf import settings
from PIL import Image, UnidentifiedImageError

from ..exceptions import ValidationError
from ..storage import split_extension
from .types import IntakeRequest

ALLOWED_CONTENT_TYPES = frozenset({
    'image/png',
    'image/jpeg',
    'image/jpg',
    'image/gif',
    'image/webp',
    'image/bmp',
    'image/svg+xml',
})

ALLOWED_EXTENSIONS = frozenset({'.png', '.jpg', '.jpeg', '.gif', '.webp', '.bmp', '.svg'})

FALLBACK_CONTENT_TYPE = 'application/octet-stream'


def _megabytes(size):
    return size // (1 << 20)


def check_request_size(content_length, max_request_size=None):
    max_request_size = max_request_size or settings.INTAKE_MAX_REQUEST_SIZE
    try:
        length = int(content_length or 0)
    except (TypeError, ValueError):
        raise ValidationError(message='invalid Content-Length header', code='MALFORMED_REQUEST')

    if length > max_request_size:
        raise ValidationError(
            message=f'request too large (max {_megabytes(max_request_size)}MB)',
            code='REQUEST_TOO_LARGE',
            detail={'maxBytes': max_request_size},
        )


def read_upload(uploaded_file, max_file_size=None):
    """读出文件内容，最多读 max+1 字节，超过上限直接拒绝。"""
    max_file_size = max_file_size or settings.INTAKE_MAX_FILE_SIZE
    if uploaded_file is None:
        raise ValidationError(message='file is required', code='FILE_REQUIRED')

    data = uploaded_file.read(max_file_size + 1)
    if len(data) > max_file_size:
        raise ValidationError(
            message=f'file too large (max {_megabytes(max_file_size)}MB)',
            code='FILE_TOO_LARGE',
            detail={'maxBytes': max_file_size},
        )
    return data


def sniff_content_type(data):
    """按文件头识别图片格式，识别不了返回 application/octet-stream。"""
    try:
        with Image.open(io.BytesIO(data)) as image:
            return Image.MIME.get(image.format, FALLBACK_CONTENT_TYPE)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        return FALLBACK_CONTENT_TYPE


def resolve_content_type(declared, data):
    content_type = (declared or '').split(';')[0].strip().lower()
    if not content_type:
        content_type = sniff_content_type(data)

    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(
            message='only image uploads are allowed',
            code='UNSUPPORTED_MEDIA_TYPE',
            detail={'contentType': content_type, 'allowed': sorted(ALLOWED_CONTENT_TYPES)},
        )
    return content_type


def validate_extension(filename):
    _, ext = split_extension(filename or '')
    if ext.lower() not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            message='unsupported file extension',
            code='UNSUPPORTED_EXTENSION',
            detail={'extension': ext, 'allowed': sorted(ALLOWED_EXTENSIONS)},
        )


def parse_user_id(raw):
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError(message='invalid userId', code='INVALID_USER_ID', detail={'userId': raw})


def parse_intake_request(request):
    """
    DRF Request → IntakeRequest。

    Content-Length 检查放在访问 request.data 之前，超限的请求不会被解析。
    """
    check_request_size(request.META.get('CONTENT_LENGTH'))

    uploaded_file = request.FILES.get('file')
    file_bytes = read_upload(uploaded_file)
    content_type = resolve_content_type(uploaded_file.content_type, file_bytes)
    validate_extension(uploaded_file.name)

    data = request.data
    symptoms = data.get('symptoms') or ''
    user_id_raw = (data.get('userId') or '').strip()
    doctor_identifier = (data.get('doctorUsername') or '').strip()

    if not user_id_raw or not doctor_identifier:
        raise ValidationError(
            message='userId and doctorUsername are required',
            code='MISSING_FIELDS',
        )

    return IntakeRequest(
        file_bytes=file_bytes,
        filename=uploaded_file.name,
        content_type=content_type,
        symptoms=symptoms,
        user_id=parse_user_id(user_id_raw),
        doctor_identifier=doctor_identifier,
    )

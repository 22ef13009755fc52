"""
Supabase Storage 上传客户端。

PUT {base_url}/storage/v1/object/{bucket}/{key}  （Bearer service-role key）
成功后直接拼出公开地址 {base_url}/storage/v1/object/public/{bucket}/{key}，
不再发第二次请求确认。本层不重试。
"""

import logging
import time
from urllib.parse import quote

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

SUCCESS_STATUS_CODES = frozenset({200, 201, 204})


class StorageUploadError(Exception):
    """上传失败：配置缺失、网络错误或非 2xx 响应。"""


def split_extension(filename: str) -> tuple[str, str]:
    """'scan.final.PNG' → ('scan.final', '.PNG')；没有扩展名时 ext 为空串。"""
    base = filename.replace('\\', '/').rsplit('/', 1)[-1]
    idx = base.rfind('.')
    if idx == -1:
        return base, ''
    return base[:idx], base[idx:]


def build_object_key(filename: str, suffix: int | None = None) -> str:
    """去掉扩展名，追加纳秒时间戳，再把扩展名接回去：rx.png → rx_1700000000000000000.png"""
    stem, ext = split_extension(filename)
    if suffix is None:
        suffix = time.time_ns()
    return f'{stem}_{suffix}{ext}'


class SupabaseStorageClient:

    def __init__(self, base_url: str, service_key: str, session: requests.Session | None = None):
        self.base_url = (base_url or '').rstrip('/')
        self.service_key = service_key or ''
        self.session = session or requests.Session()

    def _object_path(self, bucket: str, object_key: str) -> str:
        return f'{quote(bucket, safe="")}/{quote(object_key, safe="/")}'

    def public_url(self, bucket: str, object_key: str) -> str:
        return f'{self.base_url}/storage/v1/object/public/{self._object_path(bucket, object_key)}'

    def _check_config(self) -> None:
        if not self.base_url or not self.service_key:
            raise StorageUploadError('SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY not set')
        # Storage 的 Authorization 需要 JWT；sb_publishable_* 不是 JWT
        if self.service_key.startswith('sb_publishable_'):
            raise StorageUploadError(
                'invalid Supabase key for server upload: use SUPABASE_SERVICE_ROLE_KEY (JWT), not publishable key'
            )

    def upload(self, bucket: str, object_key: str, data: bytes, content_type: str) -> str:
        """
        上传字节，返回公开 URL。

        Raises:
            StorageUploadError
        """
        self._check_config()

        url = f'{self.base_url}/storage/v1/object/{self._object_path(bucket, object_key)}'
        headers = {
            'Authorization': f'Bearer {self.service_key}',
            'apikey': self.service_key,
            'Cache-Control': 'no-cache',
        }
        if content_type:
            headers['Content-Type'] = content_type

        try:
            response = self.session.put(url, data=data, headers=headers)
        except requests.RequestException as exc:
            raise StorageUploadError(f'upload request failed: {exc}') from exc

        if response.status_code not in SUCCESS_STATUS_CODES:
            logger.warning("storage upload of %s/%s failed: status=%d", bucket, object_key, response.status_code)
            raise StorageUploadError(f'upload failed: status={response.status_code} body={response.text}')

        logger.info("uploaded %d bytes to %s/%s", len(data), bucket, object_key)
        return self.public_url(bucket, object_key)


def get_storage_client() -> SupabaseStorageClient:
    return SupabaseStorageClient(
        base_url=settings.SUPABASE_URL,
        service_key=settings.SUPABASE_SERVICE_ROLE_KEY,
    )

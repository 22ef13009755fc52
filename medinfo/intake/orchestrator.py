"""
处方 intake 编排。

    submit(IntakeRequest)
      → 解析医生 / 患者（找不到 → 404，不发起任何上传）
      → 并发：上传图片到对象存储 ‖ 调 AI 分析
      → 等两边都结束（barrier，不是 race；一边失败不会取消另一边）
      → 上传失败：报上传错误，丢弃 AI 结果
      → AI 失败：报 AI 错误（已上传的对象留在存储里，不做补偿删除）
      → 都成功：先写 prescription，再一次性批量写 items

prescription 写入后 items 批量写失败时不回滚 prescription，
返回 500 并在 detail 里带上 prescriptionId。
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait

from django.conf import settings
from django.db import DatabaseError

from .. import services
from ..ai import BaseAnalysisService, RetriesExhausted, get_analysis_service
from ..ai.base import AnalysisError
from ..exceptions import PersistenceError, UpstreamError
from ..storage import StorageUploadError, SupabaseStorageClient, build_object_key, get_storage_client
from .items import materialize_items
from .types import IntakeRequest, IntakeResult

logger = logging.getLogger(__name__)


class PrescriptionIntake:

    def __init__(
        self,
        storage: SupabaseStorageClient | None = None,
        analyzer: BaseAnalysisService | None = None,
        bucket: str | None = None,
    ):
        self.storage = storage or get_storage_client()
        self.analyzer = analyzer or get_analysis_service()
        self.bucket = bucket or settings.SUPABASE_STORAGE_BUCKET

    def submit(self, request: IntakeRequest) -> IntakeResult:
        doctor = services.find_doctor_by_identifier(request.doctor_identifier)
        user = services.get_user(request.user_id)

        object_key = build_object_key(request.filename)
        logger.info(
            "intake started: user=%s doctor=%s object=%s size=%d",
            user.id, doctor.id, object_key, len(request.file_bytes),
        )

        upload_future, analysis_future = self._upload_and_analyze(request, object_key, doctor.speciality)
        public_url = self._upload_outcome(upload_future)
        analysis = self._analysis_outcome(analysis_future, object_key)

        prescription, items = self._persist(user, doctor, request.symptoms, public_url, analysis)
        logger.info("intake finished: prescription=%s items=%d", prescription.id, len(items))
        return IntakeResult(prescription=prescription, analysis=analysis, items=items)

    def _upload_and_analyze(self, request, object_key, speciality):
        """两个子任务各写各的 future；wait() 返回后才读取结果。"""
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix='intake') as pool:
            upload_future = pool.submit(
                self.storage.upload,
                self.bucket, object_key, request.file_bytes, request.content_type,
            )
            analysis_future = pool.submit(
                self.analyzer.analyze,
                request.file_bytes, request.symptoms, speciality,
            )
            wait([upload_future, analysis_future])
        return upload_future, analysis_future

    def _upload_outcome(self, future):
        exc = future.exception()
        if exc is None:
            return future.result()
        if isinstance(exc, StorageUploadError):
            logger.error("upload failed, discarding analysis result: %s", exc)
            raise UpstreamError(
                message=f'failed to upload file: {exc}',
                code='UPLOAD_FAILED',
                http_status=500,
            ) from exc
        raise exc

    def _analysis_outcome(self, future, object_key):
        exc = future.exception()
        if exc is None:
            return future.result()

        # 已上传的对象没有数据库行引用它
        logger.warning("analysis failed, uploaded object %s left orphaned", object_key)

        if isinstance(exc, RetriesExhausted):
            raise UpstreamError(
                message=f'failed to analyze prescription after {exc.attempts} attempts: {exc.last_error}',
                code='AI_RETRIES_EXHAUSTED',
                detail={'attempts': exc.attempts},
            ) from exc
        if isinstance(exc, AnalysisError):
            raise UpstreamError(
                message=f'failed to analyze prescription: {exc}',
                code='AI_SERVICE_ERROR',
            ) from exc
        raise exc

    def _persist(self, user, doctor, symptoms, public_url, analysis):
        try:
            prescription = services.create_prescription(user, doctor, symptoms, public_url)
        except DatabaseError as exc:
            logger.error("failed to store prescription: %s", exc)
            raise PersistenceError(
                message=f'failed to store prescription: {exc}',
                code='PRESCRIPTION_PERSISTENCE_FAILED',
            ) from exc

        items = materialize_items(prescription, analysis)
        try:
            services.create_items_bulk(items)
        except DatabaseError as exc:
            logger.error("prescription %s stored without items: %s", prescription.id, exc)
            raise PersistenceError(
                message=f'failed to store AI items: {exc}',
                code='ITEM_PERSISTENCE_FAILED',
                detail={'prescriptionId': prescription.id},
            ) from exc

        return prescription, items


def submit_prescription(request: IntakeRequest, **collaborators) -> IntakeResult:
    return PrescriptionIntake(**collaborators).submit(request)

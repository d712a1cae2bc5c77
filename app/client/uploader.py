# app/client/uploader.py
"""
여러 장 업로드 오케스트레이션

1. 검증 (파일 0장 / 이름 공백이면 네트워크 호출 없이 거절)
2. 전체 압축 (하나라도 실패하면 업로드 시작 전에 중단)
3. 동시 업로드 4개 제한
4. 첫 번째 에러 전달 (이미 성공한 사진은 롤백하지 않음)
"""
import asyncio
import os
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from app.client.api_client import ApiError, GalleryApiClient
from app.client.pool import bounded_map
from app.core.logger import logger
from app.services.transcoder import (
    JPEG_CONTENT_TYPE,
    PillowTranscoder,
    TranscodeConstraints,
    TranscodeError,
    Transcoder,
)

# 동시 업로드 개수
MAX_CONCURRENT_UPLOADS = 4
# 동시 압축 개수 (메모리 부담)
MAX_CONCURRENT_COMPRESSIONS = 3


class BatchError(Exception):
    """배치 업로드 실패"""

class BatchValidationError(BatchError):
    """업로드 전 입력 검증 실패"""

class BatchCompressionError(BatchError):
    """압축 실패 - 업로드 시작 안 함"""

class UploadFailedError(BatchError):
    """업로드 중 실패 - 성공한 사진은 그대로 남음"""

    def __init__(self, message: str, index: int, succeeded: list[int]):
        super().__init__(message)
        self.index = index
        self.succeeded = succeeded


@dataclass(frozen=True)
class SelectedFile:
    """사용자가 선택한 파일"""
    filename: str
    data: bytes
    content_type: str = "application/octet-stream"


ProgressCallback = Callable[[int, int], None]


def _jpeg_name(filename: str) -> str:
    stem = os.path.splitext(os.path.basename(filename))[0] or "photo"
    return f"{stem}.jpg"


class UploadOrchestrator:
    def __init__(
        self,
        client: GalleryApiClient,
        transcoder: Optional[Transcoder] = None,
        constraints: Optional[TranscodeConstraints] = None,
        max_concurrent: int = MAX_CONCURRENT_UPLOADS,
        max_concurrent_compressions: int = MAX_CONCURRENT_COMPRESSIONS
    ):
        self.client = client
        self.transcoder = transcoder or PillowTranscoder()
        self.constraints = constraints or TranscodeConstraints()
        self.max_concurrent = max_concurrent
        self.max_concurrent_compressions = max_concurrent_compressions
        self.progress: dict[int, int] = {}
        self.total = 0

    @property
    def done_count(self) -> int:
        """완료된 사진 수 ("X / N 완료")"""
        return sum(1 for p in self.progress.values() if p >= 100)

    async def compress_all(self, files: Sequence[SelectedFile]) -> list[SelectedFile]:
        """전체 압축 (스레드에서 실행해서 이벤트 루프를 막지 않음)"""

        async def _compress(index: int, file: SelectedFile) -> SelectedFile:
            data = await asyncio.to_thread(self.transcoder.transcode, file.data, self.constraints)
            logger.debug(
                f"압축 완료: {file.filename} "
                f"{len(file.data) / 1024 / 1024:.2f}MB -> {len(data) / 1024 / 1024:.2f}MB"
            )
            return SelectedFile(_jpeg_name(file.filename), data, JPEG_CONTENT_TYPE)

        try:
            return await bounded_map(files, _compress, self.max_concurrent_compressions)
        except TranscodeError as e:
            logger.error(f"압축 실패: {e}")
            raise BatchCompressionError(f"Failed to process images: {e}") from e

    async def upload_batch(
        self,
        files: Sequence[SelectedFile],
        guest_name: str,
        on_progress: Optional[ProgressCallback] = None
    ) -> list[dict]:
        """사진 여러 장 업로드 -> 생성된 레코드 목록"""

        if not files or not guest_name or not guest_name.strip():
            raise BatchValidationError("Please select at least one image and enter your name")

        self.progress = {}
        self.total = len(files)

        compressed = await self.compress_all(files)

        succeeded: list[int] = []

        async def _upload(index: int, file: SelectedFile) -> dict:
            try:
                record = await self.client.upload_photo(file.filename, file.data, file.content_type, guest_name)
            except ApiError as e:
                logger.error(f"업로드 실패 (image {index}): {e.message}")
                raise UploadFailedError(e.message, index, succeeded) from e
            succeeded.append(index)
            self.progress[index] = 100
            if on_progress is not None:
                on_progress(index, 100)
            return record

        records = await bounded_map(compressed, _upload, self.max_concurrent)
        logger.info(f"{guest_name.strip()} 님 사진 {len(records)}장 업로드 완료")
        return records

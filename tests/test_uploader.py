# tests/test_uploader.py
import asyncio

import httpx
import pytest

from app.client.api_client import ApiError, GalleryApiClient
from app.client.uploader import (
    BatchCompressionError,
    BatchValidationError,
    SelectedFile,
    UploadFailedError,
    UploadOrchestrator,
)
from app.models.photo import Photo
from main import app
from tests.helpers import make_image_bytes


class FakeClient:
    """업로드 호출 기록용 가짜 클라이언트"""

    def __init__(self, fail_on=(), delay=0.01):
        self.fail_on = set(fail_on)
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.peak = 0

    async def upload_photo(self, filename, data, content_type, guest_name):
        self.calls.append((filename, content_type, guest_name))
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if filename in self.fail_on:
                raise ApiError("Failed to upload image: disk full", 500)
            return {"id": filename, "guest_name": guest_name.strip(), "storage_path": filename}
        finally:
            self.in_flight -= 1


def _files(count, width=300, height=200):
    return [
        SelectedFile(f"photo{i}.png", make_image_bytes(width, height, "PNG"), "image/png")
        for i in range(count)
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("files, name", [([], "Sam"), (None, "Sam"), ("one", ""), ("one", "   ")])
async def test_invalid_batch_makes_no_calls(files, name):
    client = FakeClient()
    orchestrator = UploadOrchestrator(client)
    selected = _files(1) if files == "one" else files

    with pytest.raises(BatchValidationError):
        await orchestrator.upload_batch(selected, name)

    assert client.calls == []


@pytest.mark.asyncio
async def test_compression_failure_aborts_before_upload():
    client = FakeClient()
    files = _files(3) + [SelectedFile("broken.png", b"not an image", "image/png")]

    with pytest.raises(BatchCompressionError, match="Failed to process images"):
        await UploadOrchestrator(client).upload_batch(files, "Sam")

    assert client.calls == []


@pytest.mark.asyncio
async def test_uploads_compressed_jpeg_with_bounded_concurrency():
    client = FakeClient()
    orchestrator = UploadOrchestrator(client, max_concurrent=4)
    reported = []

    records = await orchestrator.upload_batch(
        _files(9, 2400, 1600), "Sam",
        on_progress=lambda index, percent: reported.append((index, percent))
    )

    assert len(records) == 9
    assert client.peak == 4
    assert all(call[1] == "image/jpeg" and call[0].endswith(".jpg") for call in client.calls)
    assert orchestrator.done_count == 9
    assert orchestrator.total == 9
    assert sorted(reported) == [(i, 100) for i in range(9)]


@pytest.mark.asyncio
async def test_first_failure_surfaced_and_successes_kept():
    client = FakeClient(fail_on={"photo1.jpg"})
    orchestrator = UploadOrchestrator(client, max_concurrent=4)

    with pytest.raises(UploadFailedError) as exc_info:
        await orchestrator.upload_batch(_files(6), "Sam")

    assert exc_info.value.index == 1
    assert "disk full" in str(exc_info.value)
    assert 1 not in orchestrator.progress
    # 같은 창에서 같이 올라간 사진은 성공으로 남음
    assert {0, 2, 3} <= set(exc_info.value.succeeded)
    assert all(orchestrator.progress[i] == 100 for i in exc_info.value.succeeded)


@pytest.mark.asyncio
async def test_five_photos_against_real_app(session_factory, storage, use_storage):
    from app.database import get_db

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    use_storage(storage)
    try:
        transport = httpx.ASGITransport(app=app)
        async with GalleryApiClient("http://testserver", transport=transport) as client:
            records = await UploadOrchestrator(client, max_concurrent=4).upload_batch(_files(5), "  Alice ")
    finally:
        app.dependency_overrides.clear()

    db = session_factory()
    try:
        photos = db.query(Photo).all()
    finally:
        db.close()

    assert len(records) == 5
    assert len(photos) == 5
    assert len({p.id for p in photos}) == 5
    assert len({p.storage_path for p in photos}) == 5
    assert {p.guest_name for p in photos} == {"Alice"}
    assert len(storage.list()) == 5

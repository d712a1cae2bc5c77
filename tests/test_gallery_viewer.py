# tests/test_gallery_viewer.py
import asyncio

import pytest

from app.client.api_client import ApiError
from app.client.gallery import GalleryViewer, has_more


def _photo(i):
    return {"id": f"id-{i}", "guest_name": f"guest {i}", "image_url": f"/media/{i}.jpg", "storage_path": f"{i}.jpg"}


class FakeGalleryClient:
    """메모리 목록으로 동작하는 가짜 API"""

    def __init__(self, total, fail_delete=False, delay=0):
        self.rows = [_photo(i) for i in range(total)]
        self.fail_delete = fail_delete
        self.delay = delay
        self.list_calls = []
        self.deleted = []

    async def list_photos(self, limit=20, offset=0):
        self.list_calls.append((limit, offset))
        if self.delay:
            await asyncio.sleep(self.delay)
        return [dict(p) for p in self.rows[offset:offset + limit]]

    async def delete_photo(self, photo_id, storage_path):
        if self.fail_delete:
            raise ApiError("Failed to delete photo record: db down", 500)
        self.deleted.append((photo_id, storage_path))
        self.rows = [p for p in self.rows if p["id"] != photo_id]
        return {"success": True, "photoId": photo_id}


@pytest.mark.asyncio
async def test_infinite_scroll_until_short_page():
    client = FakeGalleryClient(total=45)
    viewer = GalleryViewer(client, page_size=20)

    await viewer.load_initial()
    assert len(viewer.photos) == 20 and viewer.has_more

    assert await viewer.on_sentinel_visible()
    assert len(viewer.photos) == 40 and viewer.has_more

    assert await viewer.on_sentinel_visible()
    assert len(viewer.photos) == 45 and not viewer.has_more

    # 더 없으면 요청 안 함
    assert not await viewer.on_sentinel_visible()
    assert client.list_calls == [(20, 0), (20, 20), (20, 40)]


@pytest.mark.asyncio
async def test_exact_multiple_needs_one_extra_empty_page():
    client = FakeGalleryClient(total=40)
    viewer = GalleryViewer(client, page_size=20)

    await viewer.load_initial()
    await viewer.load_more()
    assert viewer.has_more

    await viewer.load_more()
    assert not viewer.has_more
    assert len(viewer.photos) == 40


@pytest.mark.asyncio
async def test_concurrent_load_more_is_deduplicated():
    client = FakeGalleryClient(total=60, delay=0.01)
    viewer = GalleryViewer(client, page_size=20)
    await viewer.load_initial()

    results = await asyncio.gather(viewer.load_more(), viewer.load_more(), viewer.load_more())

    assert results.count(True) == 1
    assert len(viewer.photos) == 40
    assert [p["id"] for p in viewer.photos] == [f"id-{i}" for i in range(40)]


@pytest.mark.asyncio
async def test_load_error_is_shown_inline():
    class BrokenClient(FakeGalleryClient):
        async def list_photos(self, limit=20, offset=0):
            raise ApiError("Failed to fetch photos", 500)

    viewer = GalleryViewer(BrokenClient(total=0))
    await viewer.load_initial()

    assert viewer.error == "Failed to fetch photos"
    assert viewer.photos == []
    assert not viewer.is_loading


@pytest.mark.asyncio
async def test_delete_removes_only_after_success_and_clamps_selection():
    client = FakeGalleryClient(total=3)
    viewer = GalleryViewer(client)
    await viewer.load_initial()
    viewer.open(2)

    assert await viewer.delete("id-2")

    assert client.deleted == [("id-2", "2.jpg")]
    assert [p["id"] for p in viewer.photos] == ["id-0", "id-1"]
    assert viewer.selected_index == 1

    await viewer.delete("id-1")
    await viewer.delete("id-0")
    assert viewer.photos == []
    assert viewer.selected_index is None


@pytest.mark.asyncio
async def test_delete_before_selection_keeps_index_in_range():
    viewer = GalleryViewer(FakeGalleryClient(total=5))
    await viewer.load_initial()
    viewer.open(1)

    await viewer.delete("id-4")

    assert viewer.selected_index == 1
    assert viewer.selected_photo["id"] == "id-1"


@pytest.mark.asyncio
async def test_failed_delete_keeps_photo():
    viewer = GalleryViewer(FakeGalleryClient(total=2, fail_delete=True))
    await viewer.load_initial()

    assert not await viewer.delete("id-0")

    assert len(viewer.photos) == 2
    assert viewer.error.startswith("Failed to delete photo record")
    assert viewer.deleting_id is None


@pytest.mark.asyncio
async def test_lightbox_navigation():
    viewer = GalleryViewer(FakeGalleryClient(total=3))
    await viewer.load_initial()

    viewer.next()
    assert viewer.selected_index is None

    viewer.open(0)
    viewer.previous()
    assert viewer.selected_index == 0

    viewer.handle_key("ArrowRight")
    viewer.swipe(300, 200)  # 왼쪽으로 스와이프 -> 다음
    assert viewer.selected_index == 2

    viewer.next()
    assert viewer.selected_index == 2

    viewer.swipe(100, 130)  # 임계값 미만
    assert viewer.selected_index == 2

    viewer.swipe(100, 200)
    viewer.handle_key("ArrowLeft")
    assert viewer.selected_index == 0

    viewer.handle_key("Escape")
    assert viewer.selected_index is None
    assert viewer.selected_photo is None


def test_has_more_heuristic():
    assert has_more(20, 20)
    assert not has_more(19, 20)
    assert not has_more(0, 20)
    assert not has_more(0, 0)

# app/client/gallery.py
"""갤러리 화면 상태 (무한 스크롤 + 라이트박스 + 삭제)"""
from typing import Optional

from app.client.api_client import ApiError, GalleryApiClient

PHOTOS_PER_PAGE = 20
# 스와이프 인식 최소 거리 (px)
SWIPE_THRESHOLD = 50


def has_more(returned_count: int, limit: int) -> bool:
    """
    다음 페이지가 있을 수도 있는지 (근사값)
    - 페이지 경계에 동시 insert 가 있으면 틀릴 수 있음
    """
    return limit > 0 and returned_count == limit


class GalleryViewer:
    def __init__(self, client: GalleryApiClient, page_size: int = PHOTOS_PER_PAGE):
        self.client = client
        self.page_size = page_size
        self.photos: list[dict] = []
        self.has_more = True
        self.is_loading = False
        self.error = ""
        self.selected_index: Optional[int] = None
        self.deleting_id: Optional[str] = None

    async def _fetch_page(self, offset: int) -> Optional[list[dict]]:
        self.is_loading = True
        try:
            page = await self.client.list_photos(limit=self.page_size, offset=offset)
        except ApiError as e:
            self.error = e.message
            return None
        finally:
            self.is_loading = False

        self.has_more = has_more(len(page), self.page_size)
        return page

    async def load_initial(self) -> None:
        """첫 페이지 로드"""
        if self.is_loading:
            return
        self.error = ""
        page = await self._fetch_page(0)
        if page is not None:
            self.photos = page

    async def load_more(self) -> bool:
        """다음 페이지 로드 (로딩 중이거나 더 없으면 건너뜀)"""
        if self.is_loading or not self.has_more:
            return False
        page = await self._fetch_page(len(self.photos))
        if page is None:
            return False
        self.photos.extend(page)
        return True

    async def on_sentinel_visible(self) -> bool:
        """스크롤 끝 감지"""
        return await self.load_more()

    # ===== 라이트박스 =====
    def open(self, index: int) -> None:
        if 0 <= index < len(self.photos):
            self.selected_index = index

    def close(self) -> None:
        self.selected_index = None

    def next(self) -> None:
        if self.selected_index is not None and self.selected_index < len(self.photos) - 1:
            self.selected_index += 1

    def previous(self) -> None:
        if self.selected_index is not None and self.selected_index > 0:
            self.selected_index -= 1

    def swipe(self, start_x: float, end_x: float) -> None:
        distance = start_x - end_x
        if distance > SWIPE_THRESHOLD:
            self.next()
        elif distance < -SWIPE_THRESHOLD:
            self.previous()

    def handle_key(self, key: str) -> None:
        if self.selected_index is None:
            return
        if key == "ArrowLeft":
            self.previous()
        elif key == "ArrowRight":
            self.next()
        elif key == "Escape":
            self.close()

    @property
    def selected_photo(self) -> Optional[dict]:
        if self.selected_index is None:
            return None
        return self.photos[self.selected_index]

    # ===== 삭제 =====
    async def delete(self, photo_id: str) -> bool:
        """서버 삭제 성공 후에만 목록에서 제거"""
        photo = next((p for p in self.photos if p["id"] == photo_id), None)
        if photo is None:
            return False

        self.deleting_id = photo_id
        try:
            await self.client.delete_photo(photo_id, photo["storage_path"])
        except ApiError as e:
            self.error = e.message
            return False
        finally:
            self.deleting_id = None

        self.photos = [p for p in self.photos if p["id"] != photo_id]

        # 선택 인덱스 범위 보정
        if self.selected_index is not None and self.selected_index >= len(self.photos):
            self.selected_index = len(self.photos) - 1 if self.photos else None
        return True

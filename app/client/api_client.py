# app/client/api_client.py
"""갤러리 API 클라이언트 (httpx)"""
from typing import Any, Optional

import httpx

from app.core.logger import logger

# 갤러리 목록은 캐시 없이 조회
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
}


class ApiError(Exception):
    """API 호출 실패 (서버의 {"error"} 메시지 포함)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GalleryApiClient:
    """업로드/목록/삭제/커플 사진 API 호출. 자동 재시도 없음"""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float | None = 60.0
    ):
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "GalleryApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, fallback: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} 요청 실패: {e}")
            raise ApiError(f"{fallback}: {e}") from e

        if response.is_error:
            try:
                message = response.json().get("error") or fallback
            except (ValueError, AttributeError):
                message = fallback
            raise ApiError(message, response.status_code)

        return response.json()

    async def upload_photo(self, filename: str, data: bytes, content_type: str, guest_name: str) -> dict:
        """사진 1장 업로드 -> 생성된 레코드"""
        return await self._request(
            "POST", "/upload", "Upload failed",
            files={"image": (filename, data, content_type)},
            data={"guestName": guest_name},
        )

    async def list_photos(self, limit: int = 20, offset: int = 0) -> list[dict]:
        return await self._request(
            "GET", "/photos", "Failed to fetch photos",
            params={"limit": limit, "offset": offset},
            headers=NO_CACHE_HEADERS,
        )

    async def delete_photo(self, photo_id: str, storage_path: str) -> dict:
        return await self._request(
            "POST", "/photos/delete", "Failed to delete photo",
            json={"photoId": photo_id, "storagePath": storage_path},
        )

    async def get_couple_photo(self) -> dict:
        return await self._request("GET", "/couple-photo", "Failed to fetch couple photo", headers=NO_CACHE_HEADERS)

    async def upload_couple_photo(self, filename: str, data: bytes, content_type: str) -> dict:
        return await self._request(
            "POST", "/couple-photo", "Upload failed",
            files={"image": (filename, data, content_type)},
        )

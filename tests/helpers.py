# tests/helpers.py
from io import BytesIO

from PIL import Image

from app.services.storage_service import LocalObjectStore, StorageError


def make_image_bytes(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    """테스트용 이미지 생성"""
    colors = {"RGBA": (200, 120, 80, 128), "L": 128}
    color = colors.get(mode, (200, 120, 80))
    img = Image.new(mode, (width, height), color)
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


class FailingRemoveStore(LocalObjectStore):
    """blob 삭제가 항상 실패하는 스토리지"""

    def remove(self, paths):
        raise StorageError("simulated remove failure")


class FailingUploadStore(LocalObjectStore):
    """blob 업로드가 항상 실패하는 스토리지"""

    def upload(self, key, data, content_type):
        raise StorageError("simulated upload failure")

# app/api/deps.py
from functools import lru_cache

from app.config import settings
from app.services.storage_service import ObjectStore, build_object_store

@lru_cache
def _default_storage() -> ObjectStore:
    return build_object_store(settings)

def get_storage() -> ObjectStore:
    """오브젝트 스토리지 의존성 (테스트에서 override)"""
    return _default_storage()

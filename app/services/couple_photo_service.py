# app/services/couple_photo_service.py
import time

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.models.couple_photo import CouplePhoto
from app.services.storage_service import ObjectStore, StorageError
from app.core.errors import MissingField, UploadError, PersistError, FetchError
from app.core.file_security import file_extension, validate_file_size
from app.core.logger import logger

# 커플 사진 blob 이름 접두어
COUPLE_PREFIX = "couple-"

def get_couple_photo(db: Session) -> CouplePhoto | None:
    """현재 커플 사진 (가장 최근 1개)"""
    try:
        return db.query(CouplePhoto)\
            .order_by(CouplePhoto.created_at.desc())\
            .first()
    except SQLAlchemyError as e:
        raise FetchError(f"Failed to fetch couple photo: {e}") from e

def replace_couple_photo(
    db: Session,
    storage: ObjectStore,
    data: bytes | None,
    filename: str | None,
    content_type: str | None
) -> CouplePhoto:
    """
    커플 사진 교체 (단일 슬롯)
    - 기존 couple-* blob 삭제 -> 새 blob 업로드 -> 기존 row 전부 삭제 -> 새 row insert
    """
    
    if not data:
        raise MissingField("Missing image file")
    validate_file_size(data)
    
    key = f"{COUPLE_PREFIX}{int(time.time() * 1000)}.{file_extension(filename)}"
    
    # 1. 이전 커플 사진 blob 정리 (실패해도 진행)
    try:
        old_files = [e.name for e in storage.list(COUPLE_PREFIX)]
        if old_files:
            storage.remove(old_files)
            logger.info(f"이전 커플 사진 blob {len(old_files)}개 삭제")
    except StorageError as e:
        logger.warning(f"이전 커플 사진 blob 정리 실패: {e}")
    
    # 2. 새 blob 업로드
    try:
        path = storage.upload(key, data, content_type or "image/jpeg")
    except StorageError as e:
        raise UploadError(f"Failed to upload image: {e}") from e
    
    image_url = storage.get_public_url(path)
    
    # 3. 기존 row 삭제 + 새 row insert (한 트랜잭션)
    try:
        db.query(CouplePhoto).delete(synchronize_session=False)
        couple_photo = CouplePhoto(image_url=image_url, storage_path=path or key)
        db.add(couple_photo)
        db.commit()
        db.refresh(couple_photo)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"orphan blob 발생: {path} (커플 사진 저장 실패: {e})")
        raise PersistError(f"Failed to save photo: {e}") from e
    
    logger.info(f"커플 사진 교체 완료: {couple_photo.id}")
    return couple_photo

# app/services/gallery_service.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List

from app.models.photo import Photo
from app.services.storage_service import ObjectStore, StorageError
from app.services.couple_photo_service import COUPLE_PREFIX
from app.core.errors import InvalidParameter, FetchError, DeleteError, MissingField
from app.core.logger import logger

# 페이지네이션 설정
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

def validate_page_params(limit: int, offset: int) -> None:
    """limit/offset 검증"""
    if limit > MAX_LIMIT:
        raise InvalidParameter(f"Limit cannot exceed {MAX_LIMIT}")
    if limit < 0:
        raise InvalidParameter("Limit cannot be negative")
    if offset < 0:
        raise InvalidParameter("Offset cannot be negative")

def list_photos(db: Session, limit: int = DEFAULT_LIMIT, offset: int = 0) -> List[Photo]:
    """최신순 사진 목록 (offset 기반 페이지네이션)"""
    
    validate_page_params(limit, offset)
    
    try:
        return db.query(Photo)\
            .order_by(Photo.created_at.desc(), Photo.id.desc())\
            .offset(offset)\
            .limit(limit)\
            .all()
    except SQLAlchemyError as e:
        logger.error(f"사진 목록 조회 실패: {e}")
        raise FetchError("Failed to fetch photos") from e

def delete_photo(db: Session, storage: ObjectStore, photo_id: str | None, storage_path: str | None) -> str:
    """
    사진 삭제 - 메타데이터 먼저, 그 다음 blob
    (레코드는 남고 이미지가 깨지는 것보다 blob orphan 이 낫다)
    """
    
    if not photo_id or not storage_path:
        raise MissingField("Missing photoId or storagePath")
    
    logger.info(f"사진 삭제 요청: {photo_id} (path: {storage_path})")
    
    # 1. 메타데이터 삭제
    try:
        deleted = db.query(Photo)\
            .filter(Photo.id == photo_id)\
            .delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise DeleteError(f"Failed to delete photo record: {e}") from e
    
    if not deleted:
        # 이미 삭제된 사진 - blob 도 건드리지 않음
        logger.info(f"삭제할 레코드 없음, blob 삭제 생략: {photo_id}")
        return photo_id
    
    # 커플 사진 blob 은 갤러리 삭제 대상이 아님
    if storage_path.startswith(COUPLE_PREFIX):
        logger.warning(f"커플 사진 blob 은 삭제하지 않음: {storage_path}")
        return photo_id
    
    # 다른 사진이 같은 blob 을 참조하면 blob 은 남김
    try:
        still_referenced = db.query(Photo.id)\
            .filter(Photo.storage_path == storage_path)\
            .first() is not None
    except SQLAlchemyError as e:
        logger.warning(f"blob 참조 확인 실패, blob 삭제 생략: {storage_path} ({e})")
        return photo_id

    if still_referenced:
        logger.warning(f"다른 레코드가 참조 중인 blob - 삭제 생략: {storage_path}")
        return photo_id

    # 2. blob 삭제 (실패해도 성공 응답)
    try:
        storage.remove([storage_path])
    except StorageError as e:
        logger.warning(f"orphan blob 발생: {storage_path} (스토리지 삭제 실패: {e})")
    else:
        logger.info(f"사진 삭제 완료: {photo_id}")
    
    return photo_id

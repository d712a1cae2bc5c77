# app/services/ingestion_service.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.models.photo import Photo
from app.services.storage_service import ObjectStore, StorageError
from app.core.errors import MissingField, EmptyName, UploadError, PersistError
from app.core.file_security import generate_storage_key, validate_file_size
from app.core.logger import logger

DEFAULT_CONTENT_TYPE = "image/jpeg"

def normalize_guest_name(guest_name: str | None) -> str:
    """하객 이름 검증 + trim"""
    if guest_name is None:
        raise MissingField("Missing image or guest name")
    
    name = guest_name.strip()
    if not name:
        raise EmptyName("Guest name cannot be empty")
    return name

def ingest_photo(
    db: Session,
    storage: ObjectStore,
    data: bytes | None,
    filename: str | None,
    content_type: str | None,
    guest_name: str | None
) -> Photo:
    """
    사진 1장 저장
    1. 스토리지 키 생성
    2. blob 업로드 (실패 시 메타데이터 작성 안 함)
    3. 공개 URL 조회
    4. 메타데이터 insert (실패 시 blob은 orphan으로 남음)
    """
    
    # 검증 (부수효과 전에)
    if not data:
        raise MissingField("Missing image or guest name")
    name = normalize_guest_name(guest_name)
    validate_file_size(data)
    
    # 1. 고유 키
    key = generate_storage_key(filename)
    
    # 2. blob 업로드
    try:
        path = storage.upload(key, data, content_type or DEFAULT_CONTENT_TYPE)
    except StorageError as e:
        logger.error(f"스토리지 업로드 실패 ({key}): {e}")
        raise UploadError(f"Failed to upload image: {e}") from e
    
    # 3. 공개 URL
    image_url = storage.get_public_url(path)
    
    # 4. 메타데이터 저장
    photo = Photo(
        guest_name=name,
        image_url=image_url,
        storage_path=path or key
    )
    try:
        db.add(photo)
        db.commit()
        db.refresh(photo)
    except SQLAlchemyError as e:
        db.rollback()
        # blob은 이미 저장됨 - 수동 정리 대상
        logger.warning(f"orphan blob 발생: {path} (메타데이터 저장 실패: {e})")
        raise PersistError(f"Failed to save photo: {e}") from e
    
    logger.info(f"사진 업로드 완료: {photo.id} ({name}, {path})")
    return photo

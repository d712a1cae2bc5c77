# app/api/routes/photos.py
from fastapi import APIRouter, Depends, Request, Body, Query, status
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile
from starlette.concurrency import run_in_threadpool
from typing import List

from app.database import get_db
from app.schemas.photo import PhotoResponse, PhotoDeleteRequest, PhotoDeleteResponse
from app.api.deps import get_storage
from app.core.errors import MissingField
from app.services.storage_service import ObjectStore
from app.services import ingestion_service, gallery_service

router = APIRouter(tags=["사진"])

@router.post("/upload", response_model=PhotoResponse, status_code=status.HTTP_201_CREATED)
async def upload_photo(
    request: Request,
    db: Session = Depends(get_db),
    storage: ObjectStore = Depends(get_storage)
):
    """사진 1장 업로드 (multipart: image + guestName)"""
    
    # 빈 문자열과 누락을 구분하기 위해 form 직접 파싱
    async with request.form() as form:
        image = form.get("image")
        guest_name = form.get("guestName")
        
        if not isinstance(image, UploadFile) or not isinstance(guest_name, str):
            raise MissingField("Missing image or guest name")
        
        data = await image.read()
    
    # DB commit / 스토리지 업로드는 블로킹 - 스레드풀에서 실행
    return await run_in_threadpool(
        ingestion_service.ingest_photo,
        db,
        storage,
        data=data,
        filename=image.filename,
        content_type=image.content_type,
        guest_name=guest_name
    )

@router.get("/photos", response_model=List[PhotoResponse])
def get_photos(
    limit: int = Query(gallery_service.DEFAULT_LIMIT, description="페이지당 개수 (최대 100)"),
    offset: int = Query(0, description="건너뛸 개수"),
    db: Session = Depends(get_db)
):
    """사진 목록 조회 (최신순, offset 페이지네이션)"""
    return gallery_service.list_photos(db, limit=limit, offset=offset)

@router.post("/photos/delete", response_model=PhotoDeleteResponse)
def delete_photo(
    data: PhotoDeleteRequest = Body(...),
    db: Session = Depends(get_db),
    storage: ObjectStore = Depends(get_storage)
):
    """사진 삭제 (레코드 -> blob 순서)"""
    
    photo_id = gallery_service.delete_photo(db, storage, data.photo_id, data.storage_path)
    
    return PhotoDeleteResponse(photo_id=photo_id)

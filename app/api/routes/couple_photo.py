# app/api/routes/couple_photo.py
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile
from starlette.concurrency import run_in_threadpool

from app.database import get_db
from app.schemas.photo import CouplePhotoResponse
from app.api.deps import get_storage
from app.core.errors import MissingField
from app.services.storage_service import ObjectStore
from app.services import couple_photo_service

router = APIRouter(prefix="/couple-photo", tags=["커플 사진"])

@router.get("", response_model=CouplePhotoResponse)
def get_couple_photo(db: Session = Depends(get_db)):
    """현재 커플 사진 (없으면 image_url: null)"""
    
    couple_photo = couple_photo_service.get_couple_photo(db)
    if couple_photo is None:
        return JSONResponse(status_code=status.HTTP_200_OK, content={"image_url": None})
    
    return couple_photo

@router.post("", response_model=CouplePhotoResponse, status_code=status.HTTP_201_CREATED)
async def upload_couple_photo(
    request: Request,
    db: Session = Depends(get_db),
    storage: ObjectStore = Depends(get_storage)
):
    """커플 사진 교체 (관리자, multipart: image)"""
    
    async with request.form() as form:
        image = form.get("image")
        if not isinstance(image, UploadFile):
            raise MissingField("Missing image file")
        
        data = await image.read()
    
    # DB commit / 스토리지 업로드는 블로킹 - 스레드풀에서 실행
    return await run_in_threadpool(
        couple_photo_service.replace_couple_photo,
        db,
        storage,
        data=data,
        filename=image.filename,
        content_type=image.content_type
    )

# app/schemas/photo.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional

class PhotoResponse(BaseModel):
    """사진 응답"""
    id: str
    guest_name: str
    image_url: str
    storage_path: str
    created_at: datetime
    
    class Config:
        from_attributes = True

class PhotoDeleteRequest(BaseModel):
    """사진 삭제 요청 (photoId, storagePath)"""
    model_config = ConfigDict(populate_by_name=True)
    
    photo_id: Optional[str] = Field(None, alias="photoId")
    storage_path: Optional[str] = Field(None, alias="storagePath")
    
    @field_validator("photo_id", "storage_path")
    def strip_blank(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

class PhotoDeleteResponse(BaseModel):
    """사진 삭제 응답"""
    model_config = ConfigDict(populate_by_name=True)
    
    success: bool = True
    photo_id: str = Field(..., alias="photoId")

class CouplePhotoResponse(BaseModel):
    """커플 사진 응답 (없으면 image_url=None)"""
    id: Optional[str] = None
    image_url: Optional[str] = None
    storage_path: Optional[str] = None
    created_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

# app/models/couple_photo.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base
from app.models.photo import _utcnow
import uuid

class CouplePhoto(Base):
    """메인 화면 커플 사진 (항상 1개 row만 유지)"""
    __tablename__ = "couple_photo"
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    image_url = Column(String, nullable=False)
    storage_path = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<CouplePhoto {self.storage_path}>"

# app/models/photo.py
from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.sql import func
from app.database import Base
from datetime import datetime, timezone
import uuid

def _utcnow():
    return datetime.now(timezone.utc)

class Photo(Base):
    """하객 사진 모델"""
    __tablename__ = "photos"
    
    # 기본 필드
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    guest_name = Column(String, nullable=False)  # trim 된 하객 이름
    
    # 스토리지 정보 (생성 후 변경 없음)
    image_url = Column(String, nullable=False)  # 공개 URL
    storage_path = Column(String, nullable=False)  # 오브젝트 스토리지 키
    
    # 타임스탬프 (유일한 정렬 기준)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    
    __table_args__ = (
        Index("idx_photos_created_at", "created_at"),
    )
    
    def __repr__(self):
        return f"<Photo {self.storage_path} by {self.guest_name}>"

# app/config.py
from pydantic_settings import BaseSettings
from pydantic import field_validator

class Settings(BaseSettings):
    """환경변수 설정"""
    
    # API 기본 설정
    app_name: str = "Wedding Gallery API"
    debug: bool = False
    
    # Database (메타데이터 테이블)
    database_url: str = "sqlite:///./wedding.db"
    
    # Object storage
    storage_backend: str = "local"  # local | s3
    storage_dir: str = "media/wedding-photos"
    storage_bucket: str = "wedding-photos"
    public_base_url: str = "/media"
    s3_endpoint_url: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_region: str = "auto"
    
    # 업로드 제한
    max_upload_bytes: int = 20 * 1024 * 1024  # 20MB
    
    # CORS
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    
    # 로깅
    log_dir: str = "logs"
    log_level: str = "INFO"
    
    @field_validator('storage_backend')
    def validate_storage_backend(cls, v):
        v = v.strip().lower()
        if v not in ("local", "s3"):
            raise ValueError('STORAGE_BACKEND는 local 또는 s3 이어야 합니다')
        return v
    
    @field_validator('public_base_url')
    def strip_public_base_url(cls, v):
        return v.strip().rstrip("/")
    
    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
    
    class Config:
        env_file = ".env"
        case_sensitive = False

# 싱글톤 인스턴스
settings = Settings()

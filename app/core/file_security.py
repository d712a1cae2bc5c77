# app/core/file_security.py
import os
import secrets
import string
import time

from app.config import settings
from app.core.errors import PayloadTooLarge

# 설정
DEFAULT_EXTENSION = "jpg"
MAX_EXTENSION_LENGTH = 10
_BASE36 = string.digits + string.ascii_lowercase

def file_extension(filename: str | None, default: str = DEFAULT_EXTENSION) -> str:
    """원본 파일명에서 확장자 추출 (없거나 이상하면 기본값)"""
    if not filename:
        return default
    
    # 경로 제거
    name = os.path.basename(filename.replace("\\", "/"))
    if "." not in name:
        return default
    
    ext = name.rsplit(".", 1)[1].lower()
    
    # 알파벳, 숫자만 허용
    if not ext or len(ext) > MAX_EXTENSION_LENGTH or not ext.isalnum() or not ext.isascii():
        return default
    
    return ext

def random_suffix(length: int = 6) -> str:
    """base36 랜덤 문자열"""
    return "".join(secrets.choice(_BASE36) for _ in range(length))

def generate_storage_key(filename: str | None, prefix: str = "") -> str:
    """고유 스토리지 키 생성 ({epoch_ms}-{random}.{ext})"""
    timestamp = int(time.time() * 1000)
    return f"{prefix}{timestamp}-{random_suffix()}.{file_extension(filename)}"

def validate_file_size(data: bytes, max_bytes: int | None = None) -> None:
    """파일 크기 검증"""
    limit = max_bytes if max_bytes is not None else settings.max_upload_bytes
    
    if len(data) > limit:
        raise PayloadTooLarge(
            f"Image is too large. Maximum size is {limit // 1024 // 1024}MB"
        )

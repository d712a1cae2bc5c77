# app/core/errors.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logger import logger


class GalleryError(Exception):
    """API 에러 기본 클래스 - {"error": message} 형태로 응답"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# ===== 검증 에러 (400) - 부수효과 발생 전에 거절 =====
class MissingField(GalleryError):
    status_code = status.HTTP_400_BAD_REQUEST

class EmptyName(GalleryError):
    status_code = status.HTTP_400_BAD_REQUEST

class InvalidParameter(GalleryError):
    status_code = status.HTTP_400_BAD_REQUEST

class PayloadTooLarge(GalleryError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE


# ===== 인프라 에러 (500) - 재시도 없음 =====
class UploadError(GalleryError):
    """스토리지 쓰기 실패 (메타데이터 미작성)"""

class PersistError(GalleryError):
    """메타데이터 insert 실패 (blob은 orphan으로 남음)"""

class FetchError(GalleryError):
    """메타데이터 조회 실패"""

class DeleteError(GalleryError):
    """메타데이터 삭제 실패 (blob은 건드리지 않음)"""


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """에러 -> JSON 변환 핸들러 등록"""

    @app.exception_handler(GalleryError)
    async def gallery_error_handler(request: Request, exc: GalleryError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} 실패: {exc.message}")
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query"))
        message = f"Invalid parameter {field}: {first.get('msg', 'invalid value')}" if field else "Invalid request"
        return error_response(message, status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
        return error_response(f"Internal server error: {exc}", status.HTTP_500_INTERNAL_SERVER_ERROR)

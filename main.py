# main.py
import os

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import settings
from app.database import init_db
from app.api.routes import photos, couple_photo
from app.core.errors import register_exception_handlers
from app.core.logging_middleware import log_requests
from app.core.logger import logger

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug
)

# ===== 로깅 미들웨어 추가 (가장 먼저) =====
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    return await log_requests(request, call_next)
# ==========================================

# 요청 크기 제한 미들웨어 (multipart 오버헤드 여유 1MB)
MAX_REQUEST_SIZE = settings.max_upload_bytes + 1024 * 1024

@app.middleware("http")
async def limit_upload_size(request: Request, call_next):
    """요청 크기 제한"""
    if request.method in ["POST", "PUT", "PATCH"]:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > MAX_REQUEST_SIZE:
            return JSONResponse(
                status_code=413,
                content={"error": f"Request is too large. Maximum size is {MAX_REQUEST_SIZE // 1024 // 1024}MB"}
            )
    return await call_next(request)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 에러 -> {"error": ...} 변환
register_exception_handlers(app)

# 라우터 등록
app.include_router(photos.router)
app.include_router(couple_photo.router)

# 로컬 스토리지면 정적 파일 서빙
if settings.storage_backend == "local" and settings.public_base_url.startswith("/"):
    os.makedirs(settings.storage_dir, exist_ok=True)
    app.mount(settings.public_base_url, StaticFiles(directory=settings.storage_dir), name="media")

# ===== 시작 로그 추가 =====
@app.on_event("startup")
async def startup_event():
    init_db()
    logger.info("Wedding Gallery API 서버 시작")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Wedding Gallery API 서버 종료")
# ==========================

@app.get("/health")
def health_check():
    """헬스체크"""
    return {
        "status": "healthy",
        "service": settings.app_name
    }

# app/core/logging_middleware.py
from fastapi import Request
from app.core.logger import logger
import time

async def log_requests(request: Request, call_next):
    """모든 요청/응답 로깅"""
    
    # 요청 시작 시간
    start_time = time.time()
    
    logger.info(f"➡️  {request.method} {request.url.path}")
    
    try:
        response = await call_next(request)
        
        process_time = (time.time() - start_time) * 1000  # ms
        
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            f"⬅️  {request.method} {request.url.path} "
            f"- Status: {response.status_code} "
            f"- Time: {process_time:.2f}ms"
        )
        
        return response
        
    except Exception as e:
        process_time = (time.time() - start_time) * 1000
        
        logger.error(
            f"❌ {request.method} {request.url.path} "
            f"- Error: {str(e)} "
            f"- Time: {process_time:.2f}ms"
        )
        logger.exception("Exception details:")
        
        raise

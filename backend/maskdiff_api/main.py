"""
FastAPI 應用主入口
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from maskdiff.exceptions import DegenerateComparisonError, ImageDecodeError, InvalidDimensionError
from maskdiff_api.api import comparisons, config
from maskdiff_api.config import settings
from maskdiff_api.exceptions import TooManyCandidatesError, UploadTooLargeError

# 配置日誌
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# 創建 FastAPI 應用
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="遮罩比對系統 API",
    docs_url="/docs",
    redoc_url="/redoc"
)

# 配置 CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 註冊路由
app.include_router(comparisons.router, prefix=settings.API_V1_PREFIX)
app.include_router(config.router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root():
    """根路徑"""
    return {
        "message": "遮罩比對系統 API",
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    """健康檢查"""
    return {"status": "healthy"}


# 異常處理器
@app.exception_handler(ImageDecodeError)
async def image_decode_error_handler(request: Request, exc: ImageDecodeError):
    """圖像解碼失敗異常處理器"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc) or "無法解碼圖像"}
    )


@app.exception_handler(InvalidDimensionError)
async def invalid_dimension_handler(request: Request, exc: InvalidDimensionError):
    """無效尺寸異常處理器"""
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc) or "無效的圖像尺寸"}
    )


@app.exception_handler(DegenerateComparisonError)
async def degenerate_comparison_handler(request: Request, exc: DegenerateComparisonError):
    """無法比對的空遮罩異常處理器"""
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc) or "兩個遮罩皆為空，無法比對"}
    )


@app.exception_handler(UploadTooLargeError)
async def upload_too_large_handler(request: Request, exc: UploadTooLargeError):
    """上傳文件過大異常處理器"""
    return JSONResponse(
        status_code=413,
        content={"detail": str(exc) or "文件大小超過限制"}
    )


@app.exception_handler(TooManyCandidatesError)
async def too_many_candidates_handler(request: Request, exc: TooManyCandidatesError):
    """候選圖數量過多異常處理器"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc) or "候選圖數量超過上限"}
    )

"""
比對相關 API
"""

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool
from typing import List, Optional

from maskdiff_api.schemas import BatchComparisonResponse, ComparisonResponse
from maskdiff_api.services.comparison_service import ComparisonService

router = APIRouter(prefix="/comparisons", tags=["comparisons"])


@router.post("/", response_model=ComparisonResponse)
async def create_comparison(
    image1: UploadFile = File(...),
    image2: UploadFile = File(...),
    threshold: Optional[float] = Form(None),
):
    """
    比對兩張圖像
    
    - **image1**: 圖像1 文件
    - **image2**: 圖像2 文件
    - **threshold**: 相似度閾值（0-1，未提供時使用設定檔預設值）
    """
    content1 = await image1.read()
    content2 = await image2.read()
    
    comparison_service = ComparisonService()
    try:
        # 解碼與比對在線程池中執行
        return await run_in_threadpool(comparison_service.compare, content1, content2, threshold)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/batch", response_model=BatchComparisonResponse)
async def create_batch_comparison(
    reference: UploadFile = File(...),
    candidates: List[UploadFile] = File(...),
    threshold: Optional[float] = Form(None),
):
    """
    以一張參考圖比對多張候選圖（多執行緒）
    
    - **reference**: 參考圖文件
    - **candidates**: 候選圖文件列表
    - **threshold**: 相似度閾值（0-1）
    """
    reference_content = await reference.read()
    candidate_contents = []
    for candidate in candidates:
        candidate_contents.append((candidate.filename, await candidate.read()))
    
    comparison_service = ComparisonService()
    try:
        return await run_in_threadpool(
            comparison_service.compare_batch, reference_content, candidate_contents, threshold
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

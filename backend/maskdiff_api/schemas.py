"""
Pydantic 數據模型（用於 API 響應）
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class ComparisonResponse(BaseModel):
    """比對結果響應模型"""
    similarity: float = Field(..., ge=0.0, le=1.0, description="相似度")
    is_match: bool = Field(..., description="相似度是否達到閾值")
    threshold: float = Field(..., ge=0.0, le=1.0, description="相似度閾值")
    image1_size: List[int] = Field(..., description="圖像1 尺寸 [width, height]")
    image2_size: List[int] = Field(..., description="圖像2 尺寸 [width, height]")
    resized: str = Field(..., description="被縮放的一方（image1 或 image2）")
    target_size: List[int] = Field(..., description="比對時的共同尺寸 [width, height]")
    matched_positions: int = Field(..., ge=0, description="一致的像素數")
    total_positions: int = Field(..., ge=0, description="比對的像素總數")
    foreground_ratio1: float = Field(..., ge=0.0, le=1.0, description="圖像1 遮罩前景比例")
    foreground_ratio2: float = Field(..., ge=0.0, le=1.0, description="圖像2 遮罩前景比例")


class CandidateResult(BaseModel):
    """批次比對中單一候選圖的結果"""
    index: int
    filename: Optional[str] = None
    similarity: float = Field(..., ge=0.0, le=1.0)
    is_match: bool


class BatchComparisonResponse(BaseModel):
    """批次比對響應模型"""
    threshold: float = Field(..., ge=0.0, le=1.0, description="相似度閾值")
    total_count: int = Field(..., description="候選圖數量")
    match_count: int = Field(..., description="匹配數量")
    results: List[CandidateResult] = Field(default_factory=list)

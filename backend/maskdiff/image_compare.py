"""
圖像比對流程
建立兩張圖的遮罩，把較小圖像的遮罩放大到較大圖像的尺寸後逐格比對
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from maskdiff.decode import ImageSource, load_image_async
from maskdiff.mask import build_mask
from maskdiff.mask_compare import count_agreement
from maskdiff.pixel_buffer import PixelBuffer
from maskdiff.resample import resize_mask

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageComparison:
    """單次比對的結果與細節"""

    similarity: float
    image1_size: Tuple[int, int]
    image2_size: Tuple[int, int]
    resized: str  # 被縮放的一方："image1" 或 "image2"
    target_size: Tuple[int, int]
    matched_positions: int
    total_positions: int
    foreground_ratio1: float
    foreground_ratio2: float

    def to_dict(self) -> dict:
        return {
            'similarity': self.similarity,
            'image1_size': list(self.image1_size),
            'image2_size': list(self.image2_size),
            'resized': self.resized,
            'target_size': list(self.target_size),
            'matched_positions': self.matched_positions,
            'total_positions': self.total_positions,
            'foreground_ratio1': self.foreground_ratio1,
            'foreground_ratio2': self.foreground_ratio2,
        }


def image1_is_larger(image1: PixelBuffer, image2: PixelBuffer) -> bool:
    """
    判斷圖像1是否為「較大」的一方

    只要寬或高任一邊較大即成立，並非比較面積；尺寸相同時回傳 False，
    由圖像1 縮放到圖像2 的尺寸。
    """
    return image1.width > image2.width or image1.height > image2.height


def compare_images_detailed(image1: PixelBuffer, image2: PixelBuffer) -> ImageComparison:
    """
    比對兩張圖像並回傳細節

    Args:
        image1: 圖像1 像素緩衝區
        image2: 圖像2 像素緩衝區

    Returns:
        ImageComparison
    """
    mask1 = build_mask(image1)
    mask2 = build_mask(image2)

    larger_is_1 = image1_is_larger(image1, image2)
    area1 = image1.width * image1.height
    area2 = image2.width * image2.height
    if (larger_is_1 and area1 < area2) or (not larger_is_1 and area2 < area1):
        logger.debug(
            f"較大圖像判斷與面積不一致: {image1.width}x{image1.height} vs {image2.width}x{image2.height}，"
            f"縮放目標為{'圖像1' if larger_is_1 else '圖像2'}"
        )

    if larger_is_1:
        resized_mask = resize_mask(mask2, image1.width, image1.height)
        original_mask = mask1
        resized = 'image2'
    else:
        resized_mask = resize_mask(mask1, image2.width, image2.height)
        original_mask = mask2
        resized = 'image1'

    agreement = count_agreement(resized_mask, original_mask)
    return ImageComparison(
        similarity=agreement.ratio,
        image1_size=image1.size,
        image2_size=image2.size,
        resized=resized,
        target_size=(original_mask.width, original_mask.height),
        matched_positions=agreement.matched,
        total_positions=agreement.total,
        foreground_ratio1=mask1.foreground_ratio(),
        foreground_ratio2=mask2.foreground_ratio(),
    )


def compare_images(image1: PixelBuffer, image2: PixelBuffer) -> float:
    """
    比對兩張圖像

    Args:
        image1: 圖像1 像素緩衝區
        image2: 圖像2 像素緩衝區

    Returns:
        相似度 (0-1)
    """
    return compare_images_detailed(image1, image2).similarity


async def compare_sources(source1: ImageSource, source2: ImageSource) -> float:
    """
    同時解碼兩個來源後比對

    任一來源解碼失敗時拋出 ImageDecodeError，不會重試。
    """
    image1, image2 = await asyncio.gather(load_image_async(source1), load_image_async(source2))
    return compare_images(image1, image2)


def compare_many(
    reference: PixelBuffer,
    candidates: Sequence[PixelBuffer],
    max_workers: Optional[int] = None,
) -> list[float]:
    """
    以多執行緒比對一張參考圖與多張候選圖

    Args:
        reference: 參考圖像
        candidates: 候選圖像列表
        max_workers: 最大線程數（None 時由 ThreadPoolExecutor 決定）

    Returns:
        與 candidates 同順序的相似度列表
    """
    if not candidates:
        return []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(compare_images, reference, c) for c in candidates]
        return [f.result() for f in futures]

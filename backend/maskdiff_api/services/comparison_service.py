"""
比對服務
"""

import logging
import time
from typing import Dict, List, Optional, Tuple

from maskdiff.decode import decode_image_bytes
from maskdiff.exceptions import ImageDecodeError
from maskdiff.image_compare import compare_images_detailed, compare_many
from maskdiff.pixel_buffer import PixelBuffer

from maskdiff_api.comparison_config import load_comparison_defaults
from maskdiff_api.config import settings
from maskdiff_api.exceptions import TooManyCandidatesError, UploadTooLargeError

logger = logging.getLogger(__name__)


class ComparisonService:
    """比對服務類（不保存任何狀態，每次請求獨立）"""

    def __init__(self, max_workers: Optional[int] = None):
        self.max_workers = max_workers or settings.MAX_COMPARISON_THREADS
        self.defaults = load_comparison_defaults()

    def resolve_threshold(self, threshold: Optional[float]) -> float:
        if threshold is None:
            return self.defaults.threshold_default
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"閾值必須在 0 到 1 之間，收到 {threshold}")
        return threshold

    def decode_upload(self, content: bytes, label: str) -> PixelBuffer:
        """
        解碼上傳的圖像

        Args:
            content: 文件內容
            label: 用於錯誤訊息的名稱（例如 image1）

        Returns:
            PixelBuffer
        """
        if len(content) > settings.MAX_UPLOAD_SIZE:
            logger.warning(f"[服務層] {label} 大小 {len(content)} 超過上限 {settings.MAX_UPLOAD_SIZE}")
            raise UploadTooLargeError(
                f"{label} 文件大小超過限制 ({settings.MAX_UPLOAD_SIZE / 1024 / 1024}MB)"
            )
        try:
            return decode_image_bytes(content)
        except ImageDecodeError as e:
            logger.warning(f"[服務層] {label} 解碼失敗: {e}")
            raise ImageDecodeError(f"{label}: {e}") from e

    def compare(self, image1_content: bytes, image2_content: bytes,
                threshold: Optional[float] = None) -> Dict:
        """
        比對兩張上傳圖像

        Args:
            image1_content: 圖像1 文件內容
            image2_content: 圖像2 文件內容
            threshold: 相似度閾值（None 時使用設定檔預設值）

        Returns:
            比對結果字典（對應 ComparisonResponse）
        """
        threshold = self.resolve_threshold(threshold)
        image1 = self.decode_upload(image1_content, "image1")
        image2 = self.decode_upload(image2_content, "image2")

        start = time.time()
        result = compare_images_detailed(image1, image2)
        elapsed = time.time() - start

        is_match = result.similarity >= threshold
        logger.info(
            f"[服務層] 比對完成 {image1.width}x{image1.height} vs {image2.width}x{image2.height}，"
            f"相似度: {result.similarity:.4f}，閾值: {threshold}，耗時: {elapsed:.3f} 秒"
        )

        data = result.to_dict()
        data['is_match'] = is_match
        data['threshold'] = threshold
        return data

    def compare_batch(self, reference_content: bytes,
                      candidates: List[Tuple[Optional[str], bytes]],
                      threshold: Optional[float] = None) -> Dict:
        """
        以一張參考圖比對多張候選圖

        Args:
            reference_content: 參考圖文件內容
            candidates: (文件名, 文件內容) 列表
            threshold: 相似度閾值

        Returns:
            批次比對結果字典（對應 BatchComparisonResponse）
        """
        threshold = self.resolve_threshold(threshold)
        limit = self.defaults.max_candidates_default
        if len(candidates) > limit:
            raise TooManyCandidatesError(f"候選圖數量 {len(candidates)} 超過上限 {limit}")

        logger.info(f"[服務層] 開始批次比對，候選圖數量: {len(candidates)}，線程數: {self.max_workers}")
        reference = self.decode_upload(reference_content, "reference")
        buffers = [
            self.decode_upload(content, f"candidates[{idx}]")
            for idx, (_, content) in enumerate(candidates)
        ]

        start = time.time()
        scores = compare_many(reference, buffers, max_workers=self.max_workers)
        elapsed = time.time() - start

        results = []
        for idx, ((filename, _), score) in enumerate(zip(candidates, scores)):
            results.append({
                'index': idx,
                'filename': filename,
                'similarity': score,
                'is_match': score >= threshold,
            })
        match_count = sum(1 for r in results if r['is_match'])
        logger.info(f"[服務層] 批次比對完成，匹配 {match_count}/{len(results)}，耗時: {elapsed:.3f} 秒")

        return {
            'threshold': threshold,
            'total_count': len(results),
            'match_count': match_count,
            'results': results,
        }

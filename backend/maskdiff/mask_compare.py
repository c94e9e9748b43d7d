"""
遮罩比對
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from maskdiff.exceptions import DegenerateComparisonError
from maskdiff.mask import Mask


@dataclass(frozen=True)
class MaskAgreement:
    matched: int  # 兩遮罩都有定義且值相同的格子數
    total: int  # 外框面積 max(寬) x max(高)

    @property
    def ratio(self) -> float:
        return self.matched / self.total


def count_agreement(mask_a: Mask, mask_b: Mask) -> MaskAgreement:
    """
    計算兩遮罩在共同外框上的一致格子數

    只有兩個遮罩都有定義的位置才可能算一致；超出較小遮罩範圍的位置
    仍計入分母。尺寸不同的遮罩因此一定會被扣分。

    Raises:
        DegenerateComparisonError: 外框面積為 0
    """
    width = max(mask_a.width, mask_b.width)
    height = max(mask_a.height, mask_b.height)
    total = width * height
    if total == 0:
        raise DegenerateComparisonError(
            f"兩個遮罩的外框面積為 0（{mask_a.width}x{mask_a.height} 與 {mask_b.width}x{mask_b.height}）"
        )

    overlap_w = min(mask_a.width, mask_b.width)
    overlap_h = min(mask_a.height, mask_b.height)
    region_a = mask_a.bits[:overlap_h, :overlap_w]
    region_b = mask_b.bits[:overlap_h, :overlap_w]
    matched = int(np.count_nonzero(region_a == region_b))
    return MaskAgreement(matched=matched, total=total)


def compare_masks(mask_a: Mask, mask_b: Mask) -> float:
    """
    比對兩個遮罩，回傳一致比例

    Args:
        mask_a: 遮罩 A
        mask_b: 遮罩 B（尺寸不必與 A 相同）

    Returns:
        相似度 (0-1)
    """
    return count_agreement(mask_a, mask_b).ratio

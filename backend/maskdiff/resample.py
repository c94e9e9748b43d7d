"""
遮罩重新取樣（最近鄰）
"""

import logging

import numpy as np

from maskdiff.exceptions import InvalidDimensionError
from maskdiff.mask import Mask

logger = logging.getLogger(__name__)


def nearest_indices(source_len: int, target_len: int) -> np.ndarray:
    """
    目標索引 i 對應的來源索引 floor(i * source_len / target_len)

    以整數運算求值，避免浮點縮放在邊界上差一格。
    """
    return (np.arange(target_len, dtype=np.int64) * source_len) // target_len


def resize_mask(mask: Mask, new_width: int, new_height: int) -> Mask:
    """
    以最近鄰法把遮罩縮放到指定尺寸

    每個目標格子直接複製來源格子，不做內插，因此縮放是有損的；
    只有整數倍放大後再縮回才會還原。

    Args:
        mask: 來源遮罩（寬高都必須 >= 1）
        new_width: 目標寬度
        new_height: 目標高度

    Returns:
        新的 Mask，原遮罩不變

    Raises:
        InvalidDimensionError: 來源寬或高為 0，或目標尺寸為負數
    """
    if mask.width == 0 or mask.height == 0:
        raise InvalidDimensionError(
            f"無法縮放空遮罩（來源尺寸 {mask.width}x{mask.height}）"
        )
    if new_width < 0 or new_height < 0:
        raise InvalidDimensionError(f"目標尺寸不能為負數: {new_width}x{new_height}")

    if new_width == 0 or new_height == 0:
        return Mask.from_array(np.zeros((new_height, new_width), dtype=np.uint8))

    xs = nearest_indices(mask.width, new_width)
    ys = nearest_indices(mask.height, new_height)
    logger.debug(f"縮放遮罩 {mask.width}x{mask.height} -> {new_width}x{new_height}")
    return Mask.from_array(mask.bits[np.ix_(ys, xs)])

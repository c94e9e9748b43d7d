"""
二值遮罩與遮罩建立
以紅色通道是否為 0 把圖像切成「零紅色」與「非零紅色」兩類像素
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from maskdiff.pixel_buffer import PixelBuffer


@dataclass(frozen=True, eq=False)
class Mask:
    """
    二值遮罩。

    bits 形狀為 (height, width)，值為 0 或 1；以 mask[x, y] 取值時
    x 為欄、y 為列。
    """

    bits: np.ndarray

    def __post_init__(self) -> None:
        bits = np.asarray(self.bits)
        if bits.ndim != 2:
            raise ValueError(f"遮罩必須是二維陣列，收到 {bits.shape}")
        # 非 0 值一律視為 1，並保存唯讀副本
        arr = (bits != 0).astype(np.uint8)
        arr.setflags(write=False)
        object.__setattr__(self, "bits", arr)

    @classmethod
    def from_array(cls, bits: np.ndarray) -> "Mask":
        return cls(bits=bits)

    @classmethod
    def from_columns(cls, columns: List[List[int]]) -> "Mask":
        """由 [x][y] 巢狀列表建立遮罩"""
        if not columns:
            return cls.from_array(np.zeros((0, 0), dtype=np.uint8))
        return cls.from_array(np.array(columns, dtype=np.uint8).T)

    @property
    def width(self) -> int:
        return int(self.bits.shape[1])

    @property
    def height(self) -> int:
        return int(self.bits.shape[0])

    @property
    def area(self) -> int:
        return self.width * self.height

    def __getitem__(self, xy) -> int:
        x, y = xy
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"座標 ({x}, {y}) 超出遮罩範圍 {self.width}x{self.height}")
        return int(self.bits[y, x])

    def __eq__(self, other) -> bool:
        if not isinstance(other, Mask):
            return NotImplemented
        return self.bits.shape == other.bits.shape and bool(np.array_equal(self.bits, other.bits))

    __hash__ = None

    def foreground_ratio(self) -> float:
        """值為 1 的格子所佔比例（空遮罩回傳 0.0）"""
        if self.area == 0:
            return 0.0
        return float(np.count_nonzero(self.bits)) / float(self.area)

    def to_rows(self) -> List[List[int]]:
        return self.bits.tolist()


def build_mask(buffer: PixelBuffer) -> Mask:
    """
    由像素緩衝區建立遮罩

    紅色通道（第 0 通道）等於 0 的像素為 1，其餘為 0；
    綠、藍、alpha 通道不參與判斷。

    Args:
        buffer: 已解碼的像素緩衝區

    Returns:
        與緩衝區同尺寸的 Mask
    """
    red = buffer.data[:, :, 0]
    return Mask.from_array(red == 0)

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    已解碼的 RGBA 像素緩衝區。

    data 形狀為 (height, width, 4)、dtype uint8，原點在左上角，逐列儲存。
    建立後陣列設為唯讀，不會再被修改。
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        data = np.asarray(self.data)
        if data.shape != (self.height, self.width, 4):
            raise ValueError(
                f"像素資料形狀 {data.shape} 與尺寸 {self.width}x{self.height} 不符"
            )
        # 持有唯讀的私有副本
        data = np.array(data, dtype=np.uint8, copy=True)
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelBuffer":
        """
        由 (H, W, 4) 陣列建立緩衝區（會複製一份）

        Args:
            rgba: RGBA 像素陣列

        Returns:
            PixelBuffer
        """
        if rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError(f"需要 (H, W, 4) 的 RGBA 陣列，收到 {rgba.shape}")
        h, w = rgba.shape[:2]
        return cls(width=int(w), height=int(h), data=rgba)

    @classmethod
    def from_bytes(cls, width: int, height: int, raw: bytes) -> "PixelBuffer":
        """
        由扁平 RGBA 位元組建立緩衝區（例如 canvas getImageData 的輸出）

        Args:
            width: 寬度
            height: 高度
            raw: 長度為 width * height * 4 的位元組

        Returns:
            PixelBuffer
        """
        expected = width * height * 4
        if len(raw) != expected:
            raise ValueError(f"RGBA 資料長度應為 {expected}，實際為 {len(raw)}")
        arr = np.frombuffer(raw, dtype=np.uint8).reshape(height, width, 4)
        return cls.from_array(arr)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

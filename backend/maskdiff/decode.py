"""
圖像解碼
把圖像檔案或位元組轉成 RGBA PixelBuffer，供比對核心使用
"""

import asyncio
import io
import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np
from PIL import Image

from maskdiff.exceptions import ImageDecodeError
from maskdiff.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes]


def _to_uint8(img: np.ndarray) -> np.ndarray:
    if img.dtype == np.uint8:
        return img
    if img.dtype == np.uint16:
        return (img >> 8).astype(np.uint8)
    # 浮點格式（HDR 等）假設範圍 0-1
    return np.clip(img.astype(np.float64) * 255.0, 0, 255).astype(np.uint8)


def _cv2_to_rgba(img: np.ndarray) -> np.ndarray:
    img = _to_uint8(img)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    channels = img.shape[2]
    if channels == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    raise ImageDecodeError(f"不支援的通道數: {channels}")


def _decode_with_cv2(raw: bytes) -> Optional[np.ndarray]:
    buf = np.frombuffer(raw, dtype=np.uint8)
    try:
        img = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        logger.debug(f"OpenCV 解碼失敗: {e}")
        return None
    if img is None or img.size == 0:
        return None
    return _cv2_to_rgba(img)


def _decode_with_pillow(raw: bytes) -> np.ndarray:
    # OpenCV 不支援的格式（例如 GIF）交給 Pillow，取第一個影格
    try:
        with Image.open(io.BytesIO(raw)) as im:
            im.load()
            return np.array(im.convert("RGBA"), dtype=np.uint8)
    except (OSError, ValueError, SyntaxError, EOFError) as e:
        raise ImageDecodeError(f"無法解碼圖像資料: {e}") from e


def _zero_transparent(rgba: np.ndarray) -> np.ndarray:
    """
    alpha 為 0 的像素，顏色通道一律歸零。

    瀏覽器 canvas 以預乘 alpha 儲存，完全透明的像素讀回來是 (0, 0, 0, 0)，
    這裡保持相同行為，透明區域因此會被視為零紅色。
    """
    transparent = rgba[:, :, 3] == 0
    if not transparent.any():
        return rgba
    out = rgba.copy()
    out[transparent, :3] = 0
    return out


def decode_image_bytes(raw: bytes) -> PixelBuffer:
    """
    解碼圖像位元組

    Args:
        raw: 圖像檔案內容（PNG、JPG、BMP、GIF 等）

    Returns:
        RGBA PixelBuffer

    Raises:
        ImageDecodeError: 資料為空或無法解碼
    """
    if not raw:
        raise ImageDecodeError("圖像資料為空")

    rgba = _decode_with_cv2(raw)
    if rgba is None:
        rgba = _decode_with_pillow(raw)

    if rgba.shape[0] == 0 or rgba.shape[1] == 0:
        raise ImageDecodeError("圖像尺寸為 0")

    return PixelBuffer.from_array(_zero_transparent(rgba))


def load_image(image_path: Union[str, Path]) -> PixelBuffer:
    """
    載入圖像檔案

    Args:
        image_path: 圖像路徑

    Returns:
        RGBA PixelBuffer

    Raises:
        ImageDecodeError: 檔案不存在、無法讀取或無法解碼
    """
    path = Path(image_path)
    if not path.exists():
        raise ImageDecodeError(f"找不到圖像文件 {image_path}")
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"無法讀取圖像文件 {image_path}: {e}") from e

    try:
        return decode_image_bytes(raw)
    except ImageDecodeError as e:
        raise ImageDecodeError(f"無法讀取圖像文件 {image_path}: {e}") from e


async def load_image_async(source: ImageSource) -> PixelBuffer:
    """
    非同步解碼（在執行緒中執行阻塞的檔案讀取與解碼）

    Args:
        source: 圖像路徑或位元組
    """
    if isinstance(source, (bytes, bytearray)):
        return await asyncio.to_thread(decode_image_bytes, bytes(source))
    return await asyncio.to_thread(load_image, source)

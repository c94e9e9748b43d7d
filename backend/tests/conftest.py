"""
Pytest 配置和共享夾具
"""

import pytest
import numpy as np
import cv2
from pathlib import Path
import tempfile
import shutil

from maskdiff.pixel_buffer import PixelBuffer


def make_rgba(width, height, red=0, green=0, blue=0, alpha=255):
    """創建單色 RGBA 陣列"""
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[:, :] = (red, green, blue, alpha)
    return img


@pytest.fixture
def temp_dir():
    """創建臨時目錄"""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def make_buffer():
    """創建單色像素緩衝區的工廠"""
    def _make(width, height, red=0, green=0, blue=0, alpha=255):
        return PixelBuffer.from_array(make_rgba(width, height, red, green, blue, alpha))
    return _make


@pytest.fixture
def zero_red_4x4():
    """4x4、紅色通道全為 0 的圖像"""
    return PixelBuffer.from_array(make_rgba(4, 4, red=0, green=120, blue=200))


@pytest.fixture
def one_pixel_changed_4x4():
    """4x4、只有 (2, 1) 的紅色通道非 0 的圖像"""
    img = make_rgba(4, 4, red=0, green=120, blue=200)
    img[1, 2, 0] = 255
    return PixelBuffer.from_array(img)


@pytest.fixture
def write_png(temp_dir):
    """把 BGR/BGRA/灰度陣列寫成 PNG 並回傳路徑"""
    counter = {'n': 0}

    def _write(img, name=None):
        counter['n'] += 1
        path = temp_dir / (name or f"image_{counter['n']}.png")
        assert cv2.imwrite(str(path), img)
        return path
    return _write


@pytest.fixture
def png_bytes():
    """把 BGR/BGRA/灰度陣列編碼成 PNG 位元組"""
    def _encode(img):
        ok, buf = cv2.imencode(".png", img)
        assert ok
        return buf.tobytes()
    return _encode

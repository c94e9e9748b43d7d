"""
圖像比對流程測試
"""

import asyncio

import numpy as np
import pytest

from maskdiff.exceptions import ImageDecodeError
from maskdiff.image_compare import (
    compare_images,
    compare_images_detailed,
    compare_many,
    compare_sources,
    image1_is_larger,
)
from maskdiff.pixel_buffer import PixelBuffer


class TestCompareImages:
    """compare_images 測試類"""

    def test_identical_4x4(self, zero_red_4x4):
        copy = PixelBuffer.from_array(zero_red_4x4.data)
        assert compare_images(zero_red_4x4, copy) == 1.0

    def test_one_pixel_changed(self, zero_red_4x4, one_pixel_changed_4x4):
        assert compare_images(zero_red_4x4, one_pixel_changed_4x4) == pytest.approx(15 / 16)
        assert compare_images(one_pixel_changed_4x4, zero_red_4x4) == pytest.approx(0.9375)

    def test_self_similarity(self):
        rng = np.random.default_rng(3)
        img = rng.integers(0, 3, size=(7, 5, 4), dtype=np.uint8)
        buf = PixelBuffer.from_array(img)
        assert compare_images(buf, buf) == 1.0

    def test_deterministic(self, zero_red_4x4, make_buffer):
        other = make_buffer(3, 9, red=255)
        first = compare_images(zero_red_4x4, other)
        assert all(compare_images(zero_red_4x4, other) == first for _ in range(5))

    def test_range(self, make_buffer):
        for (w1, h1), (w2, h2) in [((1, 1), (5, 3)), ((4, 2), (2, 4)), ((6, 6), (6, 6))]:
            score = compare_images(make_buffer(w1, h1, red=0), make_buffer(w2, h2, red=7))
            assert 0.0 <= score <= 1.0

    def test_smaller_image_upsampled(self, make_buffer):
        """2x2 全零紅色對 4x4 左半零紅色：放大後左半一致"""
        img = np.full((4, 4, 4), 255, dtype=np.uint8)
        img[:, :2, 0] = 0
        half = PixelBuffer.from_array(img)
        result = compare_images_detailed(make_buffer(2, 2, red=0), half)
        assert result.resized == 'image1'
        assert result.target_size == (4, 4)
        assert result.similarity == pytest.approx(0.5)
        assert (result.matched_positions, result.total_positions) == (8, 16)

    def test_larger_image1_keeps_original(self, make_buffer):
        result = compare_images_detailed(make_buffer(4, 4, red=0), make_buffer(1, 1, red=0))
        assert result.resized == 'image2'
        assert result.target_size == (4, 4)
        assert result.similarity == 1.0

    def test_detailed_reports_sizes_and_foreground(self, make_buffer):
        result = compare_images_detailed(make_buffer(3, 2, red=0), make_buffer(3, 2, red=9))
        assert result.image1_size == (3, 2)
        assert result.image2_size == (3, 2)
        assert result.foreground_ratio1 == 1.0
        assert result.foreground_ratio2 == 0.0
        assert result.to_dict()['target_size'] == [3, 2]


class TestLargerImageHeuristic:
    """「較大圖像」以寬或高任一邊判斷"""

    def test_tie_resizes_image1(self, make_buffer):
        assert image1_is_larger(make_buffer(4, 4), make_buffer(4, 4)) is False

    def test_taller_but_smaller_area_still_larger(self, make_buffer):
        """1x10（面積 10）對 5x5（面積 25）：圖像1 較高，因此視為較大"""
        tall = make_buffer(1, 10, red=0)
        square = make_buffer(5, 5, red=0)
        assert image1_is_larger(tall, square) is True
        result = compare_images_detailed(tall, square)
        assert result.resized == 'image2'
        assert result.target_size == (1, 10)
        assert result.similarity == 1.0

    def test_narrower_but_taller_image1_is_larger(self, make_buffer):
        """2x2 對 3x1：圖像1 較高，即使較窄仍視為較大"""
        assert image1_is_larger(make_buffer(2, 2), make_buffer(3, 1)) is True

    def test_wider_image2(self, make_buffer):
        assert image1_is_larger(make_buffer(2, 1), make_buffer(3, 1)) is False


class TestCompareMany:
    """compare_many 測試類"""

    def test_results_in_candidate_order(self, zero_red_4x4, one_pixel_changed_4x4, make_buffer):
        candidates = [one_pixel_changed_4x4, zero_red_4x4, make_buffer(2, 2, red=50)]
        scores = compare_many(zero_red_4x4, candidates, max_workers=2)
        assert scores == [pytest.approx(15 / 16), 1.0, 0.0]

    def test_no_candidates(self, zero_red_4x4):
        assert compare_many(zero_red_4x4, []) == []


class TestCompareSources:
    """compare_sources 測試類"""

    def test_path_and_bytes(self, write_png, png_bytes):
        img = np.zeros((4, 4, 3), dtype=np.uint8)  # 黑色：紅色通道為 0
        path = write_png(img)
        score = asyncio.run(compare_sources(str(path), png_bytes(img)))
        assert score == 1.0

    def test_decode_failure_aborts(self, write_png, temp_dir):
        path = write_png(np.zeros((2, 2, 3), dtype=np.uint8))
        with pytest.raises(ImageDecodeError):
            asyncio.run(compare_sources(path, temp_dir / "missing.png"))

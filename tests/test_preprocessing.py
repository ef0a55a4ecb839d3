"""Tests for image decoding and pixel buffer handling."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from breedlens.errors import ImageDecodeError
from breedlens.ml.preprocessing import (
    PixelBuffer,
    decode_image,
    pixel_buffer,
    preprocess_for_classification,
)


def _encode(img: Image.Image, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


class TestDecodeImage:
    def test_decodes_png_to_rgb_array(self, png_bytes: bytes) -> None:
        array = decode_image(png_bytes, max_pixels=10_000)
        assert array.shape == (24, 32, 3)
        assert array.dtype == np.uint8
        assert tuple(array[0, 0]) == (200, 120, 40)

    def test_converts_grayscale_to_rgb(self) -> None:
        data = _encode(Image.new("L", (8, 8), 128))
        array = decode_image(data, max_pixels=10_000)
        assert array.shape == (8, 8, 3)

    def test_rejects_non_image_bytes(self) -> None:
        with pytest.raises(ImageDecodeError, match="Cannot decode"):
            decode_image(b"definitely not an image", max_pixels=10_000)

    def test_rejects_truncated_image(self, png_bytes: bytes) -> None:
        with pytest.raises(ImageDecodeError):
            decode_image(png_bytes[:40], max_pixels=10_000)

    def test_rejects_oversized_image(self, png_bytes: bytes) -> None:
        with pytest.raises(ImageDecodeError, match="too large"):
            decode_image(png_bytes, max_pixels=100)


class TestPreprocessForClassification:
    def test_output_shape_and_range(self) -> None:
        image = np.zeros((50, 80, 3), dtype=np.uint8)
        image[..., 0] = 255
        pixels = preprocess_for_classification(image, 224)

        assert pixels.shape == (1, 3, 224, 224)
        assert pixels.dtype == np.float32
        assert np.allclose(pixels[0, 0], 1.0)
        assert np.allclose(pixels[0, 1], -1.0)
        assert np.allclose(pixels[0, 2], -1.0)

    def test_wide_image_centre_cropped_not_squashed(self) -> None:
        image = np.zeros((100, 300, 3), dtype=np.uint8)
        image[:, :100] = (255, 0, 0)
        image[:, 100:200] = (0, 0, 255)
        image[:, 200:] = (255, 0, 0)

        pixels = preprocess_for_classification(image, 224)

        assert pixels.shape == (1, 3, 224, 224)
        assert np.allclose(pixels[0, 0], -1.0)
        assert np.allclose(pixels[0, 2], 1.0)

    def test_tall_image_keeps_square_output(self) -> None:
        image = np.full((400, 120, 3), 255, dtype=np.uint8)
        pixels = preprocess_for_classification(image, 192)
        assert pixels.shape == (1, 3, 192, 192)
        assert np.allclose(pixels, 1.0)


class TestPixelBuffer:
    def test_release_drops_pixels(self) -> None:
        buffer = PixelBuffer(np.zeros((1, 3, 4, 4), dtype=np.float32))
        assert not buffer.released
        buffer.release()
        assert buffer.released
        with pytest.raises(RuntimeError, match="released"):
            _ = buffer.pixels

    def test_context_manager_releases_on_exit(self, png_bytes: bytes) -> None:
        with pixel_buffer(png_bytes, 64, 10_000) as buffer:
            assert buffer.pixels.shape == (1, 3, 64, 64)
        assert buffer.released

    def test_context_manager_releases_on_error(self, png_bytes: bytes) -> None:
        with pytest.raises(ValueError, match="boom"), pixel_buffer(png_bytes, 64, 10_000) as buffer:
            raise ValueError("boom")
        assert buffer.released

"""Image preprocessing pipeline.

Decodes raw file bytes into RGB arrays (EXIF orientation applied, size
limits enforced) and turns them into the transient pixel buffer a MobileNet
model consumes.
"""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from breedlens.errors import ImageDecodeError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def decode_image(image_bytes: bytes, max_pixels: int) -> NDArray[np.uint8]:
    """Decode raw image bytes into an RGB uint8 numpy array.

    Args:
        image_bytes: Raw file bytes (any format Pillow can read).
        max_pixels: Upper bound on width * height.

    Returns:
        HxWx3 RGB uint8 numpy array.

    Raises:
        ImageDecodeError: If the image cannot be decoded or exceeds size limits.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            width, height = img.size
            if width * height > max_pixels:
                raise ImageDecodeError(f"Image too large: {width}x{height} exceeds {max_pixels} pixels")
            oriented = ImageOps.exif_transpose(img)
            rgb = oriented.convert("RGB")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"Cannot decode image: {exc}") from exc
    return np.asarray(rgb, dtype=np.uint8)


def preprocess_for_classification(image: NDArray[np.uint8], input_size: int) -> NDArray[np.float32]:
    """Turn an RGB array into a 1x3xHxW tensor in [-1, 1].

    The shortest edge is resized to ``input_size * 256 / 224`` (256 for a
    224 model) keeping the aspect ratio, then the centre is cropped to
    ``input_size`` square.
    """
    height, width = image.shape[:2]
    short_edge = round(input_size * 256 / 224)
    scale = short_edge / min(height, width)
    new_width = max(input_size, round(width * scale))
    new_height = max(input_size, round(height * scale))
    resized = Image.fromarray(image).resize((new_width, new_height), Image.Resampling.BILINEAR)

    left = (new_width - input_size) // 2
    top = (new_height - input_size) // 2
    cropped = resized.crop((left, top, left + input_size, top + input_size))

    pixels = np.asarray(cropped, dtype=np.float32) / 127.5 - 1.0
    return np.ascontiguousarray(pixels.transpose(2, 0, 1)[np.newaxis, ...])


class PixelBuffer:
    """Owns the model-input tensor for one classification call."""

    def __init__(self, pixels: NDArray[np.float32]) -> None:
        self._pixels: NDArray[np.float32] | None = pixels

    @property
    def pixels(self) -> NDArray[np.float32]:
        if self._pixels is None:
            raise RuntimeError("Pixel buffer already released")
        return self._pixels

    @property
    def released(self) -> bool:
        return self._pixels is None

    def release(self) -> None:
        self._pixels = None


@contextmanager
def pixel_buffer(image_bytes: bytes, input_size: int, max_pixels: int) -> Iterator[PixelBuffer]:
    """Decode and preprocess an image, releasing the tensor on exit."""
    decoded = decode_image(image_bytes, max_pixels)
    buffer = PixelBuffer(preprocess_for_classification(decoded, input_size))
    del decoded
    try:
        yield buffer
    finally:
        buffer.release()
        logger.debug("Released %dx%d pixel buffer", input_size, input_size)

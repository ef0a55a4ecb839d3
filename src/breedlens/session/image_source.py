"""Image ingestion: turn an uploaded file into an immutable SourceImage."""

from __future__ import annotations

import asyncio
import base64
import logging
import uuid
from dataclasses import dataclass, field

from breedlens.errors import ImageTooLargeError, UnimplementedFeatureError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class SourceImage:
    """A user-supplied image.

    ``data_uri`` is the stable reference used for display and history; the raw
    ``data`` is what gets decoded for inference. Format is not validated here,
    a non-image file only fails once it is decoded.
    """

    image_id: str
    filename: str | None
    content_type: str
    data: bytes = field(repr=False)
    data_uri: str = field(repr=False)


def encode_data_uri(data: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


class ImageSource:
    """Creates SourceImages from uploaded files."""

    def __init__(self, max_file_size: int) -> None:
        self._max_file_size = max_file_size

    async def ingest(
        self,
        data: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> SourceImage:
        """Wrap uploaded bytes into a SourceImage.

        Raises:
            ImageTooLargeError: If the file exceeds the configured size limit.
        """
        if len(data) > self._max_file_size:
            raise ImageTooLargeError(f"File is {len(data)} bytes, limit is {self._max_file_size}")

        media_type = content_type or DEFAULT_CONTENT_TYPE
        data_uri = await asyncio.to_thread(encode_data_uri, data, media_type)
        image = SourceImage(
            image_id=uuid.uuid4().hex,
            filename=filename,
            content_type=media_type,
            data=data,
            data_uri=data_uri,
        )
        logger.info("Ingested image %s (%s, %d bytes)", image.image_id, media_type, len(data))
        return image

    def capture_camera(self) -> SourceImage:
        """Camera capture is part of the surface but not implemented."""
        raise UnimplementedFeatureError("Camera capture is not implemented")

"""Classification engine: image in, localized top prediction out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from breedlens.errors import ImageDecodeError, InferenceError
from breedlens.messages import format_prediction
from breedlens.ml.labels import localize
from breedlens.ml.preprocessing import pixel_buffer
from breedlens.session.history import HistoryEntry

if TYPE_CHECKING:
    from collections.abc import Callable

    from breedlens.ml.image_classifier import ClassificationResult, ImageClassifier
    from breedlens.ml.inference import InferencePool
    from breedlens.session.image_source import SourceImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationOutcome:
    """Result of one successful classification."""

    entry: HistoryEntry
    text: str
    top: ClassificationResult


class ClassificationEngine:
    """Decodes an image, runs the model, and formats the top result."""

    def __init__(
        self,
        pool: InferencePool,
        *,
        max_image_pixels: int,
        localizer: Callable[[str], str] = localize,
    ) -> None:
        self._pool = pool
        self._max_image_pixels = max_image_pixels
        self._localize = localizer

    async def classify(
        self,
        model: ImageClassifier | None,
        image: SourceImage | None,
    ) -> ClassificationOutcome | None:
        """Classify ``image`` with ``model``.

        Returns None without doing anything when either is missing.

        Raises:
            ImageDecodeError: If the image cannot be decoded.
            InferenceError: If the model fails, returns nothing, or resources
                run out.
        """
        if model is None or image is None:
            return None

        try:
            predictions = await self._pool.run(self._infer, model, image.data)
        except ImageDecodeError:
            raise
        except TimeoutError as exc:
            raise InferenceError("Inference pool is saturated") from exc
        except MemoryError as exc:
            raise InferenceError("Out of memory during inference") from exc
        except Exception as exc:
            raise InferenceError(f"Model {model.model_name} failed: {exc}") from exc

        if not predictions:
            raise InferenceError(f"Model {model.model_name} returned no results")

        # Models rank best-first; no re-sorting.
        top = predictions[0]
        display_label = self._localize(top.label)
        logger.info(
            "Image %s classified as %r -> %s (%.4f)",
            image.image_id,
            top.label,
            display_label,
            top.confidence,
        )
        return ClassificationOutcome(
            entry=HistoryEntry(image=image.data_uri, prediction=display_label),
            text=format_prediction(display_label, top.confidence),
            top=top,
        )

    def _infer(self, model: ImageClassifier, data: bytes) -> list[ClassificationResult]:
        with pixel_buffer(data, model.input_size, self._max_image_pixels) as buffer:
            return model.classify(buffer.pixels)

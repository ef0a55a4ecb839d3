"""Shared fixtures: fake models, fake model manager, and test images."""

from __future__ import annotations

import io
import threading
import uuid
from typing import TYPE_CHECKING

import pytest
from PIL import Image

from breedlens import messages
from breedlens.config import Settings
from breedlens.ml.image_classifier import ClassificationResult
from breedlens.ml.inference import InferencePool
from breedlens.ml.model_manager import ModelState
from breedlens.session.image_source import SourceImage, encode_data_uri

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    import numpy as np
    from numpy.typing import NDArray

    from breedlens.notifications import Notifier


class FakeClassifier:
    """ImageClassifier returning canned results."""

    def __init__(
        self,
        results: list[ClassificationResult] | None = None,
        *,
        error: Exception | None = None,
        input_size: int = 224,
        gate: threading.Event | None = None,
    ) -> None:
        self.results = results if results is not None else []
        self.error = error
        self.gate = gate
        self.shapes: list[tuple[int, ...]] = []
        self._input_size = input_size

    @property
    def model_name(self) -> str:
        return "fake_mobilenet"

    @property
    def input_size(self) -> int:
        return self._input_size

    def classify(self, pixels: NDArray[np.float32]) -> list[ClassificationResult]:
        self.shapes.append(tuple(pixels.shape))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return list(self.results)


class FakeModelManager:
    """ModelManager whose load succeeds with ``model`` or fails."""

    def __init__(self, notifier: Notifier, model: FakeClassifier | None = None) -> None:
        self._notifier = notifier
        self._model_to_load = model
        self._model: FakeClassifier | None = None
        self._state = ModelState.UNLOADED
        self._callback: Callable[[ModelState], None] | None = None
        self.load_calls = 0

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def model(self) -> FakeClassifier | None:
        return self._model

    def is_ready(self) -> bool:
        return self._state == ModelState.READY

    def on_settled(self, callback: Callable[[ModelState], None]) -> None:
        self._callback = callback

    async def load(self) -> None:
        self.load_calls += 1
        self._state = ModelState.LOADING
        if self._model_to_load is None:
            self._state = ModelState.FAILED
            self._notifier.notify(messages.MODEL_LOAD_FAILED)
        else:
            self._model = self._model_to_load
            self._state = ModelState.READY
            self._notifier.notify(messages.MODEL_LOADED)
        if self._callback is not None:
            self._callback(self._state)


def make_png(width: int = 32, height: int = 24, color: tuple[int, int, int] = (200, 120, 40)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def settings() -> Settings:
    return Settings(max_concurrent=1)


@pytest.fixture()
def pool(settings: Settings) -> Iterator[InferencePool]:
    inference_pool = InferencePool(settings)
    yield inference_pool
    inference_pool.shutdown()


@pytest.fixture()
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture()
def make_model() -> Callable[..., FakeClassifier]:
    return FakeClassifier


@pytest.fixture()
def make_manager() -> Callable[..., FakeModelManager]:
    return FakeModelManager


@pytest.fixture()
def make_image() -> Callable[..., SourceImage]:
    def _make(data: bytes | None = None, content_type: str = "image/png") -> SourceImage:
        payload = make_png() if data is None else data
        return SourceImage(
            image_id=uuid.uuid4().hex,
            filename="dog.png",
            content_type=content_type,
            data=payload,
            data_uri=encode_data_uri(payload, content_type),
        )

    return _make

"""Session controller.

Owns the session state and wires model loading, image ingestion,
classification and history together. All mutation happens on the event
loop; each operation converts its own errors into a single notification.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from breedlens import messages
from breedlens.errors import BreedLensError, ImageDecodeError, InferenceError, UnimplementedFeatureError
from breedlens.ml.model_manager import ModelState
from breedlens.session.state import (
    SessionState,
    can_classify,
    is_current,
    with_image,
    with_model_state,
    with_prediction,
)

if TYPE_CHECKING:
    from breedlens.ml.engine import ClassificationEngine, ClassificationOutcome
    from breedlens.ml.model_manager import ModelManager
    from breedlens.notifications import Notification, Notifier
    from breedlens.session.history import HistoryEntry, HistoryLedger
    from breedlens.session.image_source import ImageSource, SourceImage

logger = logging.getLogger(__name__)


class ClassifyStatus(StrEnum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class ClassifyResult:
    status: ClassifyStatus
    outcome: ClassificationOutcome | None = None
    error: BreedLensError | None = None


class SessionController:
    """Single-user classification session."""

    def __init__(
        self,
        manager: ModelManager,
        engine: ClassificationEngine,
        image_source: ImageSource,
        history: HistoryLedger,
        notifier: Notifier,
    ) -> None:
        self._manager = manager
        self._engine = engine
        self._image_source = image_source
        self._history = history
        self._notifier = notifier
        self._state = SessionState(model_state=manager.state)
        self._load_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return self._history.all()

    def can_classify(self) -> bool:
        return can_classify(self._state) and self._manager.is_ready()

    def start(self) -> asyncio.Task[None]:
        """Begin loading the model in the background.

        Raises:
            RuntimeError: If the session was already started.
        """
        if self._load_task is not None:
            raise RuntimeError("Session already started")
        self._state = with_model_state(self._state, ModelState.LOADING)
        self._manager.on_settled(self._on_model_settled)
        self._load_task = asyncio.create_task(self._manager.load())
        return self._load_task

    async def upload(
        self,
        data: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> SourceImage:
        """Ingest a file and make it the current image.

        Raises:
            ImageTooLargeError: If the file is over the size limit; state is
                left unchanged.
        """
        image = await self._image_source.ingest(data, filename, content_type)
        self._state = with_image(self._state, image)
        return image

    def capture_camera(self) -> Notification:
        """Camera stub: notifies and changes nothing."""
        try:
            self._image_source.capture_camera()
        except UnimplementedFeatureError:
            logger.info("Camera capture requested; not implemented")
        self._notifier.notify(messages.CAMERA_NOT_IMPLEMENTED)
        return messages.CAMERA_NOT_IMPLEMENTED

    async def classify(self) -> ClassifyResult:
        """Classify the current image.

        A request made before the model is ready or without an image is
        skipped silently. The target image is captured up front; if another
        image has replaced it by the time the result arrives, the result is
        discarded.
        """
        if not self.can_classify():
            logger.debug("Classification skipped (model=%s)", self._state.model_state)
            return ClassifyResult(ClassifyStatus.SKIPPED)

        target = self._state.current_image
        try:
            outcome = await self._engine.classify(self._manager.model, target)
        except (ImageDecodeError, InferenceError) as exc:
            logger.warning("Classification failed: %s", exc)
            self._notifier.notify(messages.PREDICTION_FAILED)
            return ClassifyResult(ClassifyStatus.FAILED, error=exc)

        if outcome is None or target is None:
            return ClassifyResult(ClassifyStatus.SKIPPED)

        if not is_current(self._state, target):
            logger.info("Discarding result for superseded image %s", target.image_id)
            return ClassifyResult(ClassifyStatus.DISCARDED, outcome=outcome)

        self._history.append(outcome.entry)
        self._state = with_prediction(self._state, outcome.text)
        return ClassifyResult(ClassifyStatus.SUCCEEDED, outcome=outcome)

    def _on_model_settled(self, model_state: ModelState) -> None:
        self._state = with_model_state(self._state, model_state)

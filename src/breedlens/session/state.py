"""Session state record and its transitions.

Every transition is a pure function returning a new SessionState.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from breedlens.ml.model_manager import ModelState

if TYPE_CHECKING:
    from breedlens.session.image_source import SourceImage


@dataclass(frozen=True)
class SessionState:
    model_state: ModelState = ModelState.UNLOADED
    current_image: SourceImage | None = None
    prediction_text: str | None = None


def with_model_state(state: SessionState, model_state: ModelState) -> SessionState:
    return replace(state, model_state=model_state)


def with_image(state: SessionState, image: SourceImage) -> SessionState:
    """Make ``image`` the classification target. The last prediction text stays."""
    return replace(state, current_image=image)


def with_prediction(state: SessionState, text: str) -> SessionState:
    return replace(state, prediction_text=text)


def can_classify(state: SessionState) -> bool:
    return state.model_state == ModelState.READY and state.current_image is not None


def is_current(state: SessionState, image: SourceImage) -> bool:
    """True if ``image`` is still the classification target."""
    return state.current_image is not None and state.current_image.image_id == image.image_id

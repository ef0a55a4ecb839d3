"""Image classification model.

MobileNet ONNX exports take an NCHW float32 tensor scaled to [-1, 1] and
return one row of logits per image.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Mapping

    from numpy.typing import NDArray
    from onnxruntime import InferenceSession

BACKGROUND_LABEL = "background"


@dataclass(frozen=True)
class ClassificationResult:
    """A single classification prediction."""

    label: str
    confidence: float


class ImageClassifier(Protocol):
    """Protocol for image classification models."""

    @property
    def model_name(self) -> str:
        """Return the model identifier string."""
        ...

    @property
    def input_size(self) -> int:
        """Return the square input resolution in pixels."""
        ...

    def classify(self, pixels: NDArray[np.float32]) -> list[ClassificationResult]:
        """Classify an image and return ranked labels.

        Args:
            pixels: 1x3xHxW float32 tensor in [-1, 1].

        Returns:
            List of classification results sorted by confidence (descending).
        """
        ...


def softmax(logits: NDArray[np.floating]) -> NDArray[np.float64]:
    shifted = logits.astype(np.float64) - np.max(logits)
    exp = np.exp(shifted)
    result: NDArray[np.float64] = exp / exp.sum()
    return result


class OnnxImageClassifier:
    """ImageClassifier backed by an ONNX Runtime session."""

    def __init__(
        self,
        name: str,
        session: InferenceSession,
        labels: Mapping[int, str],
        *,
        input_size: int = 224,
        top_k: int = 3,
    ) -> None:
        self._name = name
        self._session = session
        self._labels = dict(labels)
        self._input_size = input_size
        self._top_k = top_k
        self._input_name: str = session.get_inputs()[0].name

    @property
    def model_name(self) -> str:
        return self._name

    @property
    def input_size(self) -> int:
        return self._input_size

    def classify(self, pixels: NDArray[np.float32]) -> list[ClassificationResult]:
        outputs = self._session.run(None, {self._input_name: pixels})
        logits = np.asarray(outputs[0]).reshape(-1)
        probs = softmax(logits)

        results: list[ClassificationResult] = []
        for index in np.argsort(probs)[::-1]:
            label = self._labels.get(int(index))
            if label is None or label == BACKGROUND_LABEL:
                continue
            results.append(ClassificationResult(label=label, confidence=float(probs[index])))
            if len(results) == self._top_k:
                break
        return results

"""Tests for the ONNX-backed image classifier."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import numpy as np
import pytest

from breedlens.ml.image_classifier import OnnxImageClassifier, softmax


def _session(logits: list[float]) -> MagicMock:
    session = MagicMock()
    session.get_inputs.return_value = [SimpleNamespace(name="pixel_values")]
    session.run.return_value = [np.array([logits], dtype=np.float32)]
    return session


class TestSoftmax:
    def test_sums_to_one(self) -> None:
        probs = softmax(np.array([1.0, 2.0, 3.0]))
        assert probs.sum() == pytest.approx(1.0)
        assert list(np.argsort(probs)) == [0, 1, 2]

    def test_stable_for_large_logits(self) -> None:
        probs = softmax(np.array([1000.0, 1000.0]))
        assert list(probs) == pytest.approx([0.5, 0.5])


class TestOnnxImageClassifier:
    def test_returns_top_k_ranked(self) -> None:
        labels = {0: "background", 1: "beagle", 2: "golden retriever", 3: "pug"}
        session = _session([0.0, 1.0, 5.0, 3.0])
        classifier = OnnxImageClassifier("mobilenet_v2_1.0_224", session, labels, top_k=2)

        results = classifier.classify(np.zeros((1, 3, 224, 224), dtype=np.float32))

        assert [r.label for r in results] == ["golden retriever", "pug"]
        assert results[0].confidence > results[1].confidence
        assert 0.0 <= results[1].confidence <= results[0].confidence <= 1.0

    def test_feeds_first_input(self) -> None:
        session = _session([1.0, 2.0])
        classifier = OnnxImageClassifier("m", session, {0: "a", 1: "b"})
        pixels = np.zeros((1, 3, 224, 224), dtype=np.float32)

        classifier.classify(pixels)

        _, feeds = session.run.call_args.args
        assert set(feeds) == {"pixel_values"}
        assert feeds["pixel_values"] is pixels

    def test_skips_background_class(self) -> None:
        session = _session([9.0, 1.0, 0.5])
        classifier = OnnxImageClassifier("m", session, {0: "background", 1: "beagle", 2: "pug"}, top_k=1)

        results = classifier.classify(np.zeros((1, 3, 224, 224), dtype=np.float32))

        assert [r.label for r in results] == ["beagle"]

    def test_properties(self) -> None:
        classifier = OnnxImageClassifier("mobilenet_v1_0.75_192", _session([1.0]), {0: "a"}, input_size=192)
        assert classifier.model_name == "mobilenet_v1_0.75_192"
        assert classifier.input_size == 192

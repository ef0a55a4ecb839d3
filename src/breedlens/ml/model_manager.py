"""Model manager: download, initialize, and load the MobileNet classifier.

The model is loaded exactly once per session. Loading moves through
``unloaded -> loading -> ready | failed``; a failed load is final and needs a
process restart to retry.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from huggingface_hub import hf_hub_download
from onnxruntime import InferenceSession, SessionOptions
from onnxruntime.capi.onnxruntime_pybind11_state import ExecutionMode

from breedlens import messages
from breedlens.errors import ModelLoadError
from breedlens.ml.image_classifier import OnnxImageClassifier

if TYPE_CHECKING:
    from collections.abc import Callable

    from breedlens.config import Settings
    from breedlens.ml.image_classifier import ImageClassifier
    from breedlens.ml.inference import InferencePool
    from breedlens.notifications import Notifier

logger = logging.getLogger(__name__)


class ModelState(StrEnum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Protocol (kept for test mocking)
# ---------------------------------------------------------------------------


class ModelManager(Protocol):
    """Protocol for model lifecycle management."""

    @property
    def state(self) -> ModelState:
        """Return the current lifecycle state."""
        ...

    @property
    def model(self) -> ImageClassifier | None:
        """Return the loaded model, or None until ready."""
        ...

    async def load(self) -> None:
        """Load the model. May only be called once."""
        ...

    def is_ready(self) -> bool:
        """Return True once the model can classify."""
        ...


# ---------------------------------------------------------------------------
# Model registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModelSpec:
    """Static metadata for a single ONNX model."""

    name: str
    repo_id: str
    filename: str
    subfolder: str | None
    config_filename: str
    version: int
    alpha: float
    input_size: int
    license: str


MODEL_REGISTRY: dict[str, ModelSpec] = {
    "mobilenet_v1_1.0_224": ModelSpec(
        name="mobilenet_v1_1.0_224",
        repo_id="Xenova/mobilenet_v1_1.0_224",
        filename="model.onnx",
        subfolder="onnx",
        config_filename="config.json",
        version=1,
        alpha=1.0,
        input_size=224,
        license="Apache-2.0",
    ),
    "mobilenet_v1_0.75_192": ModelSpec(
        name="mobilenet_v1_0.75_192",
        repo_id="Xenova/mobilenet_v1_0.75_192",
        filename="model.onnx",
        subfolder="onnx",
        config_filename="config.json",
        version=1,
        alpha=0.75,
        input_size=192,
        license="Apache-2.0",
    ),
    "mobilenet_v2_1.0_224": ModelSpec(
        name="mobilenet_v2_1.0_224",
        repo_id="Xenova/mobilenet_v2_1.0_224",
        filename="model.onnx",
        subfolder="onnx",
        config_filename="config.json",
        version=2,
        alpha=1.0,
        input_size=224,
        license="Apache-2.0",
    ),
    "mobilenet_v2_1.4_224": ModelSpec(
        name="mobilenet_v2_1.4_224",
        repo_id="Xenova/mobilenet_v2_1.4_224",
        filename="model.onnx",
        subfolder="onnx",
        config_filename="config.json",
        version=2,
        alpha=1.4,
        input_size=224,
        license="Apache-2.0",
    ),
}


def resolve_model(version: int, alpha: float) -> ModelSpec:
    """Find the registry entry for a MobileNet ``{version, alpha}`` config."""
    for spec in MODEL_REGISTRY.values():
        if spec.version == version and spec.alpha == alpha:
            return spec
    raise KeyError(f"Unknown model: MobileNet v{version} alpha={alpha}")


def read_labels(config_path: Path) -> dict[int, str]:
    """Read the ``id2label`` table from a Hugging Face model config."""
    config = json.loads(config_path.read_text(encoding="utf-8"))
    return {int(index): label for index, label in config["id2label"].items()}


# ---------------------------------------------------------------------------
# Concrete implementation
# ---------------------------------------------------------------------------


class OnnxModelManager:
    """Downloads the configured MobileNet and loads it into ONNX Runtime."""

    def __init__(self, settings: Settings, pool: InferencePool, notifier: Notifier) -> None:
        self._settings = settings
        self._pool = pool
        self._notifier = notifier
        self._models_dir = Path(settings.models_dir)

        self._state = ModelState.UNLOADED
        self._model: ImageClassifier | None = None
        self._error: ModelLoadError | None = None
        self._on_settled: Callable[[ModelState], None] | None = None
        self._model_paths: dict[str, Path] = {}

        self._providers: list[str | tuple[str, dict[str, object]]] = []
        self._session_options: SessionOptions | None = None

    # -- Public API ---------------------------------------------------------

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def model(self) -> ImageClassifier | None:
        return self._model

    @property
    def error(self) -> ModelLoadError | None:
        return self._error

    @property
    def spec_name(self) -> str | None:
        try:
            return resolve_model(self._settings.mobilenet_version, self._settings.mobilenet_alpha).name
        except KeyError:
            return None

    def is_ready(self) -> bool:
        return self._state == ModelState.READY

    def on_settled(self, callback: Callable[[ModelState], None]) -> None:
        """Register the single subscriber told when loading finishes.

        Replaces any earlier subscriber. Fires immediately if the load has
        already settled.
        """
        self._on_settled = callback
        if self._state in (ModelState.READY, ModelState.FAILED):
            callback(self._state)

    async def load(self) -> None:
        """Initialize the runtime and load the model, notifying the outcome.

        Raises:
            RuntimeError: If called more than once.
        """
        if self._state != ModelState.UNLOADED:
            raise RuntimeError(f"Model load already started (state={self._state})")

        self._state = ModelState.LOADING
        logger.info(
            "Loading MobileNet v%s alpha=%s (device=%s)",
            self._settings.mobilenet_version,
            self._settings.mobilenet_alpha,
            self._settings.device,
        )
        try:
            model = await self._pool.run(self._load_blocking)
        except Exception as exc:
            self._error = ModelLoadError(f"Failed to load model: {exc}")
            self._error.__cause__ = exc
            self._state = ModelState.FAILED
            logger.exception("Model load failed")
            self._notifier.notify(messages.MODEL_LOAD_FAILED)
        else:
            self._model = model
            self._state = ModelState.READY
            logger.info("Loaded model %s", model.model_name)
            self._notifier.notify(messages.MODEL_LOADED)

        if self._on_settled is not None:
            self._on_settled(self._state)

    def ensure_downloaded(self, model_name: str) -> Path:
        """Download a model from HuggingFace if not already present locally."""
        spec = self._get_spec(model_name)
        return self._download(spec, spec.filename, spec.subfolder)

    def load_labels(self, model_name: str) -> dict[int, str]:
        """Download the model config and return its class labels."""
        spec = self._get_spec(model_name)
        return read_labels(self._download(spec, spec.config_filename, None))

    # -- Internal -----------------------------------------------------------

    def _load_blocking(self) -> ImageClassifier:
        self._providers = self._build_providers()
        self._session_options = self._build_session_options()

        spec = resolve_model(self._settings.mobilenet_version, self._settings.mobilenet_alpha)
        model_path = self.ensure_downloaded(spec.name)
        labels = self.load_labels(spec.name)
        session = InferenceSession(
            str(model_path),
            sess_options=self._session_options,
            providers=self._providers,
        )
        return OnnxImageClassifier(
            spec.name,
            session,
            labels,
            input_size=spec.input_size,
            top_k=self._settings.top_k,
        )

    def _download(self, spec: ModelSpec, filename: str, subfolder: str | None) -> Path:
        key = f"{spec.name}/{filename}"
        if key in self._model_paths:
            path = self._model_paths[key]
            if path.exists():
                return path

        self._models_dir.mkdir(parents=True, exist_ok=True)
        downloaded = Path(
            hf_hub_download(
                repo_id=spec.repo_id,
                filename=filename,
                subfolder=subfolder,
                local_dir=str(self._models_dir / spec.name),
            )
        )
        self._model_paths[key] = downloaded
        logger.info("Downloaded %s to %s", key, downloaded)
        return downloaded

    @staticmethod
    def _get_spec(model_name: str) -> ModelSpec:
        try:
            return MODEL_REGISTRY[model_name]
        except KeyError:
            raise KeyError(f"Unknown model: {model_name}") from None

    def _build_providers(self) -> list[str | tuple[str, dict[str, object]]]:
        device = self._settings.device
        if device == "cuda":
            return [
                ("CUDAExecutionProvider", {"device_id": 0, "arena_extend_strategy": "kSameAsRequested"}),
                "CPUExecutionProvider",
            ]
        if device == "openvino":
            return [
                ("OpenVINOExecutionProvider", {"device_type": "CPU"}),
                "CPUExecutionProvider",
            ]
        return ["CPUExecutionProvider"]

    def _build_session_options(self) -> SessionOptions:
        opts = SessionOptions()
        opts.intra_op_num_threads = self._settings.intra_op_threads
        opts.inter_op_num_threads = self._settings.inter_op_threads
        opts.execution_mode = ExecutionMode.ORT_SEQUENTIAL

        if self._settings.device == "openvino":
            # OpenVINO does its own graph optimization
            from onnxruntime import GraphOptimizationLevel

            opts.graph_optimization_level = GraphOptimizationLevel.ORT_DISABLE_ALL
        return opts

"""Exception types raised by the classification session."""

from __future__ import annotations


class BreedLensError(Exception):
    """Base class for all BreedLens errors."""


class ModelLoadError(BreedLensError):
    """The classification model could not be loaded. Fatal for the session."""


class ImageDecodeError(BreedLensError):
    """The image bytes could not be decoded into pixels."""


class ImageTooLargeError(BreedLensError):
    """The uploaded file exceeds the configured size limit."""


class InferenceError(BreedLensError):
    """The model failed or produced no results."""


class UnimplementedFeatureError(BreedLensError):
    """The requested feature exists on the surface but is not implemented."""

"""Pydantic request/response schemas for the BreedLens API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImageResponse(BaseModel):
    """The image that is now the classification target."""

    image_id: str
    filename: str | None
    content_type: str
    size: int = Field(description="File size in bytes")
    data_uri: str = Field(description="Base64 data URI usable for display")


class ImageTag(BaseModel):
    """A single classification tag with confidence score."""

    label: str
    confidence: float = Field(ge=0.0, le=1.0)


class HistoryItem(BaseModel):
    """One past classification."""

    image: str = Field(description="Data URI of the classified image")
    prediction: str = Field(description="Localized breed name")


class ClassifyResponse(BaseModel):
    """Response for the classify endpoint."""

    prediction: str = Field(description="Formatted result text")
    breed: str = Field(description="Localized breed name")
    top: ImageTag
    history_size: int


class NotificationItem(BaseModel):
    title: str
    body: str
    severity: str = Field(description="'info', 'success', or 'destructive'")


class SessionResponse(BaseModel):
    """Current session view."""

    model_state: str = Field(description="'unloaded', 'loading', 'ready', or 'failed'")
    can_classify: bool
    current_image: ImageResponse | None
    prediction: str | None
    history: list[HistoryItem]

    model_config = {"protected_namespaces": ()}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    gpu: bool
    model_state: str
    concurrent_requests: int
    queue_depth: int

    model_config = {"protected_namespaces": ()}


class ModelInfo(BaseModel):
    """Information about an available model."""

    name: str
    version: int
    alpha: float
    input_size: int
    status: str = Field(description="Model status: 'active' or 'available'")
    license: str


class ModelsResponse(BaseModel):
    """Response for the models listing endpoint."""

    models: list[ModelInfo]


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str

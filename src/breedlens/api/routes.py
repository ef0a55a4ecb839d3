"""API route definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, UploadFile, status
from fastapi.responses import JSONResponse

from breedlens import messages
from breedlens.api.middleware import get_feed, get_inference_pool, get_session, get_settings, verify_api_key
from breedlens.api.schemas import (
    ClassifyResponse,
    ErrorResponse,
    HealthResponse,
    HistoryItem,
    ImageResponse,
    ImageTag,
    ModelInfo,
    ModelsResponse,
    NotificationItem,
    SessionResponse,
)
from breedlens.errors import ImageTooLargeError
from breedlens.ml.model_manager import MODEL_REGISTRY
from breedlens.session.controller import ClassifyStatus

if TYPE_CHECKING:
    from breedlens.session.history import HistoryEntry
    from breedlens.session.image_source import SourceImage

router = APIRouter(prefix="/api/v1", dependencies=[Depends(verify_api_key)])

HTTP_CONTENT_TOO_LARGE = 413
HTTP_UNPROCESSABLE_CONTENT = 422


def _image_response(image: SourceImage) -> ImageResponse:
    return ImageResponse(
        image_id=image.image_id,
        filename=image.filename,
        content_type=image.content_type,
        size=len(image.data),
        data_uri=image.data_uri,
    )


def _history_items(entries: tuple[HistoryEntry, ...]) -> list[HistoryItem]:
    return [HistoryItem(image=entry.image, prediction=entry.prediction) for entry in entries]


@router.post(
    "/image",
    response_model=ImageResponse,
    responses={HTTP_CONTENT_TOO_LARGE: {"model": ErrorResponse}},
    summary="Upload the image to classify",
)
async def upload_image(request: Request, file: UploadFile) -> ImageResponse:
    """Replace the current image with the uploaded file.

    Never buffers more than ``max_file_size + 1`` bytes; oversized uploads
    with a declared size are refused before reading.
    """
    session = get_session(request)
    limit = get_settings(request).max_file_size
    if file.size is not None and file.size > limit:
        raise HTTPException(
            status_code=HTTP_CONTENT_TOO_LARGE,
            detail=f"File is {file.size} bytes, limit is {limit}",
        )
    data = await file.read(limit + 1)
    try:
        image = await session.upload(data, file.filename, file.content_type)
    except ImageTooLargeError as exc:
        raise HTTPException(
            status_code=HTTP_CONTENT_TOO_LARGE,
            detail=str(exc),
        ) from exc
    return _image_response(image)


@router.post(
    "/camera",
    response_model=None,
    responses={status.HTTP_501_NOT_IMPLEMENTED: {"model": NotificationItem}},
    summary="Capture an image from the camera",
)
async def capture_camera(request: Request) -> JSONResponse:
    """Camera capture is not implemented; always answers 501."""
    notification = get_session(request).capture_camera()
    return JSONResponse(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        content={
            "title": notification.title,
            "body": notification.body,
            "severity": str(notification.severity),
        },
    )


@router.post(
    "/classify",
    response_model=ClassifyResponse,
    responses={
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
        HTTP_UNPROCESSABLE_CONTENT: {"model": ErrorResponse},
    },
    summary="Classify the current image",
)
async def classify(request: Request) -> ClassifyResponse:
    """Run the model on the current image and record the result."""
    session = get_session(request)
    result = await session.classify()

    if result.status == ClassifyStatus.SKIPPED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Classification unavailable: model not ready or no image uploaded",
        )
    if result.status == ClassifyStatus.DISCARDED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Image was replaced while it was being classified",
        )
    if result.status == ClassifyStatus.FAILED or result.outcome is None:
        raise HTTPException(
            status_code=HTTP_UNPROCESSABLE_CONTENT,
            detail=messages.PREDICTION_FAILED.body,
        )

    outcome = result.outcome
    return ClassifyResponse(
        prediction=outcome.text,
        breed=outcome.entry.prediction,
        top=ImageTag(label=outcome.top.label, confidence=outcome.top.confidence),
        history_size=len(session.history),
    )


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current session state",
)
async def session_state(request: Request) -> SessionResponse:
    """Return model state, current image, last prediction, and history."""
    session = get_session(request)
    state = session.state
    return SessionResponse(
        model_state=str(state.model_state),
        can_classify=session.can_classify(),
        current_image=_image_response(state.current_image) if state.current_image is not None else None,
        prediction=state.prediction_text,
        history=_history_items(session.history),
    )


@router.get(
    "/history",
    response_model=list[HistoryItem],
    summary="Classification history",
)
async def history(request: Request) -> list[HistoryItem]:
    """Return past classifications, oldest first."""
    return _history_items(get_session(request).history)


@router.get(
    "/notifications",
    response_model=list[NotificationItem],
    summary="Pending notifications",
)
async def notifications(request: Request) -> list[NotificationItem]:
    """Return and clear notifications raised since the last call."""
    return [
        NotificationItem(title=item.title, body=item.body, severity=str(item.severity))
        for item in get_feed(request).drain()
    ]


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    settings = get_settings(request)
    pool = get_inference_pool(request)
    return HealthResponse(
        status="ok",
        gpu=settings.device == "cuda",
        model_state=str(get_session(request).state.model_state),
        concurrent_requests=pool.active_count,
        queue_depth=pool.queue_depth,
    )


@router.get(
    "/models",
    response_model=ModelsResponse,
    summary="List available models",
)
async def list_models(request: Request) -> ModelsResponse:
    """Return available models, marking the configured one as active."""
    settings = get_settings(request)

    models: list[ModelInfo] = []
    for spec in MODEL_REGISTRY.values():
        is_active = spec.version == settings.mobilenet_version and spec.alpha == settings.mobilenet_alpha
        models.append(
            ModelInfo(
                name=spec.name,
                version=spec.version,
                alpha=spec.alpha,
                input_size=spec.input_size,
                status="active" if is_active else "available",
                license=spec.license,
            )
        )

    return ModelsResponse(models=models)

"""Request dependencies: API key check and access to app-scoped session objects."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

if TYPE_CHECKING:
    from breedlens.config import Settings
    from breedlens.ml.inference import InferencePool
    from breedlens.notifications import NotificationFeed
    from breedlens.session.controller import SessionController

_bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def get_session(request: Request) -> SessionController:
    session: SessionController = request.app.state.session
    return session


def get_feed(request: Request) -> NotificationFeed:
    feed: NotificationFeed = request.app.state.notifications
    return feed


def get_inference_pool(request: Request) -> InferencePool:
    pool: InferencePool = request.app.state.inference_pool
    return pool


async def verify_api_key(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> None:
    """Check the Bearer token against BREEDLENS_API_KEY.

    Without a configured key every request passes.
    """
    api_key = get_settings(request).api_key
    if api_key is None:
        return

    if credentials is None or not secrets.compare_digest(credentials.credentials.encode(), api_key.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
            headers={"WWW-Authenticate": "Bearer"},
        )

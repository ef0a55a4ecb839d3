"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from breedlens.config import Settings

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from breedlens.api.routes import router
from breedlens.config import get_settings
from breedlens.ml.engine import ClassificationEngine
from breedlens.ml.inference import InferencePool
from breedlens.ml.model_manager import OnnxModelManager
from breedlens.notifications import LoggingNotifier, NotificationFeed
from breedlens.session.controller import SessionController
from breedlens.session.history import HistoryLedger
from breedlens.session.image_source import ImageSource

logger = logging.getLogger(__name__)


def init_state(app: FastAPI, settings: Settings) -> SessionController:
    """Build the session and attach it and its collaborators to ``app.state``."""
    feed = NotificationFeed(sink=LoggingNotifier())
    pool = InferencePool(settings)
    manager = OnnxModelManager(settings, pool, feed)
    session = SessionController(
        manager=manager,
        engine=ClassificationEngine(pool, max_image_pixels=settings.max_image_pixels),
        image_source=ImageSource(settings.max_file_size),
        history=HistoryLedger(settings.history_limit),
        notifier=feed,
    )

    app.state.settings = settings
    app.state.notifications = feed
    app.state.inference_pool = pool
    app.state.model_manager = manager
    app.state.session = session
    return session


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: start the session on startup, clean up on shutdown."""
    settings = get_settings()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    logger.info(
        "Starting BreedLens (device=%s, mobilenet=v%s alpha=%s, max_concurrent=%s, history_limit=%s)",
        settings.device,
        settings.mobilenet_version,
        settings.mobilenet_alpha,
        settings.max_concurrent,
        settings.history_limit,
    )

    session = init_state(app, settings)
    session.start()

    logger.info("BreedLens ready, model loading in background")
    yield

    logger.info("Shutting down BreedLens")
    pool: InferencePool = app.state.inference_pool
    pool.shutdown()
    logger.info("BreedLens shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="BreedLens",
        description="Dog breed recognition with a locally run MobileNet classifier",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(router)
    return application


app = create_app()

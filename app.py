"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import redis.asyncio as aioredis
from fastapi import FastAPI

from config import AppSettings
from errors import register_error_handlers
from infrastructure.cache.challenge_store import RedisChallengeStore
from infrastructure.cache.memory_store import MemoryChallengeStore
from infrastructure.cache.protocol import ChallengeStore
from infrastructure.captcha.image_renderer import ImageCaptchaRenderer
from infrastructure.captcha.protocol import CaptchaRenderer
from routes.captcha_routes import build_captcha_router
from routes.health_routes import router as health_router
from services.captcha_service import CaptchaService
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(
    settings: Optional[AppSettings] = None,
    store: Optional[ChallengeStore] = None,
    renderer: Optional[CaptchaRenderer] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    *store* and *renderer* override the defaults (Redis when REDIS_URI is
    set, otherwise in-memory; PNG via ImageCaptcha).
    """
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        app.state.settings = settings

        redis_client = None
        challenge_store = store
        if challenge_store is None:
            if settings.redis.redis_uri:
                redis_client = aioredis.from_url(
                    settings.redis.redis_uri,
                    encoding="utf-8",
                    decode_responses=True,
                )
                challenge_store = RedisChallengeStore(redis_client)
                log.info("challenge_store_selected", backend="redis")
            else:
                challenge_store = MemoryChallengeStore()
                log.warning("challenge_store_selected", backend="memory")

        app.state.challenge_store = challenge_store
        app.state.renderer = renderer if renderer is not None else ImageCaptchaRenderer()
        app.state.captcha_service = CaptchaService(challenge_store, settings.captcha)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        if redis_client is not None:
            await redis_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(build_captcha_router(settings.captcha))

    return app

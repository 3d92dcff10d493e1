from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ...core.config import BotConfig
from ...core.kv_store import KeyValueStore, build_store
from ...integrations.discord.interaction_handler import (
    DiscordInteractionHandler,
    InteractionReply,
)

INTERACTION_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _to_response(reply: InteractionReply) -> Response:
    if reply.payload is not None:
        return JSONResponse(reply.payload, status_code=reply.status_code)
    return PlainTextResponse(reply.text or "", status_code=reply.status_code)


def _app_lifespan(store: KeyValueStore, *, close_store: bool):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            yield
        finally:
            if close_store:
                await store.close()

    return lifespan


def create_app(
    config: BotConfig,
    *,
    store: Optional[KeyValueStore] = None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Build the interactions endpoint app.

    A store passed in by the caller stays open after shutdown; a store built
    from ``config.store`` is closed with the app.
    """
    owns_store = store is None
    resolved_store = store if store is not None else build_store(config.store)
    handler = DiscordInteractionHandler(
        public_key=config.public_key,
        store=resolved_store,
        logger=logger or logging.getLogger("discord_kv_bot.interactions"),
    )

    app = FastAPI(
        redirect_slashes=False,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=_app_lifespan(resolved_store, close_store=owns_store),
    )
    app.state.config = config
    app.state.store = resolved_store
    app.state.interaction_handler = handler

    @app.api_route("/{_path:path}", methods=INTERACTION_METHODS)
    async def interactions(request: Request) -> Response:
        body = await request.body() if request.method == "POST" else b""
        reply = await handler.handle(request.method, request.headers, body)
        return _to_response(reply)

    return app

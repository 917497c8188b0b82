# chatrooms/main.py

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatrooms.core.config import Settings, settings as default_settings
from chatrooms.core.logging import setup_logging, get_logger
from chatrooms.core.state import build_state
from chatrooms.api.routes import root, health, rooms, messages

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Stores are opened on startup and closed on shutdown; each app
    instance owns its own.
    """
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Chat Rooms")
    app.state.settings = settings
    app.state.stores = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # REST routes
    app.include_router(root.router)
    app.include_router(health.router)
    app.include_router(rooms.router)
    app.include_router(messages.router)

    @app.on_event("startup")
    def startup_event():
        logger.info("🚀 Application starting")
        app.state.stores = build_state(settings)

    @app.on_event("shutdown")
    def on_shutdown():
        if app.state.stores is not None:
            app.state.stores.close()
            app.state.stores = None

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chatrooms.main:app", host="0.0.0.0", port=8000)

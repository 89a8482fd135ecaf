from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.orm import Session

from app.bootstrap import build_notification_services
from app.config import Settings, get_settings
from app.infrastructure.database import SessionLocal, engine, initialize_database
from app.infrastructure.email import TransportFactory
from app.interfaces.api.routes import register_routes


def create_app(
    settings: Settings | None = None,
    session_factory: Callable[[], Session] | None = None,
    transport_factory: TransportFactory | None = None,
) -> FastAPI:
    """Create the FastAPI application serving user notifications."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables and notification services on startup; release the engine on shutdown."""

        resolved_factory = session_factory or SessionLocal
        bind = getattr(resolved_factory, "kw", {}).get("bind")
        initialize_database(bind)
        app.state.notifications = build_notification_services(
            settings or get_settings(),
            resolved_factory,
            transport_factory=transport_factory,
        )
        yield
        if session_factory is None:
            engine.dispose()

    app = FastAPI(title="ConnecTone Notifications", lifespan=lifespan)
    register_routes(app)
    return app


app = create_app()

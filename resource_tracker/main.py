"""FastAPI application entry point."""
import asyncio
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from resource_tracker.config import settings
from resource_tracker.database import Base, SessionLocal, engine
from resource_tracker.logging_config import get_logger, setup_logging
from resource_tracker.routes import auth, dashboard, pages, resources, settings as settings_routes
from resource_tracker.services.data_service import RemoteDataService, SupabaseDataService
from resource_tracker.state import build_state

logger = get_logger(__name__)


def create_app(
    service: Optional[RemoteDataService] = None,
    session_factory: Callable[[], Session] = SessionLocal,
    db_engine: Engine = engine,
) -> FastAPI:
    """Build the application around a data service and a preferences database."""
    tracker = build_state(service or SupabaseDataService(), session_factory)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        Base.metadata.create_all(bind=db_engine)
        tracker.theme.load()
        # Views answer with a loading placeholder until the check completes
        session_check = asyncio.create_task(tracker.session.check_session())
        logger.info("application_started", version=settings.APP_VERSION)
        yield
        if not session_check.done():
            session_check.cancel()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        description="Track business resources: equipment, materials, services and more",
        lifespan=lifespan,
    )
    app.state.tracker = tracker

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(pages.ViewInterrupt, pages.view_interrupt_handler)

    # Include routers
    app.include_router(auth.router, prefix="/api")
    app.include_router(resources.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")
    app.include_router(settings_routes.router, prefix="/api")
    app.include_router(pages.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()

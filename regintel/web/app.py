import contextlib
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from regintel import __version__
from regintel.auth.service import ensure_admin_user
from regintel.core.config import Settings, settings as default_settings
from regintel.core.database import create_all, create_engine_from_url, create_session_factory
from regintel.web.routers import register_routers
from regintel.web.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Companies", "description": "Target companies and pressure scores"},
    {"name": "Executives", "description": "Executives and vulnerability scores"},
    {"name": "Opportunities", "description": "Regulatory opportunities and notes"},
    {"name": "Competitors", "description": "Competitor activity per opportunity"},
    {"name": "Procurement", "description": "Public tenders and deadlines"},
    {"name": "Government Contacts", "description": "Officials linked to opportunities and tenders"},
    {"name": "Research", "description": "Research task tracking"},
    {"name": "Alerts", "description": "Threshold-triggered notifications"},
    {"name": "Briefings", "description": "Daily briefing generation and history"},
    {"name": "Dashboard", "description": "Headline statistics"},
    {"name": "Auth", "description": "Current user"},
]


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The engine, session factory and scheduler belong to the app instance and
    live on app.state for the duration of the lifespan.
    """
    settings = settings or default_settings
    configure_logging(settings.log_level)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_engine_from_url(settings.database_url, echo=settings.database_echo)
        session_factory = create_session_factory(engine)
        app.state.engine = engine
        app.state.session_factory = session_factory

        # Initialize Database Tables
        await create_all(engine)

        async with session_factory() as session:
            await ensure_admin_user(session, settings.admin_email, settings.admin_password, settings.admin_name)

        scheduler = None
        if settings.scheduler_enabled:
            scheduler = start_scheduler(session_factory, settings)

        yield

        if scheduler is not None:
            stop_scheduler(scheduler)
        await engine.dispose()

    app = FastAPI(
        title="RegIntel",
        description="Regulatory intelligence CRM: opportunities, competitors, companies, executives and daily briefings",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid input", "errors": jsonable_encoder(exc.errors())},
        )

    register_routers(app)

    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(url="/docs")

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok", "version": __version__}

    return app

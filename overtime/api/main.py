from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..audit import AuditTrail
from ..core.config import Settings, get_settings
from ..core.logging import configure_logging, get_logger
from ..core.monitoring import configure_error_monitoring
from ..errors import EntryValidationError, NothingToExportError, StorageError
from ..session import OvertimeSession
from .routes import entries, export, health, roster

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    configure_error_monitoring(settings)

    listeners = [AuditTrail(settings.audit_log_path)] if settings.audit_log_path else []
    session = OvertimeSession.from_settings(settings, listeners=listeners)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        session.init()
        if not session.roster_ready:
            await session.load_roster()
        logger.info("app.started", roster_ready=session.roster_ready, entries=len(session.entries()))
        yield
        session.reset()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.session = session

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost", "http://127.0.0.1"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EntryValidationError)
    async def entry_rejected(request: Request, exc: EntryValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc), "reason": exc.reason.value})

    @app.exception_handler(NothingToExportError)
    async def nothing_to_export(request: Request, exc: NothingToExportError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_failed(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("app.storage_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=507, content={"detail": str(exc)})

    app.include_router(health.router)
    app.include_router(roster.router)
    app.include_router(entries.router)
    app.include_router(export.router)
    return app

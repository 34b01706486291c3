"""FastAPI application factory. No business logic; only wiring, middleware and error mapping."""

import logging
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from storefront import __version__
from storefront.api import router
from storefront.core.config import Settings, get_settings
from storefront.core.database import build_engine, build_session_factory
from storefront.core.errors import StorefrontError
from storefront.core.security import TokenIssuer
from storefront.services.file_store import PRODUCTS_NAMESPACE, USERS_NAMESPACE, FileStore

logger = logging.getLogger(__name__)


def _public_errors(exc: RequestValidationError) -> list[dict]:
    """Pydantic errors without the submitted input, so passwords are never echoed back."""
    errors = []
    for err in exc.errors():
        errors.append(
            {
                "loc": list(err.get("loc", ())),
                "msg": str(err.get("msg", "")),
                "type": str(err.get("type", "")),
            }
        )
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def handle_storefront_error(request: Request, exc: StorefrontError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                extra={"method": request.method, "url_path": request.url.path, "reason": exc.message},
            )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": _public_errors(exc)},
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception(
            "Unhandled database error",
            extra={"method": request.method, "url_path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application and its collaborators.

    The engine, session factory, file store and token issuer are created here
    and kept on app.state; request dependencies read them from there.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Storefront API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    engine = build_engine(settings.DATABASE_URL, debug=settings.DEBUG)
    file_store = FileStore(
        settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_bytes=settings.MAX_UPLOAD_BYTES,
    )
    file_store.ensure_namespaces(USERS_NAMESPACE, PRODUCTS_NAMESPACE)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.file_store = file_store
    app.state.token_issuer = TokenIssuer(
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    )

    origins = settings.CORS_ORIGINS
    if settings.APP_ENV != "dev":
        origins = [o for o in origins if o != "*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(router)
    app.mount(
        settings.UPLOAD_URL_PREFIX,
        StaticFiles(directory=Path(settings.UPLOAD_DIR)),
        name="uploads",
    )

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Storefront API"}

    logger.info(
        "Application configured",
        extra={"environment": settings.APP_ENV, "upload_dir": str(file_store.root)},
    )
    return app

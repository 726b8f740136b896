import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from core.config import settings
from core.database import Database
from core.errors import AppError, ValidationError
from core.logging_config import configure_logging
from crud.user_crud import ensure_admin_user
from schemas.base import field_message
from routers import project_router, skill_router, user_router, cloudinary_router
from services.media_store import MediaStore

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None, media_store: MediaStore | None = None) -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    database = database or Database(settings.SQLALCHEMY_DATABASE_URI)
    media_store = media_store or MediaStore.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        db = database.session()
        try:
            ensure_admin_user(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD, settings.ADMIN_PROFILE_PIC)
        finally:
            db.close()
        if not media_store.is_configured:
            logger.warning("Cloudinary credentials missing; uploads and signatures are disabled")
        yield
        database.dispose()

    app = FastAPI(title="Portfolio Backend API", lifespan=lifespan)
    app.state.database = database
    app.state.media_store = media_store

    # Respect X-Forwarded-Proto/Host when behind a proxy (Vercel/nginx/etc.)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    # Cookies travel cross-site, so origins must be explicit
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors: dict[str, str] = {}
        for err in exc.errors():
            field, message = field_message(err)
            errors.setdefault(field, message)
        return JSONResponse(status_code=400, content=ValidationError(errors).to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Database error", "error": str(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": str(exc) or "Internal server error", "error": type(exc).__name__},
        )

    app.include_router(user_router.router, prefix="/api")
    app.include_router(project_router.router, prefix="/api")
    app.include_router(skill_router.router, prefix="/api")
    app.include_router(cloudinary_router.router, prefix="/api")

    @app.get("/")
    def root():
        return {"message": "Hello from the backend"}

    @app.get("/health")
    def health():
        db_ok = database.ping()
        return {
            "status": "ok" if db_ok else "degraded",
            "database": "connected" if db_ok else "unavailable",
            "mediaStore": "connected" if media_store.ping() else "unavailable",
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)

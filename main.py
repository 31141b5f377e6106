import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from controllers.image_controller import UPLOADS_URL_PREFIX
from dal.image_dal import ImageDAL
from routes.album_route import album_router, collection_router
from routes.image_route import router as image_router
from routes.user_route import router as user_router
from services.auth_service import AuthService
from services.image_pipeline import ImagePipeline
from services.storage.base import BaseImageStorage
from services.storage.factory import build_storage
from services.storage.local_storage import LocalFileStorage
from utils.app_config import AppConfig
from utils.database_init import AsyncDatabaseInitializer

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)


def _error_body(message) -> dict:
    return {"success": False, "result": message}


def create_app(config: Optional[AppConfig] = None, storage: Optional[BaseImageStorage] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        config: Settings to use; read from the environment when omitted.
        storage: Storage backend to use; built from `config` when omitted.
    """
    config = config or AppConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize:
          - the SQLite database at DATABASE_DIR/images.db
          - the storage backend (local directory or Azure Blob Storage)
          - the auth service and the image pipeline
        and attach them to `app.state`.
        """
        db_initializer = AsyncDatabaseInitializer()
        await db_initializer.ensure_database()
        app.state.db_initializer = db_initializer

        backend = storage or await build_storage(config)
        app.state.storage = backend
        app.state.auth_service = AuthService(config.jwt_secret, config.token_ttl_seconds)
        app.state.image_pipeline = ImagePipeline(ImageDAL(db_initializer), backend)

        try:
            yield
        finally:
            try:
                await backend.close()
            except Exception:
                LOGGER.exception("Failed to close storage backend")

    app = FastAPI(title="Image Album API", lifespan=lifespan)
    app.state.config = config

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        messages = [f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()]
        return JSONResponse(status_code=400, content=_error_body("; ".join(messages) or "Bad request"))

    # Local uploads are served as static files; remote blobs are served by Azure.
    if storage is None and not config.use_remote_storage:
        config.upload_dir.mkdir(parents=True, exist_ok=True)
        app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=config.upload_dir), name="uploads")
    elif isinstance(storage, LocalFileStorage):
        storage.ensure_directory()
        app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=storage.base_directory), name="uploads")

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check reporting the database and storage backend state.
        """
        backend = getattr(request.app.state, "storage", None)
        return {
            "ok": True,
            "db_initialized": hasattr(request.app.state, "db_initializer"),
            "storage_backend": backend.kind if backend is not None else None,
        }

    app.include_router(user_router)
    app.include_router(image_router)
    app.include_router(album_router)
    app.include_router(collection_router)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))

from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from docstore import (
    CorruptPersistedDataError,
    DocStoreError,
    DuplicateCollectionError,
    NotFoundError,
    ReservedKeyError,
)

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    from endpoints.collection_endpoints import DATABASE, SETTINGS

    if SETTINGS.persist_to_disk and SETTINGS.data_file.exists():
        await DATABASE.restore(SETTINGS.data_file)
    yield
    if SETTINGS.persist_to_disk:
        await DATABASE.persist(SETTINGS.data_file)


def _status_for(exc: DocStoreError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, DuplicateCollectionError):
        return 409
    if isinstance(exc, (ReservedKeyError, CorruptPersistedDataError)):
        return 400
    return 500


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from endpoints.collection_endpoints import router as collections_router
    from settings import get_settings

    logging.basicConfig(level=get_settings().log_level)

    app = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DocStoreError)
    async def docstore_error_handler(request: Request, exc: DocStoreError):
        status = _status_for(exc)
        if status >= 500:
            logger.error("unhandled docstore error on %s: %s", request.url.path, exc)
        return JSONResponse({"error": type(exc).__name__, "code": exc.code, "detail": str(exc)}, status_code=status)

    @app.exception_handler(FileNotFoundError)
    async def missing_file_handler(request: Request, exc: FileNotFoundError):
        return JSONResponse({"error": "FileNotFoundError", "detail": str(exc)}, status_code=404)

    @app.exception_handler(IsADirectoryError)
    async def directory_path_handler(request: Request, exc: IsADirectoryError):
        return JSONResponse({"error": "IsADirectoryError", "detail": str(exc)}, status_code=400)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(collections_router)

    return app


app = create_app()

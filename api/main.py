import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Iterable, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from adapters.base import UserStore
from adapters.factory import build_stores
from api.routes import build_user_router
from api.schemas import envelope
from utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


async def init_stores(stores: Iterable[UserStore]) -> None:
    # each store is its own failure domain; a dead one only disables its routes
    for store in stores:
        try:
            ready = await store.init()
        except Exception as exc:
            logger.error("%s init raised: %s", store.label, exc, exc_info=True)
            continue
        if not ready:
            logger.warning("%s routes under /api/%s will answer 503", store.label, store.engine)


async def close_stores(stores: Iterable[UserStore]) -> None:
    for store in stores:
        try:
            await store.close()
        except Exception as exc:
            logger.error("Error closing %s: %s", store.label, exc, exc_info=True)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    return envelope(False, status_code=exc.status_code, message=str(exc.detail))


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    message = "Invalid request body"
    if problems:
        message = f"{message} – {'; '.join(problems)}"
    return envelope(False, status_code=400, message=message)


async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return envelope(False, status_code=500, message=str(exc) or "Internal server error")


def create_application(
    settings: Optional[Settings] = None,
    stores: Optional[Iterable[UserStore]] = None,
) -> FastAPI:
    settings = settings or get_settings()
    store_list: List[UserStore] = list(stores) if stores is not None else build_stores(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_stores(store_list)
        yield
        await close_stores(store_list)

    application = FastAPI(
        title="Multi-Database CRUD API",
        version="0.1.0",
        description="Users CRUD served side by side from MongoDB, MySQL and SQLite",
        lifespan=lifespan,
    )

    application.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    application.add_exception_handler(RequestValidationError, _request_validation_handler)
    application.add_exception_handler(Exception, _unhandled_exception_handler)

    @application.get("/health")
    def health() -> dict:
        return {"status": "ok", "backends": {store.engine: store.is_ready() for store in store_list}}

    for store in store_list:
        application.include_router(build_user_router(store), prefix=f"/api/{store.engine}")

    static_dir = Path(settings.static_dir)
    if not static_dir.is_absolute():
        static_dir = PROJECT_ROOT / static_dir
    if static_dir.is_dir():
        application.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
    else:
        logger.warning("Static directory %s not found; browser forms are not served", static_dir)

    return application


app = create_application()

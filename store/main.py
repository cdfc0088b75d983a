import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas import envelope
from store.catalog import UserDirectory
from store.routes import products_router, users_router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "public"

ENDPOINTS = {
    "products": "GET  /products          - List all products (public)",
    "userById": "GET  /users/:id         - Get user by ID   (requires token)",
    "createUser": "POST /users            - Create a user    (requires token)",
}


async def log_requests(request: Request, call_next):
    timestamp = datetime.now(timezone.utc).isoformat()
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    logger.info("[LOG] %s -> %s %s", timestamp, request.method, url)
    return await call_next(request)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    if (exc.status_code, exc.detail) in ((404, "Not Found"), (405, "Method Not Allowed")):
        return _route_not_found(request)
    return envelope(False, status_code=exc.status_code, message=str(exc.detail))


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    return envelope(False, status_code=400, message="Validation Error – request body is not a valid user object.")


def _route_not_found(request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={
            "success": False,
            "message": f"Route not found: {request.method} {request.url.path}",
            "hint": "Check the URL and HTTP method. Visit GET / for available endpoints.",
        },
    )


def create_application(directory: Optional[UserDirectory] = None, static_dir: Optional[Path] = STATIC_DIR) -> FastAPI:
    application = FastAPI(
        title="Mini Online Store API",
        version="0.1.0",
        description="Public product catalogue and token-gated users over in-memory lists",
    )
    application.state.users = directory if directory is not None else UserDirectory()

    application.middleware("http")(log_requests)
    application.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    application.add_exception_handler(RequestValidationError, _request_validation_handler)

    @application.get("/")
    def welcome() -> dict:
        return {
            "success": True,
            "message": "Welcome to the Mini Online Store API!",
            "endpoints": ENDPOINTS,
        }

    application.include_router(products_router)
    application.include_router(users_router)
    # mounted last so the JSON welcome keeps / and the client lives at /index.html
    if static_dir is not None and static_dir.is_dir():
        application.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
    return application


app = create_application()

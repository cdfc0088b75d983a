import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from weather.dashboard import build_html

logger = logging.getLogger(__name__)


async def _plain_text_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return PlainTextResponse("404 - Not Found", status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def create_application(log_file: str) -> FastAPI:
    application = FastAPI(title="Weather Logger", version="0.1.0", docs_url=None, redoc_url=None, openapi_url=None)
    application.add_exception_handler(StarletteHTTPException, _plain_text_error)
    log_path = Path(log_file)

    @application.get("/", response_class=HTMLResponse)
    def dashboard():
        try:
            log_text = log_path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Could not read %s: %s", log_path, exc)
            return PlainTextResponse("Error: Could not read weather log file.", status_code=500)
        return HTMLResponse(build_html(log_text))

    return application

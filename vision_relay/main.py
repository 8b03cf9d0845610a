from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import AuthContext, ensure_authenticated
from .config import Settings, get_settings
from .errors import MethodNotAllowed
from .prompts import get_preset
from .relay import parse_relay_form, read_form, relay

logger = logging.getLogger("vision-relay")
logging.basicConfig(level=logging.INFO)

settings = get_settings()
# Every path belongs to the relay, so the interactive docs are not mounted
app = FastAPI(title=settings.app_name, docs_url=None, redoc_url=None, openapi_url=None)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

# Methods answered with 405 on every path
REJECTED_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE"]


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):  # type: ignore[override]
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    response.headers["X-App"] = settings.app_name
    return response


@app.exception_handler(StarletteHTTPException)
async def plain_text_http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception) -> PlainTextResponse:
    # Runs outside the middleware stack, so the CORS headers are set here
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return PlainTextResponse(
        "Error from upstream model service",
        status_code=status.HTTP_502_BAD_GATEWAY,
        headers=CORS_HEADERS,
    )


@app.get("/healthz")
async def health() -> dict:
    return {"status": "ok"}


@app.options("/{path:path}", include_in_schema=False)
async def preflight(path: str) -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/presets/{name}")
async def preset_completion(
    name: str,
    request: Request,
    context: AuthContext = Depends(ensure_authenticated),
    settings: Settings = Depends(get_settings),
):
    """Run a static prompt preset against the uploaded image and return its JSON object."""
    preset = get_preset(name)
    if preset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown preset '{name}'")

    form = await read_form(request)
    try:
        relay_request = await parse_relay_form(form, settings, preset=preset)
    finally:
        await form.close()

    return await relay(relay_request, settings, context)


@app.post("/{path:path}")
async def relay_completion(
    path: str,
    request: Request,
    context: AuthContext = Depends(ensure_authenticated),
    settings: Settings = Depends(get_settings),
):
    form = await read_form(request)
    try:
        relay_request = await parse_relay_form(form, settings)
    finally:
        await form.close()

    return await relay(relay_request, settings, context)


@app.api_route("/{path:path}", methods=REJECTED_METHODS, include_in_schema=False)
async def reject_method(path: str):
    raise MethodNotAllowed()


def create_app() -> FastAPI:
    return app

# main.py: LocalLibrary catalog: app factory, middleware and the error boundary
import asyncio
import logging
import time
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, configure_logging
from database import Store
from routes import authors, bookinstances, books, catalog, genres
from services.forms import BASE_DIR, render

logger = logging.getLogger("catalog.app")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'self'",
}


def render_error(request: Request, status_code: int, message: str, exc: Optional[BaseException] = None):
    settings: Settings = request.app.state.settings
    context = {"title": "Error", "status_code": status_code, "message": message, "error": None}
    if settings.debug and exc is not None:
        context["error"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    response = render(request, "error.html", context, status_code=status_code)
    # error pages may be sent from outside the middleware stack
    response.headers.update(SECURITY_HEADERS)
    return response


class RequestTimeoutMiddleware:
    """Cancel a request that runs longer than `timeout` seconds and answer 504 instead."""

    def __init__(self, app, timeout: float):
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_wrapper(message):
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=self.timeout)
        except asyncio.TimeoutError:
            request = Request(scope, receive)
            logger.error("%s %s timed out after %ss", request.method, request.url.path, self.timeout)
            if started:
                raise
            response = render_error(request, 504, "The request took too long to complete.")
            await response(scope, receive, send)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    store = Store(settings.database_url, echo=settings.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await store.init()
        try:
            yield
        finally:
            await store.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestTimeoutMiddleware, timeout=settings.request_timeout)
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    for module in (catalog, authors, genres, books, bookinstances):
        app.include_router(module.router)

    # outermost: sees the final status, 504s included
    @app.middleware("http")
    async def request_log(request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info("%s %s %s %.1fms", request.method, request.url.path, status_code, elapsed_ms)
        response.headers.update(SECURITY_HEADERS)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return render_error(request, exc.status_code, str(exc.detail), exc)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        # internals only reach the page in development
        message = str(exc) if request.app.state.settings.debug else "Something went wrong."
        return render_error(request, 500, message, exc)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:create_app", factory=True, host="127.0.0.1", port=8000)

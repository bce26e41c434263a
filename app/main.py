import logging
import time
import uuid

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse, Response
from app.api.routes import actions, home, other
from app.core.config import settings
from app.core.logging import client_ip_ctx, configure_logging, request_id_ctx
from app.core.middleware import TrackingMiddleware
from app.services.tracking import resolve_route_id

configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name)

# Innermost middleware: sees the resolved route once the router has run.
app.add_middleware(TrackingMiddleware)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    request_id_ctx.set(request_id)
    if request.client:
        client_ip_ctx.set(request.client.host)
    start = time.monotonic()
    response: Response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    duration_ms = int((time.monotonic() - start) * 1000)
    route_id = resolve_route_id(request.scope)
    logging.getLogger("access").info(
        "request",
        extra={
            "event": {
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "route": route_id.key if route_id else None,
            }
        },
    )
    return response


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response: Response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    if "set-cookie" in response.headers:
        # Counter cookies are per visitor; shared caches must not replay them.
        response.headers.setdefault("Cache-Control", "private, no-store")
    if settings.env.lower() == "production":
        response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")
    return response


@app.get("/health/live")
def live():
    return {"status": "ok"}


@app.get("/health/ready")
def ready():
    return {"status": "ready"}


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logging.getLogger("app").exception(
        "Unhandled exception",
        extra={
            "event": {
                "method": request.method,
                "path": request.url.path,
                "request_id": getattr(request.state, "request_id", None),
            }
        },
    )
    message = "Internal server error"
    details = None
    if settings.env.lower() != "production":
        message = f"{exc.__class__.__name__}: {exc}"
        details = [{"type": exc.__class__.__name__}]
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": message,
                "request_id": getattr(request.state, "request_id", None),
                "details": details,
            }
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": "validation_error",
                "message": "Validation error",
                "details": exc.errors(),
                "request_id": getattr(request.state, "request_id", None),
            }
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": f"http_{exc.status_code}",
                "message": exc.detail,
                "request_id": getattr(request.state, "request_id", None),
            }
        },
    )


app.include_router(home.router)
app.include_router(other.router)
app.include_router(actions.router, prefix="/api")

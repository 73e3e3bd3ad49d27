from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from psycopg import errors as pg_errors
import time
import uuid
from datetime import datetime, timezone
from .routers.auth import router as auth_router
from .routers.users import router as users_router
from .routers.payments import router as payments_router
from .routers.categories import router as categories_router
from .routers.products import router as products_router
from .routers.orders import router as orders_router
from .cache import RedisCache
from .config import settings
from .container import build_services
from .db import Database
from .errors import DomainError
from .logs import json_log
from .tokens import TokenService

app = FastAPI(title="POS API", version=settings.api_version)
STARTED_AT_UTC = datetime.now(timezone.utc)


def _current_request_id(req: Request) -> str:
    return getattr(req.state, "request_id", "") or req.headers.get("x-request-id") or "startup"


def error_content(exc: DomainError) -> dict:
    return {"detail": exc.detail}


@app.exception_handler(DomainError)
def _domain_error(_req: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content=error_content(exc))


# Safety net for constraint errors that escape a repository unmapped.
@app.exception_handler(pg_errors.UniqueViolation)
def _unique_violation(_req: Request, exc: Exception):
    content = {"detail": "conflict"}
    if settings.env in {"local", "dev"}:
        content["error"] = str(exc)
    return JSONResponse(status_code=409, content=content)


@app.exception_handler(pg_errors.ForeignKeyViolation)
def _foreign_key_violation(_req: Request, exc: Exception):
    content = {"detail": "invalid reference"}
    if settings.env in {"local", "dev"}:
        content["error"] = str(exc)
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(RequestValidationError)
def _request_validation_error(_req: Request, exc: Exception):
    content = {"detail": "validation failed"}
    if settings.env in {"local", "dev"} and hasattr(exc, "errors"):
        content["errors"] = exc.errors()
    return JSONResponse(status_code=422, content=content)


@app.exception_handler(Exception)
def _unhandled_exception(req: Request, exc: Exception):
    rid = _current_request_id(req)
    json_log(
        "error",
        "http.request.unhandled",
        request_id=rid,
        method=req.method,
        path=req.url.path,
        error=str(exc),
    )
    content = {"detail": "internal error", "request_id": rid}
    if settings.env in {"local", "dev"}:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)

# Correlation id + basic structured request logging.
@app.middleware("http")
async def _request_logging(request: Request, call_next):
    rid = (request.headers.get("X-Request-Id") or "").strip() or uuid.uuid4().hex
    request.state.request_id = rid
    started = time.time()
    path = request.url.path
    method = request.method
    client_ip = (request.client.host if request.client else None)

    try:
        response = await call_next(request)
    except Exception as exc:
        dur_ms = int((time.time() - started) * 1000)
        json_log(
            "error",
            "http.request.error",
            request_id=rid,
            method=method,
            path=path,
            client_ip=client_ip,
            duration_ms=dur_ms,
            error=str(exc),
        )
        raise

    response.headers["X-Request-Id"] = rid
    response.headers["X-Content-Type-Options"] = "nosniff"
    if not path.startswith("/health"):
        dur_ms = int((time.time() - started) * 1000)
        json_log(
            "info",
            "http.request",
            request_id=rid,
            method=method,
            path=path,
            status_code=response.status_code,
            client_ip=client_ip,
            duration_ms=dur_ms,
        )
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(payments_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(orders_router)

@app.on_event("startup")
def _startup():
    # One pool and one cache client for the whole process, injected into every service.
    db = Database.from_settings()
    db.open()
    cache = RedisCache.from_url(settings.redis_url)
    app.state.services = build_services(db, cache, TokenService.from_settings())
    ok, err = _db_health()
    if ok:
        json_log("info", "startup.db_connected", env=settings.env, version=settings.api_version)
    else:
        json_log("warning", "startup.db_check_failed", env=settings.env, error=err)
    ok, err = _cache_health()
    if not ok:
        json_log("warning", "startup.cache_check_failed", env=settings.env, error=err)

@app.on_event("shutdown")
def _shutdown():
    services = getattr(app.state, "services", None)
    if services is None:
        return
    if services.cache is not None:
        services.cache.close()
    if services.db is not None:
        services.db.close()


def _db_health():
    try:
        app.state.services.db.ping()
        return True, None
    except Exception as exc:
        return False, str(exc)


def _cache_health():
    try:
        app.state.services.cache.ping()
        return True, None
    except Exception as exc:
        return False, str(exc)


@app.get("/")
def root():
    return {"status": "ok", "service": "api"}


@app.get("/health")
def health(req: Request):
    request_id = _current_request_id(req)
    db_ok, db_err = _db_health()
    cache_ok, cache_err = _cache_health()
    content = {
        "status": "ok" if db_ok and cache_ok else "degraded",
        "env": settings.env,
        "db": "ok" if db_ok else "down",
        "cache": "ok" if cache_ok else "down",
        "service": "pos-backend",
        "version": settings.api_version,
        "started_at": STARTED_AT_UTC.isoformat(),
        "request_id": request_id,
    }
    if not (db_ok and cache_ok):
        if settings.env in {"local", "dev"}:
            content["error"] = db_err or cache_err
        return JSONResponse(status_code=503, content=content)
    return content


@app.get("/health/live")
def health_live(req: Request):
    return {
        "status": "ok",
        "env": settings.env,
        "service": "pos-backend",
        "request_id": _current_request_id(req),
    }


@app.get("/health/ready")
def health_ready(req: Request):
    request_id = _current_request_id(req)
    db_ok, db_err = _db_health()
    cache_ok, cache_err = _cache_health()
    if not (db_ok and cache_ok):
        content = {
            "status": "degraded",
            "env": settings.env,
            "db": "ok" if db_ok else "down",
            "cache": "ok" if cache_ok else "down",
            "service": "pos-backend",
            "version": settings.api_version,
            "request_id": request_id,
        }
        if settings.env in {"local", "dev"}:
            content["error"] = db_err or cache_err
        return JSONResponse(status_code=503, content=content)
    return {
        "status": "ready",
        "env": settings.env,
        "db": "ok",
        "cache": "ok",
        "service": "pos-backend",
        "version": settings.api_version,
        "request_id": request_id,
    }

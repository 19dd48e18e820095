# app/main.py
"""
FastAPI application entry point.
Includes API key middleware, domain error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import registration, verification, admin, health
from app.database import create_tables
from app.config import settings
from app.exceptions import (
    AlreadyArrivedError,
    EncodingError,
    FormValidationError,
    InvalidTransitionError,
    StoreError,
    VehicleNotFoundError,
)
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Event Vehicle Registry API",
    description="Vehicle registration, QR arrival verification and admin export for a single event.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the event front-end to call the API) ─────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the front-end origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth for the admin endpoints.
    Registration and verification stay open: drivers and gate staff use them.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith("/api/v1/admin") or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Domain Error Handlers ────────────────────────────────────────────────────
@app.exception_handler(FormValidationError)
async def form_validation_handler(request: Request, exc: FormValidationError):
    logger.info(f"Validation failed on {request.url.path}: {exc.errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.message, "errors": exc.errors},
    )


@app.exception_handler(VehicleNotFoundError)
async def not_found_handler(request: Request, exc: VehicleNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Vehicle not found"})


@app.exception_handler(AlreadyArrivedError)
async def already_arrived_handler(request: Request, exc: AlreadyArrivedError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "Vehicle already arrived", "vehicleId": exc.vehicle_id},
    )


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Store error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": exc.message})


@app.exception_handler(EncodingError)
async def encoding_error_handler(request: Request, exc: EncodingError):
    logger.error(f"QR encoding error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": exc.message})


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(registration.router, prefix="/api/v1", tags=["📝 Registration"])
app.include_router(verification.router, prefix="/api/v1", tags=["✅ Verification"])
app.include_router(admin.router,        prefix="/api/v1", tags=["📊 Admin"])
app.include_router(health.router,       prefix="/api/v1", tags=["💚 Health"])


@app.get("/", summary="Landing: entry points")
def landing():
    return {
        "name": settings.EVENT_NAME,
        "version": app.version,
        "entryPoints": {
            "register": "/api/v1/vehicles",
            "verify": "/api/v1/verify?id={vehicleId}",
            "admin": "/api/v1/admin/vehicles",
        },
    }


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info(f"🚀 {settings.EVENT_NAME} backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    if settings.PUBLIC_BASE_URL:
        logger.info(f"🔗 Verification links use {settings.PUBLIC_BASE_URL}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Registry backend shutting down...")

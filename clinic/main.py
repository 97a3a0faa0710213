from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
import time
import logging
import os

from .api.v1.appointments import router as appointments_router
from .api.v1.calendar import router as calendar_router
from .api.v1.schedules import router as schedules_router
from .api.v1.time_offs import router as time_offs_router
from .api.v1.treatments import router as treatments_router
from .api.v1.users import router as users_router
from .core.config import settings
from .core.database import init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

RESOURCE_PATHS = {
    "appointments": "appointments",
    "calendar": "calendar",
    "schedules": "schedules",
    "time_offs": "time-offs",
    "treatments": "treatments",
    "users": "users",
}

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Clinic scheduling: doctor availability, appointments, time off and treatments",
    openapi_url=f"{API_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url=None
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# TestClient sends Host: testserver
if not os.getenv("TESTING"):
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=["localhost", "127.0.0.1", "*.localhost", "testserver"]
    )

@app.middleware("http")
async def log_request_timing(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    response.headers["X-Process-Time"] = f"{elapsed:.4f}"
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {elapsed:.4f}s")
    return response

@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    # Service NotFoundError carries the missing id or email in detail
    return JSONResponse(
        status_code=404,
        content={
            "error": "Not Found",
            "message": getattr(exc, "detail", None) or "The requested resource was not found",
            "path": str(request.url.path)
        }
    )

@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred"
        }
    )

# Include routers
for router in (
    appointments_router,
    calendar_router,
    schedules_router,
    time_offs_router,
    treatments_router,
    users_router,
):
    app.include_router(router, prefix=API_PREFIX)

@app.on_event("startup")
async def startup_event():
    """Creates missing tables before the first request."""
    init_db()
    logger.info(f"{settings.APP_NAME} {settings.VERSION} ready")

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.VERSION
    }

@app.get("/")
async def root():
    return {"name": settings.APP_NAME, "docs": "/docs", "health": "/health", "info": f"{API_PREFIX}/info"}

@app.get(f"{API_PREFIX}/info")
async def api_info():
    """Lists the resource roots served under the versioned prefix."""
    endpoints = {name: f"{API_PREFIX}/{path}" for name, path in RESOURCE_PATHS.items()}
    endpoints["docs"] = "/docs"
    endpoints["openapi"] = f"{API_PREFIX}/openapi.json"
    return {
        "name": settings.APP_NAME,
        "version": settings.VERSION,
        "endpoints": endpoints
    }

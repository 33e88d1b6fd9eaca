# app/main.py
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import logger, setup_logging
from app.core.responses import format_response

setup_logging()

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cross-Origin-Resource-Policy": "cross-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables and initialize database
    from app.db.base import Base
    from app.db.database import database
    from app.db.init_db import init_db
    from app.db.session import SessionLocal
    from app.services.storage import storage_service

    Base.metadata.create_all(bind=database.engine)
    logger.info("Database tables created")

    db = SessionLocal()
    try:
        init_db(db)
    finally:
        db.close()

    storage_service.ensure_dirs()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started ({settings.ENVIRONMENT})")
    yield

    database.close()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
    allow_origin_regex=settings.BACKEND_CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)

register_exception_handlers(app)


# Add logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception:
        logger.error(
            f"Request: {request.method} {request.url.path} - Status: 500 - Time: {time.time() - start_time:.2f}s"
        )
        raise
    process_time = time.time() - start_time
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    logger.info(
        f"Request: {request.method} {request.url.path} - Status: {response.status_code} - Time: {process_time:.2f}s"
    )
    return response


@app.get("/")
async def root():
    return format_response(
        True,
        {"name": settings.PROJECT_NAME, "version": settings.VERSION, "docs": "/docs"},
        "Welcome to the Art Gallery API",
    )


@app.get("/health")
async def health_check():
    from app.api.endpoints.health import uptime_seconds

    data = {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "uptime": uptime_seconds(),
    }
    return format_response(True, data, "Service is running")


from app.api.api import api_router
from app.api.endpoints.seo import router as seo_router

app.include_router(api_router, prefix=settings.API_PREFIX)
app.include_router(seo_router, tags=["seo"])

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting {settings.PROJECT_NAME} in {settings.ENVIRONMENT} mode")
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=not settings.is_production)

# app/api/api.py
from fastapi import APIRouter, Depends

from app.middleware.rate_limit import api_rate_limit

api_router = APIRouter(dependencies=[Depends(api_rate_limit)])

# Health check with database status
from app.api.endpoints.health import router as health_router
api_router.include_router(health_router, tags=["health"])

# Catalog endpoints
from app.api.endpoints.categories import router as categories_router
api_router.include_router(categories_router, prefix="/categories", tags=["categories"])

from app.api.endpoints.artworks import router as artworks_router
api_router.include_router(artworks_router, prefix="/artworks", tags=["artworks"])

# Admin and storefront authentication
from app.api.endpoints.admin import router as admin_router
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])

from app.api.endpoints.auth import router as auth_router
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])

# Image uploads
from app.api.endpoints.uploads import router as uploads_router
api_router.include_router(uploads_router, prefix="/upload", tags=["upload"])

# Contact inquiries
from app.api.endpoints.inquiries import router as inquiries_router
api_router.include_router(inquiries_router, prefix="/inquiries", tags=["inquiries"])

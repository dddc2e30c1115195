"""Main API router."""

from fastapi import APIRouter

from promptbuilder.api.v1 import admin, auth, deploy, generate, health, projects

router = APIRouter(prefix="/api")

# Include sub-routers
router.include_router(health.router, tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(generate.router, prefix="/generate", tags=["generate"])
router.include_router(deploy.router, prefix="/deploy", tags=["deploy"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])

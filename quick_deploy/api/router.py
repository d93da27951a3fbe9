"""Main router for the wizard."""

from fastapi import APIRouter

from quick_deploy.api.routes import auth, deploy, health, pages

router = APIRouter()

# Pages go last: "/{owner}/{repo}" would otherwise shadow "/deploy/status"
# and "/oauth/{provider}"
router.include_router(health.router, tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(deploy.router, tags=["deploy"])
router.include_router(pages.router, tags=["pages"])

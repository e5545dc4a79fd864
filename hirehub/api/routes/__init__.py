"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from hirehub.api.routes.profile_routes import router as profile_router
from hirehub.api.routes.project_routes import router as project_router
from hirehub.api.routes.account_routes import router as account_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(profile_router)
api_router.include_router(project_router)
api_router.include_router(account_router)

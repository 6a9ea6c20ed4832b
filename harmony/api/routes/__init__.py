"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from harmony.api.routes.admin_routes import router as admin_router
from harmony.api.routes.auth_routes import router as auth_router
from harmony.api.routes.community_routes import router as community_router
from harmony.api.routes.company_routes import router as company_router
from harmony.api.routes.company_routes import user_companies_router
from harmony.api.routes.connection_routes import router as connection_router
from harmony.api.routes.digital_cv_routes import router as digital_cv_router
from harmony.api.routes.job_routes import applications_router
from harmony.api.routes.job_routes import router as job_router
from harmony.api.routes.message_routes import router as message_router
from harmony.api.routes.post_routes import router as post_router
from harmony.api.routes.post_routes import trending_router
from harmony.api.routes.user_routes import router as user_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(post_router)
api_router.include_router(trending_router)
api_router.include_router(job_router)
api_router.include_router(applications_router)
api_router.include_router(community_router)
api_router.include_router(connection_router)
api_router.include_router(message_router)
api_router.include_router(company_router)
api_router.include_router(user_companies_router)
api_router.include_router(digital_cv_router)
api_router.include_router(admin_router)

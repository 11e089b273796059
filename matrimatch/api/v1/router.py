from fastapi import APIRouter

from matrimatch.api.v1.compatibility import router as compatibility_router
from matrimatch.api.v1.matches import router as matches_router

api_router = APIRouter()

# Include all route modules
api_router.include_router(compatibility_router)
api_router.include_router(matches_router)

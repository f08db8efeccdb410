from fastapi import APIRouter
from changelog_api.api.v1.statuses import router as statuses_router
from changelog_api.api.v1.status_mappings import router as status_mappings_router
from changelog_api.api.v1.events import router as events_router
from changelog_api.api.v1.public import router as public_router

# Create main API router
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(statuses_router)
api_router.include_router(status_mappings_router)
api_router.include_router(events_router)
api_router.include_router(public_router)

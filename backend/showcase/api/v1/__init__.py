"""API v1 router aggregation."""
from fastapi import APIRouter

from showcase.api.v1.content import content_routers
from showcase.api.v1.site_settings import router as site_settings_router
from showcase.api.v1.upload import router as upload_router
from showcase.api.v1.webhooks import router as webhooks_router

router = APIRouter()

router.include_router(upload_router)
router.include_router(webhooks_router)
router.include_router(site_settings_router)
for content_router in content_routers:
    router.include_router(content_router)

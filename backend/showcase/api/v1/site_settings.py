"""Admin endpoints for the site-wide settings (name, contact details, logo, favicon)."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.auth.jwt import get_current_admin
from showcase.database import get_db
from showcase.models.user import Admin
from showcase.schemas.content import SiteSettingsResponse, SiteSettingsUpdate
from showcase.services.site_settings import get_site_settings
from showcase.utils.audit import log_audit_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/site-settings", tags=["Site settings"])


@router.get("", response_model=SiteSettingsResponse)
async def read_site_settings(
    current_admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await get_site_settings(db)


@router.patch("", response_model=SiteSettingsResponse)
async def update_site_settings(
    payload: SiteSettingsUpdate,
    current_admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    site_settings = await get_site_settings(db)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(site_settings, field, value)

    await db.commit()
    await db.refresh(site_settings)

    log_audit_event(
        "update",
        "site_settings",
        resource_id=site_settings.id,
        admin=current_admin,
        details={"fields": sorted(changes)},
    )
    return site_settings

"""Access to the singleton site settings record."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.constants import SITE_SETTINGS_ENTITY_ID
from showcase.models.content import SiteSettings

logger = logging.getLogger(__name__)


async def get_site_settings(db: AsyncSession) -> SiteSettings:
    """Return the site settings row, creating it with defaults on first use."""
    result = await db.execute(select(SiteSettings).where(SiteSettings.id == SITE_SETTINGS_ENTITY_ID))
    site_settings = result.scalar_one_or_none()
    if site_settings is not None:
        return site_settings

    site_settings = SiteSettings(id=SITE_SETTINGS_ENTITY_ID, site_name="", social_links={})
    db.add(site_settings)
    await db.commit()
    await db.refresh(site_settings)
    logger.info("Created default site settings")
    return site_settings

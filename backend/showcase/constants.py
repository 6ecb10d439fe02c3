"""Shared vocabulary for entity types, upload intents and upload record states."""

ENTITY_TYPES = (
    "admin",
    "service",
    "project",
    "testimonial",
    "brand",
    "team-member",
)

# Entity types managed from the dashboard, mapped to their URL collection
ENTITY_COLLECTIONS = {
    "service": "services",
    "project": "projects",
    "brand": "brands",
    "testimonial": "testimonials",
    "team-member": "team-members",
}

UPLOAD_INTENTS = (
    "avatar",
    "logo",
    "card-image",
    "banner-image",
    "image",
    "favicon",
    "other",
)

# Intents whose content type defaults to JPEG when the client sends none
IMAGE_INTENTS = frozenset({"avatar", "logo", "card-image", "banner-image", "image", "favicon", "other"})

DOCUMENT_STATUSES = ("pending", "uploaded", "verified", "failed", "expired")

# The site-wide settings record owns the site logo and favicon. It is a
# singleton, so uploads for it use a fixed id instead of a UUID.
SITE_SETTINGS_ENTITY_TYPE = "admin"
SITE_SETTINGS_ENTITY_ID = "settings"


def collection_for(entity_type: str) -> str:
    """Return the URL collection segment for a dashboard entity type."""
    try:
        return ENTITY_COLLECTIONS[entity_type]
    except KeyError:
        raise ValueError(f"Unknown entity type: {entity_type}") from None

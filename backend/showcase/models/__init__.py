"""Model exports."""
from showcase.models.user import Admin
from showcase.models.document import Document
from showcase.models.content import (
    Service,
    Project,
    Brand,
    Testimonial,
    TeamMember,
    SiteSettings,
    CONTENT_MODELS,
)

__all__ = [
    "Admin",
    "Document",
    "Service",
    "Project",
    "Brand",
    "Testimonial",
    "TeamMember",
    "SiteSettings",
    "CONTENT_MODELS",
]

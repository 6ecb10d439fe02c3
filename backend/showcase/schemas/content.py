"""Pydantic schemas for site content and bulk reordering.

Create schemas never require asset fields: the dashboard creates an entity
first and patches the asset URLs in once the uploads have finished.
"""
from datetime import datetime
from typing import Dict, Optional, List
from uuid import UUID
from pydantic import BaseModel, Field


# --- Service Schemas ---
class ServiceBase(BaseModel):
    """Base service schema."""
    title: str
    slug: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    is_active: bool = True


class ServiceCreate(ServiceBase):
    image: Optional[str] = None
    card_image: Optional[str] = None
    banner_image: Optional[str] = None


class ServiceUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    features: Optional[List[str]] = None
    is_active: Optional[bool] = None
    image: Optional[str] = None
    card_image: Optional[str] = None
    banner_image: Optional[str] = None


class ServiceResponse(ServiceBase):
    id: UUID
    slug: str
    image: Optional[str] = None
    card_image: Optional[str] = None
    banner_image: Optional[str] = None
    display_order: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Project Schemas ---
class ProjectBase(BaseModel):
    """Base project schema."""
    title: str
    slug: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    client_name: Optional[str] = None
    status: str = "draft"
    technologies: List[str] = Field(default_factory=list)
    is_featured: bool = False
    is_active: bool = False


class ProjectCreate(ProjectBase):
    featured_image: Optional[str] = None
    card_image: Optional[str] = None
    banner_image: Optional[str] = None


class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    client_name: Optional[str] = None
    status: Optional[str] = None
    technologies: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    featured_image: Optional[str] = None
    card_image: Optional[str] = None
    banner_image: Optional[str] = None


class ProjectResponse(ProjectBase):
    id: UUID
    slug: str
    featured_image: Optional[str] = None
    card_image: Optional[str] = None
    banner_image: Optional[str] = None
    display_order: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Brand Schemas ---
class BrandBase(BaseModel):
    name: str
    website_url: Optional[str] = None
    is_active: bool = True


class BrandCreate(BrandBase):
    logo: Optional[str] = None


class BrandUpdate(BaseModel):
    name: Optional[str] = None
    website_url: Optional[str] = None
    is_active: Optional[bool] = None
    logo: Optional[str] = None


class BrandResponse(BrandBase):
    id: UUID
    logo: Optional[str] = None
    display_order: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Testimonial Schemas ---
class TestimonialBase(BaseModel):
    client_name: str
    client_role: Optional[str] = None
    company_name: Optional[str] = None
    testimonial: str
    rating: int = Field(5, ge=1, le=5)
    is_featured: bool = False


class TestimonialCreate(TestimonialBase):
    client_image: Optional[str] = None
    company_logo: Optional[str] = None


class TestimonialUpdate(BaseModel):
    client_name: Optional[str] = None
    client_role: Optional[str] = None
    company_name: Optional[str] = None
    testimonial: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    is_featured: Optional[bool] = None
    client_image: Optional[str] = None
    company_logo: Optional[str] = None


class TestimonialResponse(TestimonialBase):
    id: UUID
    client_image: Optional[str] = None
    company_logo: Optional[str] = None
    display_order: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Team Member Schemas ---
class TeamMemberBase(BaseModel):
    name: str
    role: str
    bio: Optional[str] = None
    email: Optional[str] = None
    is_active: bool = True


class TeamMemberCreate(TeamMemberBase):
    image: Optional[str] = None


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    bio: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None
    image: Optional[str] = None


class TeamMemberResponse(TeamMemberBase):
    id: UUID
    image: Optional[str] = None
    display_order: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Site Settings Schemas ---
class SiteSettingsUpdate(BaseModel):
    site_name: Optional[str] = None
    tagline: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    logo: Optional[str] = None
    favicon: Optional[str] = None


class SiteSettingsResponse(BaseModel):
    id: str
    site_name: str = ""
    tagline: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    social_links: Dict[str, str] = Field(default_factory=dict)
    logo: Optional[str] = None
    favicon: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Reorder Schemas ---
class ReorderItem(BaseModel):
    """New display position for one entity."""
    id: UUID
    display_order: int = Field(..., ge=0)


class ReorderRequest(BaseModel):
    """Complete ordered set of a collection, sent in one request."""
    reorder_items: List[ReorderItem] = Field(..., min_length=1)


class ReorderResponse(BaseModel):
    matched_count: int
    modified_count: int
    message: str

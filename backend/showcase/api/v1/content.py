"""Admin content endpoints: create, patch, list, delete and bulk reorder.

Every dashboard collection exposes the same surface, so the routers are
built by one factory.
"""
import logging
from typing import Optional, Type
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.auth.jwt import get_current_admin
from showcase.constants import collection_for
from showcase.database import get_db
from showcase.models.content import CONTENT_MODELS
from showcase.models.user import Admin
from showcase.schemas.content import (
    BrandCreate,
    BrandResponse,
    BrandUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    ReorderRequest,
    ReorderResponse,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
    TeamMemberCreate,
    TeamMemberResponse,
    TeamMemberUpdate,
    TestimonialCreate,
    TestimonialResponse,
    TestimonialUpdate,
)
from showcase.services.reorder import apply_display_order
from showcase.utils.audit import log_audit_event
from showcase.utils.slugify import slugify

logger = logging.getLogger(__name__)


def build_content_router(
    entity_type: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
    *,
    slug_source: Optional[str] = None,
) -> APIRouter:
    """Build the admin router for one content collection.

    ``slug_source`` names the field a missing slug is derived from.
    """
    model = CONTENT_MODELS[entity_type]
    collection = collection_for(entity_type)
    label = entity_type.replace("-", " ").capitalize()
    router = APIRouter(prefix=f"/admin/{collection}", tags=[label])

    async def _get_or_404(db: AsyncSession, entity_id: UUID):
        result = await db.execute(select(model).where(model.id == entity_id))
        entity = result.scalar_one_or_none()
        if not entity:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{label} not found",
            )
        return entity

    @router.get("", response_model=list[response_schema])
    async def list_entities(
        current_admin: Admin = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db),
    ):
        result = await db.execute(
            select(model).order_by(model.display_order, model.created_at)
        )
        return result.scalars().all()

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    async def create_entity(
        payload: create_schema,
        current_admin: Admin = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db),
    ):
        values = payload.model_dump()
        if slug_source and not values.get("slug"):
            values["slug"] = slugify(values[slug_source])

        # New entities go to the end of the list
        max_order = await db.execute(select(func.coalesce(func.max(model.display_order), 0)))
        values["display_order"] = (max_order.scalar_one() or 0) + 1

        entity = model(**values)
        db.add(entity)
        await db.commit()
        await db.refresh(entity)

        log_audit_event("create", entity_type, resource_id=entity.id, admin=current_admin)
        return entity

    # Registered before /{entity_id} so "reorder" is not parsed as an id
    @router.patch("/reorder", response_model=ReorderResponse)
    async def reorder_entities(
        request: ReorderRequest,
        current_admin: Admin = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db),
    ):
        matched, modified = await apply_display_order(
            db, entity_type, request.reorder_items, admin=current_admin
        )
        return ReorderResponse(
            matched_count=matched,
            modified_count=modified,
            message=f"{collection.replace('-', ' ').capitalize()} reordered successfully",
        )

    @router.get("/{entity_id}", response_model=response_schema)
    async def get_entity(
        entity_id: UUID,
        current_admin: Admin = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db),
    ):
        return await _get_or_404(db, entity_id)

    @router.patch("/{entity_id}", response_model=response_schema)
    async def update_entity(
        entity_id: UUID,
        payload: update_schema,
        current_admin: Admin = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db),
    ):
        entity = await _get_or_404(db, entity_id)

        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(entity, field, value)

        await db.commit()
        await db.refresh(entity)

        log_audit_event(
            "update",
            entity_type,
            resource_id=entity.id,
            admin=current_admin,
            details={"fields": sorted(changes)},
        )
        return entity

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entity(
        entity_id: UUID,
        current_admin: Admin = Depends(get_current_admin),
        db: AsyncSession = Depends(get_db),
    ):
        entity = await _get_or_404(db, entity_id)
        await db.delete(entity)
        await db.commit()
        log_audit_event("delete", entity_type, resource_id=entity_id, admin=current_admin)

    return router


services_router = build_content_router(
    "service", ServiceCreate, ServiceUpdate, ServiceResponse, slug_source="title"
)
projects_router = build_content_router(
    "project", ProjectCreate, ProjectUpdate, ProjectResponse, slug_source="title"
)
brands_router = build_content_router("brand", BrandCreate, BrandUpdate, BrandResponse)
testimonials_router = build_content_router(
    "testimonial", TestimonialCreate, TestimonialUpdate, TestimonialResponse
)
team_members_router = build_content_router(
    "team-member", TeamMemberCreate, TeamMemberUpdate, TeamMemberResponse
)

content_routers = [
    services_router,
    projects_router,
    brands_router,
    testimonials_router,
    team_members_router,
]

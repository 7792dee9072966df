"""Children router.

Endpoints for managing the children whose motor skills are assessed.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from motorskills.core.dependencies import (
    STAFF_ROLES,
    ensure_child_access,
    get_current_profile,
    require_staff,
)
from motorskills.database import get_db
from motorskills.models.child import Child
from motorskills.models.profile import Profile
from motorskills.models.relationship import ParentChildRelationship
from motorskills.schemas.child import ChildCreate, ChildResponse, ChildUpdate

router = APIRouter(prefix="/children", tags=["Children"])

REQUIRED_CHILD_FIELDS = ("first_name", "last_name", "birthdate")


async def _get_child_or_404(db: AsyncSession, child_id: uuid.UUID) -> Child:
    child = await db.get(Child, child_id)
    if child is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Child not found",
        )
    return child


@router.get("/", response_model=list[ChildResponse])
async def list_children(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(get_current_profile),
):
    """List children: all for staff, linked children for parents."""
    query = select(Child).order_by(Child.last_name, Child.first_name)
    if current_profile.role not in STAFF_ROLES:
        query = query.join(
            ParentChildRelationship,
            ParentChildRelationship.child_id == Child.id,
        ).where(ParentChildRelationship.parent_profile_id == current_profile.id)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("/", response_model=ChildResponse, status_code=status.HTTP_201_CREATED)
async def create_child(
    body: ChildCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(require_staff),
):
    """Add a child. Requires admin or coach role."""
    child = Child(owner_profile_id=current_profile.id, **body.model_dump())
    db.add(child)
    await db.flush()
    await db.refresh(child)
    return child


@router.get("/{child_id}", response_model=ChildResponse)
async def get_child(
    child_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(get_current_profile),
):
    """Get details of a specific child."""
    child = await _get_child_or_404(db, child_id)
    await ensure_child_access(db, current_profile, child.id)
    return child


@router.put("/{child_id}", response_model=ChildResponse)
async def update_child(
    child_id: uuid.UUID,
    body: ChildUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(require_staff),
):
    """Update a child's information. Requires admin or coach role."""
    child = await _get_child_or_404(db, child_id)

    update_data = body.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        # Required columns cannot be cleared, only replaced
        if value is None and field in REQUIRED_CHILD_FIELDS:
            continue
        setattr(child, field, value)

    await db.flush()
    await db.refresh(child)
    return child


@router.delete("/{child_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_child(
    child_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(require_staff),
):
    """Remove a child. Requires admin or coach role."""
    child = await _get_child_or_404(db, child_id)
    await db.delete(child)
    await db.flush()
    return None

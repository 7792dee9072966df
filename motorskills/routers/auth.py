"""Authentication router.

Sign-in itself is handled by the external identity provider; these
endpoints expose and register the profile behind an identity.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from motorskills.core.dependencies import get_current_identity, get_current_profile
from motorskills.database import get_db
from motorskills.models.profile import Profile
from motorskills.schemas.auth import Identity, ProfileCreate, ProfileResponse

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me", response_model=ProfileResponse)
async def get_me(current_profile: Profile = Depends(get_current_profile)):
    """Return the profile of the currently authenticated identity."""
    return current_profile


@router.post("/profile", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def register_profile(
    body: ProfileCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Identity = Depends(get_current_identity),
):
    """Register a coach profile for an identity without one.

    Parents get their profile by accepting an invitation; admins are
    provisioned out of band.
    """
    if await db.get(Profile, identity.id) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Profile already registered",
        )

    email = identity.email.strip().lower()
    existing = await db.execute(select(Profile).where(Profile.email == email))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    profile = Profile(
        id=identity.id,
        email=email,
        full_name=body.full_name,
        role="coach",
    )
    db.add(profile)
    await db.flush()
    await db.refresh(profile)
    return profile

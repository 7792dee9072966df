import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from motorskills.core.security import decode_token
from motorskills.database import get_db
from motorskills.schemas.auth import Identity

# Tokens are issued by the external identity provider (passwordless sign-in)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

STAFF_ROLES = ("admin", "coach")


async def get_current_identity(
    token: Annotated[str, Depends(oauth2_scheme)],
) -> Identity:
    """Extract and validate the JWT from the Authorization header.

    Returns the authenticated identity (``sub`` and ``email`` claims).
    The identity may not have a profile yet, e.g. a parent about to
    accept an invitation.

    Raises:
        HTTPException 401: If the token is missing or invalid.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(token)
        subject: str | None = payload.get("sub")
        email: str | None = payload.get("email")
        token_type: str | None = payload.get("type")
        if subject is None or email is None or token_type != "access":
            raise credentials_exception
        identity_id = uuid.UUID(subject)
    except (JWTError, ValueError):
        raise credentials_exception

    return Identity(id=identity_id, email=email)


async def get_current_profile(
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Return the Profile ORM instance of the authenticated identity.

    Raises:
        HTTPException 403: If the identity has not registered a profile.
    """
    # Import here to avoid circular imports (models -> database -> dependencies)
    from motorskills.models.profile import Profile

    profile = await db.get(Profile, identity.id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No profile registered for this account",
        )
    return profile


async def require_staff(
    current_profile=Depends(get_current_profile),
):
    """Dependency that ensures the current profile is an admin or coach.

    Raises:
        HTTPException 403: If the profile is a parent.
    """
    if current_profile.role not in STAFF_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin or coach role required",
        )
    return current_profile


async def ensure_child_access(db: AsyncSession, profile, child_id: uuid.UUID) -> None:
    """Check that ``profile`` may read data of the given child.

    Staff may read every child; parents only the children they are
    linked to through an accepted invitation.

    Raises:
        HTTPException 403: If a parent is not linked to the child.
    """
    if profile.role in STAFF_ROLES:
        return

    from motorskills.models.relationship import ParentChildRelationship

    result = await db.execute(
        select(ParentChildRelationship).where(
            ParentChildRelationship.parent_profile_id == profile.id,
            ParentChildRelationship.child_id == child_id,
        )
    )
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this child",
        )

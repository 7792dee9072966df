"""Invitation Service.

Lifecycle of parent invitations: a coach or admin invites a parent by
email for one child; the parent redeems the token to get a ``parent``
profile linked to that child.

    pending --accept--> accepted
    pending --expiry observed on read / revoked--> expired

``accepted`` and ``expired`` are terminal.
"""

import logging
import re
import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from motorskills.config import settings
from motorskills.core.dependencies import STAFF_ROLES
from motorskills.models.child import Child
from motorskills.models.invitation import ParentInvitation
from motorskills.models.profile import Profile
from motorskills.models.relationship import ParentChildRelationship
from motorskills.schemas.auth import Identity
from motorskills.services.token_service import (
    calculate_expires_at,
    generate_token,
    is_token_expired,
    utcnow,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def build_invitation_url(token: str) -> str:
    return f"{settings.SITE_URL}/invitations/accept/{token}"


async def _find_pending(
    db: AsyncSession, email: str, child_id: uuid.UUID
) -> ParentInvitation | None:
    result = await db.execute(
        select(ParentInvitation).where(
            ParentInvitation.email == email,
            ParentInvitation.child_id == child_id,
            ParentInvitation.status == "pending",
        )
    )
    return result.scalar_one_or_none()


async def create_invitation(
    db: AsyncSession,
    inviter: Profile,
    email: str,
    child_id: uuid.UUID,
) -> ParentInvitation:
    """Create a pending invitation valid for ``INVITATION_EXPIRE_DAYS``.

    Checks run in order: inviter role, email syntax, child existence,
    no pending invitation for the same (email, child).

    Raises:
        HTTPException 403: inviter is not an admin or coach.
        HTTPException 422: email is malformed.
        HTTPException 404: child does not exist.
        HTTPException 409: a pending invitation already exists.
    """
    if inviter.role not in STAFF_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins and coaches can invite parents",
        )

    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Please enter a valid email address",
        )

    child = await db.get(Child, child_id)
    if child is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Child not found",
        )

    if await _find_pending(db, email, child_id) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An invitation for this email address is already pending",
        )

    invitation = ParentInvitation(
        email=email,
        child_id=child_id,
        invited_by=inviter.id,
        token=generate_token(),
        status="pending",
        expires_at=calculate_expires_at(settings.INVITATION_EXPIRE_DAYS),
    )
    db.add(invitation)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent request won the race for the pending slot, or
        # (practically never) the token collided.
        await db.rollback()
        if await _find_pending(db, email, child_id) is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An invitation for this email address is already pending",
            )
        logger.exception("Invitation insert failed for child %s", child_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create invitation",
        )

    await db.refresh(invitation)
    logger.info("Invitation %s created for child %s", invitation.id, child_id)
    return invitation


async def get_invitation_by_token(db: AsyncSession, token: str) -> ParentInvitation:
    """Raises HTTPException 404 if no invitation has this token."""
    result = await db.execute(
        select(ParentInvitation).where(ParentInvitation.token == token)
    )
    invitation = result.scalar_one_or_none()
    if invitation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invitation not found",
        )
    return invitation


async def _ensure_redeemable(db: AsyncSession, invitation: ParentInvitation) -> None:
    """Reject accepted or expired invitations.

    A pending invitation past its expiry is persisted as ``expired``
    (committed before raising, so the request rollback keeps it); list
    views rely on the stored status.
    """
    if invitation.status == "accepted":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This invitation has already been used",
        )

    if invitation.status == "expired" or is_token_expired(invitation.expires_at):
        if invitation.status != "expired":
            invitation.status = "expired"
            await db.commit()
            logger.info("Invitation %s marked expired", invitation.id)
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="This invitation has expired",
        )


async def validate_invitation(db: AsyncSession, token: str) -> ParentInvitation:
    """Look up an invitation by token and check it can still be redeemed.

    Raises:
        HTTPException 404: unknown token.
        HTTPException 400: already accepted.
        HTTPException 410: expired (stored status updated to ``expired``).
    """
    invitation = await get_invitation_by_token(db, token)
    await _ensure_redeemable(db, invitation)
    return invitation


async def _link_parent_to_child(
    db: AsyncSession, parent_profile_id: uuid.UUID, child_id: uuid.UUID
) -> None:
    """Create the parent-child relationship; an existing one is fine."""
    result = await db.execute(
        select(ParentChildRelationship).where(
            ParentChildRelationship.parent_profile_id == parent_profile_id,
            ParentChildRelationship.child_id == child_id,
        )
    )
    if result.scalar_one_or_none() is not None:
        logger.info("Relationship %s -> %s already exists", parent_profile_id, child_id)
        return

    try:
        async with db.begin_nested():
            db.add(ParentChildRelationship(
                parent_profile_id=parent_profile_id,
                child_id=child_id,
            ))
    except IntegrityError:
        logger.info("Relationship %s -> %s already exists", parent_profile_id, child_id)


async def accept_invitation(
    db: AsyncSession,
    token: str,
    identity: Identity,
    full_name: str | None = None,
) -> uuid.UUID:
    """Redeem an invitation for the authenticated identity.

    Creates a ``parent`` profile if the identity has none, links it to
    the invited child and marks the invitation accepted. The link is
    committed first; a failure to store the ``accepted`` status is
    logged and does not undo it. Returns the linked child id.

    Raises:
        HTTPException 404: unknown token.
        HTTPException 403: identity email differs from the invited email.
        HTTPException 400: already accepted.
        HTTPException 410: expired.
        HTTPException 409: identity already has a non-parent profile.
    """
    invitation = await get_invitation_by_token(db, token)

    if identity.email.strip().lower() != invitation.email.lower():
        logger.warning("Invitation %s redeemed with mismatching email", invitation.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your email address does not match the invitation",
        )

    await _ensure_redeemable(db, invitation)

    profile = await db.get(Profile, identity.id)
    if profile is None:
        profile = Profile(
            id=identity.id,
            email=identity.email.strip().lower(),
            full_name=full_name or identity.email.split("@")[0] or "Parent",
            role="parent",
        )
        db.add(profile)
        await db.flush()
    elif profile.role != "parent":
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This account is already registered with another role",
        )

    invitation_id = invitation.id
    child_id = invitation.child_id
    await _link_parent_to_child(db, identity.id, child_id)
    await db.commit()

    try:
        invitation.status = "accepted"
        invitation.accepted_at = utcnow()
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to mark invitation %s accepted", invitation_id)

    logger.info("Invitation for child %s accepted by %s", child_id, identity.id)
    return child_id


async def list_invitations(db: AsyncSession) -> list[ParentInvitation]:
    result = await db.execute(
        select(ParentInvitation).order_by(ParentInvitation.created_at.desc())
    )
    return list(result.scalars().all())


async def revoke_invitation(db: AsyncSession, invitation_id: uuid.UUID) -> ParentInvitation:
    """Supersede a pending invitation by marking it expired.

    Raises:
        HTTPException 404: unknown invitation.
        HTTPException 400: invitation was already accepted.
    """
    invitation = await db.get(ParentInvitation, invitation_id)
    if invitation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invitation not found",
        )
    if invitation.status == "accepted":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Accepted invitations cannot be revoked",
        )

    if invitation.status == "pending":
        invitation.status = "expired"
        await db.flush()
        logger.info("Invitation %s revoked", invitation.id)
    return invitation

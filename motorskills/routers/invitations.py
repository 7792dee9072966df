"""Invitations router.

Endpoints for inviting parents, validating invitation links and
accepting them.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from motorskills.core.dependencies import get_current_identity, get_current_profile, require_staff
from motorskills.core.rate_limit import ANONYMOUS_LIMIT, limiter
from motorskills.database import get_db
from motorskills.models.profile import Profile
from motorskills.schemas.auth import Identity
from motorskills.schemas.invitation import (
    InvitationAccept,
    InvitationAcceptResponse,
    InvitationCreate,
    InvitationCreated,
    InvitationListItem,
    InvitationValidation,
)
from motorskills.services import invitation_service

router = APIRouter(prefix="/invitations", tags=["Invitations"])


@router.post("/", response_model=InvitationCreated, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    body: InvitationCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(get_current_profile),
):
    """Invite a parent for a child. Requires admin or coach role.

    No email is sent; the returned URL is handed to the parent.
    """
    invitation = await invitation_service.create_invitation(
        db, current_profile, body.email, body.child_id,
    )
    return InvitationCreated(
        invitation_id=invitation.id,
        email=invitation.email,
        token=invitation.token,
        expires_at=invitation.expires_at,
        invitation_url=invitation_service.build_invitation_url(invitation.token),
    )


@router.get("/", response_model=list[InvitationListItem])
async def list_invitations(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(require_staff),
):
    """List all invitations, newest first."""
    invitations = await invitation_service.list_invitations(db)
    return [
        InvitationListItem(
            id=inv.id,
            email=inv.email,
            token=inv.token,
            child_name=inv.child.display_name,
            invited_by=inv.inviter.full_name,
            status=inv.status,
            expires_at=inv.expires_at,
            created_at=inv.created_at,
            accepted_at=inv.accepted_at,
        )
        for inv in invitations
    ]


@router.get("/validate", response_model=InvitationValidation)
@limiter.limit(ANONYMOUS_LIMIT)
async def validate_invitation(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    token: str = Query(..., min_length=1),
):
    """Check an invitation token before sign-in. No authentication required."""
    invitation = await invitation_service.validate_invitation(db, token)
    return InvitationValidation(
        email=invitation.email,
        child_name=invitation.child.display_name,
        invited_by=invitation.inviter.full_name,
        expires_at=invitation.expires_at,
        status=invitation.status,
    )


@router.post("/accept", response_model=InvitationAcceptResponse)
async def accept_invitation(
    body: InvitationAccept,
    db: Annotated[AsyncSession, Depends(get_db)],
    identity: Identity = Depends(get_current_identity),
):
    """Accept an invitation as the signed-in identity."""
    child_id = await invitation_service.accept_invitation(
        db, body.token, identity, full_name=body.full_name,
    )
    return InvitationAcceptResponse(child_id=child_id)


@router.delete("/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_invitation(
    invitation_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(require_staff),
):
    """Revoke a pending invitation. Requires admin or coach role."""
    await invitation_service.revoke_invitation(db, invitation_id)
    return None

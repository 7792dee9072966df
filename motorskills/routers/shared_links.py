"""Shared links router.

Coaches create read-only links to an assessment report; anyone holding
the token can view the report until the link expires (or, for one-time
links, once).
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from motorskills.core.dependencies import require_staff
from motorskills.core.rate_limit import ANONYMOUS_LIMIT, limiter
from motorskills.database import get_db
from motorskills.models.profile import Profile
from motorskills.models.shared_link import SharedLink
from motorskills.schemas.assessment import ReportResponse
from motorskills.schemas.shared_link import SharedLinkCreate, SharedLinkResponse
from motorskills.services import share_service
from motorskills.services.assessment_service import build_report

router = APIRouter(prefix="/share", tags=["Shared links"])


def _to_response(link: SharedLink) -> SharedLinkResponse:
    return SharedLinkResponse(
        id=link.id,
        assessment_id=link.assessment_id,
        token=link.token,
        expires_at=link.expires_at,
        one_time=link.one_time,
        accessed_at=link.accessed_at,
        created_at=link.created_at,
        share_url=share_service.build_share_url(link.token),
    )


@router.post("/", response_model=SharedLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_shared_link(
    body: SharedLinkCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(require_staff),
):
    """Create a share link for an assessment. Requires admin or coach role."""
    link = await share_service.create_shared_link(
        db, body.assessment_id, body.expires_in_days, body.one_time,
    )
    return _to_response(link)


@router.get("/", response_model=list[SharedLinkResponse])
async def list_shared_links(
    db: Annotated[AsyncSession, Depends(get_db)],
    assessment_id: uuid.UUID = Query(...),
    current_profile: Profile = Depends(require_staff),
):
    """All links of an assessment, newest first (expired and used included)."""
    links = await share_service.list_shared_links(db, assessment_id)
    return [_to_response(link) for link in links]


@router.get("/{token}", response_model=ReportResponse)
@limiter.limit(ANONYMOUS_LIMIT)
async def view_shared_report(
    request: Request,
    token: str,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """View the report behind a share link. No authentication required."""
    assessment = await share_service.resolve_shared_link(db, token)
    return build_report(assessment)

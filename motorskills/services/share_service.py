"""Share Service.

Read-only links to one assessment report for viewers without an account.
A link is rejected once ``expires_at`` has passed; a one-time link is
consumed by its first successful view (``accessed_at`` stamped) and
rejected afterwards.
"""

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from motorskills.config import settings
from motorskills.models.assessment import Assessment
from motorskills.models.shared_link import SharedLink
from motorskills.services.assessment_service import get_assessment
from motorskills.services.token_service import (
    calculate_expires_at,
    generate_token,
    is_token_expired,
    is_token_used,
    utcnow,
)

logger = logging.getLogger(__name__)


def build_share_url(token: str) -> str:
    return f"{settings.SITE_URL}/share/{token}"


async def create_shared_link(
    db: AsyncSession,
    assessment_id: uuid.UUID,
    expires_in_days: int | None = None,
    one_time: bool = False,
) -> SharedLink:
    """Create a link to the assessment's report.

    Raises:
        HTTPException 404: assessment does not exist.
        HTTPException 500: token collision.
    """
    await get_assessment(db, assessment_id)

    if expires_in_days is None:
        expires_in_days = settings.SHARE_LINK_EXPIRE_DAYS

    link = SharedLink(
        assessment_id=assessment_id,
        token=generate_token(),
        expires_at=calculate_expires_at(expires_in_days),
        one_time=one_time,
    )
    db.add(link)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        logger.exception("Shared link insert failed for assessment %s", assessment_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create share link",
        )

    await db.refresh(link)
    logger.info(
        "Shared link %s created for assessment %s (one_time=%s, days=%d)",
        link.id, assessment_id, one_time, expires_in_days,
    )
    return link


async def list_shared_links(db: AsyncSession, assessment_id: uuid.UUID) -> list[SharedLink]:
    """All links of an assessment, newest first, including expired and used ones."""
    result = await db.execute(
        select(SharedLink)
        .where(SharedLink.assessment_id == assessment_id)
        .order_by(SharedLink.created_at.desc())
    )
    return list(result.scalars().all())


async def resolve_shared_link(db: AsyncSession, token: str) -> Assessment:
    """Return the assessment behind a link for anonymous viewing.

    The first-access stamp of a one-time link is a conditional update
    (only while ``accessed_at`` is NULL), so two concurrent views cannot
    both consume it.

    Raises:
        HTTPException 404: unknown token.
        HTTPException 410: link expired.
        HTTPException 400: one-time link already used.
    """
    result = await db.execute(select(SharedLink).where(SharedLink.token == token))
    link = result.scalar_one_or_none()
    if link is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found",
        )

    if is_token_expired(link.expires_at):
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="This link has expired",
        )

    used_exception = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="This one-time link has already been used",
    )
    if is_token_used(link.one_time, link.accessed_at):
        raise used_exception

    if link.one_time:
        stamped = await db.execute(
            update(SharedLink)
            .where(SharedLink.id == link.id, SharedLink.accessed_at.is_(None))
            .values(accessed_at=utcnow())
        )
        if stamped.rowcount == 0:
            raise used_exception
        logger.info("One-time link %s consumed", link.id)

    return await get_assessment(db, link.assessment_id)

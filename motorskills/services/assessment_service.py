"""Assessment Service.

Recording assessments and building the report payload shared by the
authenticated views, the anonymous shared-link view and the PDF export.
"""

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from motorskills.core.dependencies import STAFF_ROLES
from motorskills.core.fms import FMS_ORDER
from motorskills.models.assessment import Assessment, FmsScore, SmcScore
from motorskills.models.child import Child
from motorskills.models.profile import Profile
from motorskills.models.relationship import ParentChildRelationship
from motorskills.schemas.assessment import AssessmentCreate, ReportResponse
from motorskills.services.age_service import calculate_age, format_age

logger = logging.getLogger(__name__)


async def create_assessment(
    db: AsyncSession, coach: Profile, body: AssessmentCreate
) -> Assessment:
    """Store an assessment with its FMS scores and, if any measure was
    given, its SMC scores."""
    child = await db.get(Child, body.child_id)
    if child is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Child not found",
        )

    assessment = Assessment(
        child_id=body.child_id,
        coach_id=coach.id,
        memo=body.memo,
        fms_score=FmsScore(**body.fms_scores.model_dump()),
    )
    if body.assessed_at is not None:
        assessment.assessed_at = body.assessed_at

    smc = body.smc_scores
    if smc.shuttle_run_sec is not None or smc.paper_ball_throw_m is not None:
        assessment.smc_score = SmcScore(
            shuttle_run_sec=smc.shuttle_run_sec,
            paper_ball_throw_m=smc.paper_ball_throw_m,
        )

    db.add(assessment)
    await db.flush()
    await db.refresh(assessment)
    logger.info("Assessment %s recorded for child %s", assessment.id, child.id)
    return assessment


async def get_assessment(db: AsyncSession, assessment_id: uuid.UUID) -> Assessment:
    """Raises HTTPException 404 if the assessment does not exist."""
    result = await db.execute(
        select(Assessment).where(Assessment.id == assessment_id)
    )
    assessment = result.scalar_one_or_none()
    if assessment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assessment not found",
        )
    return assessment


async def list_assessments(
    db: AsyncSession, profile: Profile, child_id: uuid.UUID | None = None
) -> list[Assessment]:
    """Assessments visible to ``profile``, newest first."""
    query = select(Assessment).order_by(Assessment.assessed_at.desc())
    if child_id is not None:
        query = query.where(Assessment.child_id == child_id)
    if profile.role not in STAFF_ROLES:
        query = query.join(
            ParentChildRelationship,
            ParentChildRelationship.child_id == Assessment.child_id,
        ).where(ParentChildRelationship.parent_profile_id == profile.id)

    result = await db.execute(query)
    return list(result.scalars().all())


def build_report(assessment: Assessment) -> ReportResponse:
    child = assessment.child
    years, months = calculate_age(child.birthdate, assessment.assessed_at)
    fms = assessment.fms_score

    return ReportResponse.model_validate({
        "assessment_id": assessment.id,
        "assessed_at": assessment.assessed_at,
        "memo": assessment.memo,
        "coach_name": assessment.coach.full_name if assessment.coach else None,
        "child": {
            "id": child.id,
            "first_name": child.first_name,
            "last_name": child.last_name,
            "birthdate": child.birthdate,
            "grade": child.grade,
            "age": {
                "years": years,
                "months": months,
                "label": format_age(child.birthdate, assessment.assessed_at),
            },
        },
        "fms_scores": fms,
        "fms_total": sum(getattr(fms, key) for key in FMS_ORDER) if fms else None,
        "smc_scores": assessment.smc_score,
    }, from_attributes=True)

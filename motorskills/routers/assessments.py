"""Assessments router.

Endpoints for recording assessments, comparing them over time and
exporting the report payload.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from motorskills.core.dependencies import ensure_child_access, get_current_profile, require_staff
from motorskills.core.fms import (
    FMS_CATEGORIES,
    FMS_MAX_SCORE,
    FMS_MIN_SCORE,
    FMS_ORDER,
    FMS_STAGE_DESCRIPTIONS,
    SMC_MEASURES,
)
from motorskills.database import get_db
from motorskills.models.profile import Profile
from motorskills.schemas.assessment import (
    AssessmentCreate,
    AssessmentResponse,
    CompareResponse,
    ReferenceResponse,
    ReportResponse,
    ScoreComparisonResponse,
)
from motorskills.services.assessment_service import (
    build_report,
    create_assessment,
    get_assessment,
    list_assessments,
)
from motorskills.services.score_service import compare_scores
from motorskills.services.token_service import as_utc

router = APIRouter(prefix="/assessments", tags=["Assessments"])


@router.post("/", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
async def record_assessment(
    body: AssessmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(require_staff),
):
    """Record an assessment; the caller is stored as the coach."""
    return await create_assessment(db, current_profile, body)


@router.get("/", response_model=list[AssessmentResponse])
async def get_assessments(
    db: Annotated[AsyncSession, Depends(get_db)],
    child_id: uuid.UUID | None = None,
    current_profile: Profile = Depends(get_current_profile),
):
    """List assessments visible to the caller, newest first."""
    return await list_assessments(db, current_profile, child_id)


@router.get("/compare", response_model=CompareResponse)
async def get_child_history(
    db: Annotated[AsyncSession, Depends(get_db)],
    child_id: uuid.UUID = Query(...),
    current_profile: Profile = Depends(get_current_profile),
):
    """All assessments of one child, newest first, for the comparison view."""
    await ensure_child_access(db, current_profile, child_id)
    assessments = await list_assessments(db, current_profile, child_id)
    if not assessments:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No assessments found for this child",
        )

    return {
        "assessments": [
            {
                "id": a.id,
                "assessed_at": a.assessed_at,
                "memo": a.memo,
                "coach": a.coach.full_name if a.coach else None,
                "fms_scores": a.fms_score,
                "smc_scores": a.smc_score,
            }
            for a in assessments
        ]
    }


@router.get("/reference", response_model=ReferenceResponse)
async def get_reference(
    current_profile: Profile = Depends(get_current_profile),
):
    """FMS categories, score stages and SMC measure ranges."""
    return {
        "fms_categories": [
            {"key": key, **FMS_CATEGORIES[key]} for key in FMS_ORDER
        ],
        "fms_min_score": FMS_MIN_SCORE,
        "fms_max_score": FMS_MAX_SCORE,
        "fms_stages": [
            {"score": score, "description": description}
            for score, description in sorted(FMS_STAGE_DESCRIPTIONS.items())
        ],
        "smc_measures": [
            {"key": key, **measure} for key, measure in SMC_MEASURES.items()
        ],
    }


@router.get("/{assessment_id}", response_model=ReportResponse)
async def get_assessment_detail(
    assessment_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(get_current_profile),
):
    """Full report of one assessment."""
    assessment = await get_assessment(db, assessment_id)
    await ensure_child_access(db, current_profile, assessment.child_id)
    return build_report(assessment)


@router.get("/{assessment_id}/report", response_model=ReportResponse)
async def export_report(
    assessment_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(get_current_profile),
):
    """Report payload consumed by the PDF renderer."""
    assessment = await get_assessment(db, assessment_id)
    await ensure_child_access(db, current_profile, assessment.child_id)
    return build_report(assessment)


@router.get("/{assessment_id}/compare/{other_id}", response_model=ScoreComparisonResponse)
async def compare_assessments(
    assessment_id: uuid.UUID,
    other_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Profile = Depends(get_current_profile),
):
    """Score changes between two assessments of the same child.

    The older assessment is the baseline.
    """
    first = await get_assessment(db, assessment_id)
    second = await get_assessment(db, other_id)
    if first.child_id != second.child_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Assessments belong to different children",
        )
    await ensure_child_access(db, current_profile, first.child_id)

    baseline, current = sorted((first, second), key=lambda a: as_utc(a.assessed_at))
    if baseline.fms_score is None or current.fms_score is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="FMS scores missing",
        )

    return {
        "baseline": AssessmentResponse.model_validate(baseline),
        "current": AssessmentResponse.model_validate(current),
        "changes": compare_scores(baseline.fms_score, current.fms_score),
    }

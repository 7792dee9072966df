import uuid
from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from motorskills.core.fms import FMS_MAX_SCORE, FMS_MIN_SCORE, SMC_MEASURES
from motorskills.schemas.child import AgeResponse

MovementScore = Annotated[int, Field(ge=FMS_MIN_SCORE, le=FMS_MAX_SCORE)]


class FmsScores(BaseModel):
    """Seven basic movements, each scored 1-5."""

    run: MovementScore
    balance_beam: MovementScore
    jump: MovementScore
    throw: MovementScore
    catch: MovementScore
    dribble: MovementScore
    roll: MovementScore

    model_config = ConfigDict(from_attributes=True)


class SmcScores(BaseModel):
    shuttle_run_sec: float | None = Field(
        None,
        ge=SMC_MEASURES["shuttle_run_sec"]["min"],
        le=SMC_MEASURES["shuttle_run_sec"]["max"],
    )
    paper_ball_throw_m: float | None = Field(
        None,
        ge=SMC_MEASURES["paper_ball_throw_m"]["min"],
        le=SMC_MEASURES["paper_ball_throw_m"]["max"],
    )

    model_config = ConfigDict(from_attributes=True)


class AssessmentCreate(BaseModel):
    child_id: uuid.UUID
    assessed_at: datetime | None = None
    memo: str | None = None
    fms_scores: FmsScores
    smc_scores: SmcScores = SmcScores()


class AssessmentResponse(BaseModel):
    id: uuid.UUID
    child_id: uuid.UUID
    coach_id: uuid.UUID
    assessed_at: datetime
    memo: str | None = None
    fms_scores: FmsScores | None = Field(None, validation_alias="fms_score")
    smc_scores: SmcScores | None = Field(None, validation_alias="smc_score")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CompareItem(BaseModel):
    id: uuid.UUID
    assessed_at: datetime
    memo: str | None = None
    coach: str | None = None
    fms_scores: FmsScores | None = None
    smc_scores: SmcScores | None = None


class CompareResponse(BaseModel):
    assessments: list[CompareItem]


class ScoreChange(BaseModel):
    key: str
    label: str
    old: int
    new: int
    diff: int
    percent_change: float | None = None


class ScoreComparisonResponse(BaseModel):
    baseline: AssessmentResponse
    current: AssessmentResponse
    changes: list[ScoreChange]


class ReportChild(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    birthdate: date
    grade: str | None = None
    age: AgeResponse


class ReportResponse(BaseModel):
    """Full report payload, also the input of the PDF renderer."""

    assessment_id: uuid.UUID
    assessed_at: datetime
    memo: str | None = None
    coach_name: str | None = None
    child: ReportChild
    fms_scores: FmsScores | None = None
    fms_total: int | None = None
    smc_scores: SmcScores | None = None


class MovementCategory(BaseModel):
    key: str
    label: str
    description: str


class ScoreStage(BaseModel):
    score: int
    description: str


class SmcMeasure(BaseModel):
    key: str
    label: str
    unit: str
    min: float
    max: float


class ReferenceResponse(BaseModel):
    """Scoring rubric shown next to the assessment form."""

    fms_categories: list[MovementCategory]
    fms_min_score: int
    fms_max_score: int
    fms_stages: list[ScoreStage]
    smc_measures: list[SmcMeasure]

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Integer, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motorskills.database import Base


class Assessment(Base):
    __tablename__ = "assessments"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    coach_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=False,
    )
    assessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships (eager, async sessions cannot lazy-load)
    child: Mapped["Child"] = relationship(lazy="selectin")  # noqa: F821
    coach: Mapped["Profile"] = relationship(lazy="selectin")  # noqa: F821
    fms_score: Mapped["FmsScore | None"] = relationship(
        back_populates="assessment", uselist=False, lazy="selectin",
        cascade="all, delete-orphan",
    )
    smc_score: Mapped["SmcScore | None"] = relationship(
        back_populates="assessment", uselist=False, lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Assessment(id={self.id}, child_id={self.child_id})>"


class FmsScore(Base):
    """Scores (1-5) for the seven basic movements."""

    __tablename__ = "fms_scores"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    assessment_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, unique=True,
    )
    run: Mapped[int] = mapped_column(Integer, nullable=False)
    balance_beam: Mapped[int] = mapped_column(Integer, nullable=False)
    jump: Mapped[int] = mapped_column(Integer, nullable=False)
    throw: Mapped[int] = mapped_column(Integer, nullable=False)
    catch: Mapped[int] = mapped_column(Integer, nullable=False)
    dribble: Mapped[int] = mapped_column(Integer, nullable=False)
    roll: Mapped[int] = mapped_column(Integer, nullable=False)

    assessment: Mapped["Assessment"] = relationship(back_populates="fms_score")


class SmcScore(Base):
    """Supplementary measures recorded alongside the FMS scores."""

    __tablename__ = "smc_scores"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    assessment_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, unique=True,
    )
    shuttle_run_sec: Mapped[float | None] = mapped_column(Float, nullable=True)
    paper_ball_throw_m: Mapped[float | None] = mapped_column(Float, nullable=True)

    assessment: Mapped["Assessment"] = relationship(back_populates="smc_score")

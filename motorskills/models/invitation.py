import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motorskills.database import Base

INVITATION_STATUSES = ("pending", "accepted", "expired")


class ParentInvitation(Base):
    __tablename__ = "parent_invitations"
    __table_args__ = (
        # At most one pending invitation per (email, child)
        Index(
            "uq_parent_invitations_pending",
            "email",
            "child_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=False,
    )
    invited_by: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=False,
    )
    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    accepted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )

    # Relationships
    child: Mapped["Child"] = relationship(lazy="selectin")  # noqa: F821
    inviter: Mapped["Profile"] = relationship(lazy="selectin")  # noqa: F821

    def __repr__(self) -> str:
        return f"<ParentInvitation(id={self.id}, email={self.email!r}, status={self.status!r})>"

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from motorskills.database import Base


class ParentChildRelationship(Base):
    """Grants a parent profile read access to one child."""

    __tablename__ = "parent_child_relationships"
    __table_args__ = (
        UniqueConstraint("parent_profile_id", "child_id", name="uq_parent_child"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    parent_profile_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False,
    )
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self) -> str:
        return (
            f"<ParentChildRelationship(parent={self.parent_profile_id}, "
            f"child={self.child_id})>"
        )

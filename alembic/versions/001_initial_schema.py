"""Initial schema: profiles, children, assessments, invitations, shared links.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "children",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_profile_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("birthdate", sa.Date(), nullable=False),
        sa.Column("grade", sa.String(50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "parent_child_relationships",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "parent_profile_id", sa.Uuid(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "child_id", sa.Uuid(),
            sa.ForeignKey("children.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("parent_profile_id", "child_id", name="uq_parent_child"),
    )

    op.create_table(
        "assessments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "child_id", sa.Uuid(),
            sa.ForeignKey("children.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("coach_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("assessed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("memo", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_assessments_child_id", "assessments", ["child_id"])

    op.create_table(
        "fms_scores",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "assessment_id", sa.Uuid(),
            sa.ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("run", sa.Integer(), nullable=False),
        sa.Column("balance_beam", sa.Integer(), nullable=False),
        sa.Column("jump", sa.Integer(), nullable=False),
        sa.Column("throw", sa.Integer(), nullable=False),
        sa.Column("catch", sa.Integer(), nullable=False),
        sa.Column("dribble", sa.Integer(), nullable=False),
        sa.Column("roll", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("assessment_id"),
    )

    op.create_table(
        "smc_scores",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "assessment_id", sa.Uuid(),
            sa.ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("shuttle_run_sec", sa.Float(), nullable=True),
        sa.Column("paper_ball_throw_m", sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("assessment_id"),
    )

    op.create_table(
        "parent_invitations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "child_id", sa.Uuid(),
            sa.ForeignKey("children.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("invited_by", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )
    op.create_index(
        "uq_parent_invitations_pending",
        "parent_invitations",
        ["email", "child_id"],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
    )

    op.create_table(
        "shared_links",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "assessment_id", sa.Uuid(),
            sa.ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("one_time", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("accessed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )
    op.create_index("ix_shared_links_assessment_id", "shared_links", ["assessment_id"])


def downgrade() -> None:
    op.drop_index("ix_shared_links_assessment_id", table_name="shared_links")
    op.drop_table("shared_links")
    op.drop_index("uq_parent_invitations_pending", table_name="parent_invitations")
    op.drop_table("parent_invitations")
    op.drop_table("smc_scores")
    op.drop_table("fms_scores")
    op.drop_index("ix_assessments_child_id", table_name="assessments")
    op.drop_table("assessments")
    op.drop_table("parent_child_relationships")
    op.drop_table("children")
    op.drop_table("profiles")

"""routing schema: users, questions, question responses

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19

Indexes:
- ix_users_role_approved: moderator directory lookups
- ix_questions_assigned_status: workload counts per moderator
- ix_questions_status_priority_created: pending sweep ordering
"""

from alembic import op
import sqlalchemy as sa


revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="user"),
        sa.Column("skills", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role_approved", "users", ["role", "approved"])

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("summary", sa.String(length=300)),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("assigned_to_id", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("suggested_skills", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("tags", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_questions_author_id", "questions", ["author_id"])
    op.create_index("ix_questions_assigned_status", "questions", ["assigned_to_id", "status"])
    op.create_index(
        "ix_questions_status_priority_created",
        "questions",
        ["status", "priority", "created_at"],
    )

    op.create_table(
        "question_responses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("question_id", sa.Integer(), sa.ForeignKey("questions.id"), nullable=False),
        sa.Column("moderator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_answer", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_question_responses_question_id", "question_responses", ["question_id"])


def downgrade() -> None:
    op.drop_index("ix_question_responses_question_id", table_name="question_responses")
    op.drop_table("question_responses")
    op.drop_index("ix_questions_status_priority_created", table_name="questions")
    op.drop_index("ix_questions_assigned_status", table_name="questions")
    op.drop_index("ix_questions_author_id", table_name="questions")
    op.drop_table("questions")
    op.drop_index("ix_users_role_approved", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")

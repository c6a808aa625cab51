"""create users, courses, purchases and course_progress tables

Revision ID: a1c3e5f7b9d1
Revises:
Create Date: 2026-10-19 10:12:40.518220

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1c3e5f7b9d1"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("enrolled_courses", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("thumbnail", sa.Text(), nullable=False),
        sa.Column("notes_url", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("discount", sa.Integer(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("content", sa.JSON(), nullable=False),
        sa.Column("ratings", sa.JSON(), nullable=False),
        sa.Column("educator_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("enrolled_students", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "discount >= 0 AND discount <= 100", name="ck_course_discount"
        ),
    )
    op.create_index("ix_courses_id", "courses", ["id"])
    op.create_index("ix_courses_title", "courses", ["title"])
    op.create_index("ix_courses_educator_id", "courses", ["educator_id"])

    purchase_status = sa.Enum("pending", "completed", name="purchase_status")
    op.create_table(
        "purchases",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.id"), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", purchase_status, nullable=False),
        sa.Column("payment_reference", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_purchases_id", "purchases", ["id"])
    op.create_index("ix_purchases_course_id", "purchases", ["course_id"])
    op.create_index("ix_purchases_user_id", "purchases", ["user_id"])

    op.create_table(
        "course_progress",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("course_id", sa.Integer(), sa.ForeignKey("courses.id"), nullable=False),
        sa.Column("lecture_completed", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "user_id", "course_id", name="uq_course_progress_user_course"
        ),
    )
    op.create_index("ix_course_progress_id", "course_progress", ["id"])
    op.create_index("ix_course_progress_user_id", "course_progress", ["user_id"])
    op.create_index("ix_course_progress_course_id", "course_progress", ["course_id"])


def downgrade() -> None:
    op.drop_table("course_progress")
    op.drop_table("purchases")
    sa.Enum(name="purchase_status").drop(op.get_bind(), checkfirst=True)
    op.drop_table("courses")
    op.drop_table("users")

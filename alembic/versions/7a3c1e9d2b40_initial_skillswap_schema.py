"""initial skillswap schema

Revision ID: 7a3c1e9d2b40
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7a3c1e9d2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PENDING_ONLY = sa.text("status = 'PENDING'")


def upgrade() -> None:
    """Create users, skills, swap requests, ratings, reports and admin logs."""
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("availability", sa.String(), nullable=True),
        sa.Column("profile_photo", sa.String(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column(
            "role",
            sa.Enum("USER", "ADMIN", "SUPER_ADMIN", name="userrole"),
            server_default="USER",
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("banned_at", sa.DateTime(), nullable=True),
        sa.Column("banned_until", sa.DateTime(), nullable=True),
        sa.Column("banned_reason", sa.String(), nullable=True),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_user_email"),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=False)
    op.create_index("ix_user_is_public", "user", ["is_public"], unique=False)

    op.create_table(
        "skill",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "type",
            sa.Enum("OFFERED", "WANTED", name="skilltype"),
            nullable=False,
        ),
        sa.Column("is_flagged", sa.Boolean(), nullable=False),
        sa.Column("flag_reason", sa.String(), nullable=True),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_skill_user_id", "skill", ["user_id"], unique=False)
    op.create_index("ix_skill_name", "skill", ["name"], unique=False)

    op.create_table(
        "swap_request",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sender_id", sa.Integer(), nullable=False),
        sa.Column("receiver_id", sa.Integer(), nullable=False),
        sa.Column("pair_low_id", sa.Integer(), nullable=False),
        sa.Column("pair_high_id", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "PENDING",
                "ACCEPTED",
                "REJECTED",
                "CANCELLED",
                name="swapstatus",
            ),
            server_default="PENDING",
            nullable=False,
        ),
        sa.Column("message", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["sender_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["receiver_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_swap_request_sender_id",
        "swap_request",
        ["sender_id"],
        unique=False,
    )
    op.create_index(
        "ix_swap_request_receiver_id",
        "swap_request",
        ["receiver_id"],
        unique=False,
    )
    op.create_index(
        "ix_swap_request_pair_status",
        "swap_request",
        ["pair_low_id", "pair_high_id", "status"],
        unique=False,
    )
    op.create_index(
        "uq_swap_request_pending_pair",
        "swap_request",
        ["pair_low_id", "pair_high_id"],
        unique=True,
        sqlite_where=PENDING_ONLY,
        postgresql_where=PENDING_ONLY,
    )

    op.create_table(
        "rating",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("swap_request_id", sa.Integer(), nullable=False),
        sa.Column("rater_id", sa.Integer(), nullable=False),
        sa.Column("rated_user_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("feedback", sa.String(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_rating_range"),
        sa.ForeignKeyConstraint(
            ["swap_request_id"],
            ["swap_request.id"],
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["rater_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["rated_user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "swap_request_id",
            "rater_id",
            name="uq_rating_swap_rater",
        ),
    )
    op.create_index(
        "ix_rating_swap_request_id",
        "rating",
        ["swap_request_id"],
        unique=False,
    )
    op.create_index("ix_rating_rater_id", "rating", ["rater_id"], unique=False)
    op.create_index(
        "ix_rating_rated_user_id",
        "rating",
        ["rated_user_id"],
        unique=False,
    )

    op.create_table(
        "report",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("reporter_id", sa.Integer(), nullable=False),
        sa.Column(
            "type",
            sa.Enum("USER", "SKILL", name="reporttype"),
            nullable=False,
        ),
        sa.Column("reported_user_id", sa.Integer(), nullable=True),
        sa.Column("reported_skill_id", sa.Integer(), nullable=True),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "PENDING",
                "REVIEWED",
                "RESOLVED",
                "DISMISSED",
                name="reportstatus",
            ),
            server_default="PENDING",
            nullable=False,
        ),
        sa.Column("resolution", sa.String(), nullable=True),
        sa.Column("reviewed_by", sa.Integer(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["reporter_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["reported_user_id"], ["user.id"]),
        sa.ForeignKeyConstraint(
            ["reported_skill_id"],
            ["skill.id"],
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(["reviewed_by"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_report_reporter_id", "report", ["reporter_id"], unique=False)
    op.create_index(
        "ix_report_reported_user_id",
        "report",
        ["reported_user_id"],
        unique=False,
    )
    op.create_index(
        "ix_report_reported_skill_id",
        "report",
        ["reported_skill_id"],
        unique=False,
    )

    op.create_table(
        "admin_log",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("admin_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("target_type", sa.String(), nullable=True),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.String(), nullable=True),
        sa.Column("ip_address", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["admin_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_admin_log_admin_id", "admin_log", ["admin_id"], unique=False)
    op.create_index("ix_admin_log_action", "admin_log", ["action"], unique=False)


def downgrade() -> None:
    """Drop every skillswap table."""
    op.drop_index("ix_admin_log_action", table_name="admin_log")
    op.drop_index("ix_admin_log_admin_id", table_name="admin_log")
    op.drop_table("admin_log")

    op.drop_index("ix_report_reported_skill_id", table_name="report")
    op.drop_index("ix_report_reported_user_id", table_name="report")
    op.drop_index("ix_report_reporter_id", table_name="report")
    op.drop_table("report")

    op.drop_index("ix_rating_rated_user_id", table_name="rating")
    op.drop_index("ix_rating_rater_id", table_name="rating")
    op.drop_index("ix_rating_swap_request_id", table_name="rating")
    op.drop_table("rating")

    op.drop_index("uq_swap_request_pending_pair", table_name="swap_request")
    op.drop_index("ix_swap_request_pair_status", table_name="swap_request")
    op.drop_index("ix_swap_request_receiver_id", table_name="swap_request")
    op.drop_index("ix_swap_request_sender_id", table_name="swap_request")
    op.drop_table("swap_request")

    op.drop_index("ix_skill_name", table_name="skill")
    op.drop_index("ix_skill_user_id", table_name="skill")
    op.drop_table("skill")

    op.drop_index("ix_user_is_public", table_name="user")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")

    for enum_name in ("reportstatus", "reporttype", "swapstatus", "skilltype", "userrole"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)

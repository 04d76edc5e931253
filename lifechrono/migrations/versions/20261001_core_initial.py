"""initial schema: users, auth, entries, recurring, mood, snapshots, insights

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255)),
        sa.Column("timezone", sa.String(length=64), nullable=False, server_default="UTC"),
        sa.Column("weekly_goals", sa.JSON(), nullable=True),
        sa.Column("is_super_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "auth_revoked_token",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("jti", sa.String(length=64), nullable=False, unique=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE")),
        sa.Column("token_type", sa.String(length=16), nullable=False, server_default="refresh"),
        sa.Column("revoked_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_auth_revoked_token_user_id", "auth_revoked_token", ["user_id"])

    op.create_table(
        "recurring_task_template",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=16), nullable=False),
        sa.Column("default_duration", sa.Integer(), nullable=False),
        sa.Column("days_of_week", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "default_duration >= 1 AND default_duration <= 1440",
            name="ck_recurring_task_template_duration",
        ),
    )
    op.create_index("ix_recurring_task_template_user_id", "recurring_task_template", ["user_id"])
    op.create_index(
        "ix_recurring_task_template_user_active", "recurring_task_template", ["user_id", "is_active"]
    )

    op.create_table(
        "entries_time_entry",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=16), nullable=False),
        sa.Column("sub_category", sa.String(length=64)),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("note", sa.Text()),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "recurring_task_id",
            sa.Integer(),
            sa.ForeignKey("recurring_task_template.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "duration_minutes >= 1 AND duration_minutes <= 1440",
            name="ck_entries_time_entry_duration",
        ),
    )
    op.create_index("ix_entries_time_entry_user_id", "entries_time_entry", ["user_id"])
    op.create_index("ix_entries_time_entry_recurring_task_id", "entries_time_entry", ["recurring_task_id"])
    op.create_index("ix_entries_time_entry_user_date", "entries_time_entry", ["user_id", "date"])
    op.create_index("ix_entries_time_entry_user_start", "entries_time_entry", ["user_id", "start_time"])

    op.create_table(
        "entries_day_lock",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.UniqueConstraint("user_id", "day", name="uq_entries_day_lock_user_day"),
    )

    op.create_table(
        "mood_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("note", sa.String(length=500)),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("score >= 1 AND score <= 5", name="ck_mood_log_score"),
    )
    op.create_index("ix_mood_log_user_date", "mood_log", ["user_id", "date"])

    op.create_table(
        "snapshots_weekly",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("productive_hrs", sa.Float(), nullable=False, server_default="0"),
        sa.Column("leisure_hrs", sa.Float(), nullable=False, server_default="0"),
        sa.Column("restoration_hrs", sa.Float(), nullable=False, server_default="0"),
        sa.Column("neutral_hrs", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_logged_hrs", sa.Float(), nullable=False, server_default="0"),
        sa.Column("avg_mood_score", sa.Float(), nullable=True),
        sa.Column("consistency_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("computed_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "week_start", name="uq_snapshots_weekly_user_week"),
    )
    op.create_index("ix_snapshots_weekly_user_week", "snapshots_weekly", ["user_id", "week_start"])

    op.create_table(
        "insight_record",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("period", sa.String(length=8), nullable=False, server_default="week"),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("week_end", sa.Date(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False, server_default=""),
        sa.Column("balance_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recommendations", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("source", sa.String(length=16), nullable=False, server_default="fallback"),
        sa.Column("narrative_style", sa.String(length=16), nullable=False, server_default="observer"),
        sa.Column("generated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "period", "week_start", name="uq_insight_record_user_period_start"),
        sa.CheckConstraint("balance_score >= 0 AND balance_score <= 100", name="ck_insight_record_balance"),
    )
    op.create_index("ix_insight_record_user_week_start", "insight_record", ["user_id", "week_start"])
    op.create_index("ix_insight_record_generated_at", "insight_record", ["generated_at"])


def downgrade():
    op.drop_index("ix_insight_record_generated_at", table_name="insight_record")
    op.drop_index("ix_insight_record_user_week_start", table_name="insight_record")
    op.drop_table("insight_record")
    op.drop_index("ix_snapshots_weekly_user_week", table_name="snapshots_weekly")
    op.drop_table("snapshots_weekly")
    op.drop_index("ix_mood_log_user_date", table_name="mood_log")
    op.drop_table("mood_log")
    op.drop_table("entries_day_lock")
    op.drop_index("ix_entries_time_entry_user_start", table_name="entries_time_entry")
    op.drop_index("ix_entries_time_entry_user_date", table_name="entries_time_entry")
    op.drop_index("ix_entries_time_entry_recurring_task_id", table_name="entries_time_entry")
    op.drop_index("ix_entries_time_entry_user_id", table_name="entries_time_entry")
    op.drop_table("entries_time_entry")
    op.drop_index("ix_recurring_task_template_user_active", table_name="recurring_task_template")
    op.drop_index("ix_recurring_task_template_user_id", table_name="recurring_task_template")
    op.drop_table("recurring_task_template")
    op.drop_index("ix_auth_revoked_token_user_id", table_name="auth_revoked_token")
    op.drop_table("auth_revoked_token")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")

"""Create recipients, push_subscriptions, broadcast_logs tables.

Revision ID: 0001
Revises: -
Create Date: 2026-10-12
"""

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "recipients",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "is_enrolled", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "plan_type", sa.String(16), nullable=False, server_default="free"
        ),
    )

    op.create_table(
        "push_subscriptions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("recipient_id", sa.String(64), nullable=False),
        sa.Column("endpoint", sa.Text, nullable=False),
        sa.Column("p256dh", sa.Text, nullable=False),
        sa.Column("auth", sa.Text, nullable=False),
        sa.Column(
            "is_active", sa.Boolean, nullable=False, server_default=sa.true()
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("deactivated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("recipient_id", name="uq_push_subscription_recipient"),
    )
    op.create_index(
        "ix_push_subscriptions_recipient_id",
        "push_subscriptions",
        ["recipient_id"],
    )

    op.create_table(
        "broadcast_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("url", sa.Text, nullable=True),
        sa.Column("target_audience", sa.String(32), nullable=False),
        sa.Column("total_targeted", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "sent_successfully", sa.Integer, nullable=False, server_default="0"
        ),
        sa.Column("failed", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "no_subscription", sa.Integer, nullable=False, server_default="0"
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_broadcast_logs_created_at", "broadcast_logs", ["created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_broadcast_logs_created_at", table_name="broadcast_logs")
    op.drop_table("broadcast_logs")
    op.drop_index(
        "ix_push_subscriptions_recipient_id", table_name="push_subscriptions"
    )
    op.drop_table("push_subscriptions")
    op.drop_table("recipients")

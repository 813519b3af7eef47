"""Add work order numbers to jobs and the notifications table

Jobs get a readable ``work_order_number`` (WO-YYYYMMDD-NNNN).  The
column is nullable so existing jobs need no data migration; new jobs
are numbered by the application.

``notifications`` holds one row per recipient.  Rows are removed with
their user; the sender reference is cleared instead.

Revision ID: 7c4e1a2b9f03
Revises: 3b1f2c9d7a10
Create Date: 2026-10-19 10:41:07.532904

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "7c4e1a2b9f03"
down_revision = "3b1f2c9d7a10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Add jobs.work_order_number and create notifications."""
    with op.batch_alter_table("jobs") as batch_op:
        batch_op.add_column(
            sa.Column("work_order_number", sa.String(length=20), nullable=True)
        )
        batch_op.create_unique_constraint(
            "UQ_jobs_work_order_number", ["work_order_number"]
        )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("module", sa.String(length=50), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])


def downgrade() -> None:
    """Drop notifications and jobs.work_order_number."""
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")

    with op.batch_alter_table("jobs") as batch_op:
        batch_op.drop_constraint("UQ_jobs_work_order_number", type_="unique")
        batch_op.drop_column("work_order_number")

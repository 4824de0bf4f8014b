"""Initial schema: host tables and campaign_contact.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ─── Host tables ─────────────────────────────────────────────────────────

    op.create_table(
        "organization",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("features", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "campaign",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("organization_id", sa.Integer, sa.ForeignKey("organization.id"), nullable=False),
        sa.Column("title", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "job_request",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("campaign_id", sa.Integer, sa.ForeignKey("campaign.id"), nullable=False),
        sa.Column("job_type", sa.Text, nullable=False),
        sa.Column("payload", sa.Text, nullable=False, server_default="{}"),
        sa.Column("status", sa.Text, nullable=False, server_default="pending"),
        sa.Column("ingest_data_reference", sa.Text, nullable=True),
        sa.Column("ingest_result", sa.Text, nullable=True),
        sa.Column("result_message", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "status IN ('pending', 'running', 'completed', 'failed')",
            name="ck_job_request_status",
        ),
    )

    op.create_table(
        "zip_code",
        sa.Column("zip", sa.Text, primary_key=True),
        sa.Column("timezone_offset", sa.Float, nullable=False),
        sa.Column("has_dst", sa.Boolean, nullable=False, server_default="false"),
    )

    # ─── Loader output ───────────────────────────────────────────────────────

    op.create_table(
        "campaign_contact",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column(
            "campaign_id",
            sa.Integer,
            sa.ForeignKey("campaign.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("first_name", sa.Text, nullable=False, server_default=""),
        sa.Column("last_name", sa.Text, nullable=False, server_default=""),
        sa.Column("cell", sa.Text, nullable=False),
        sa.Column("zip", sa.Text, nullable=True),
        sa.Column("custom_fields", sa.Text, nullable=True),
        sa.Column("timezone_offset", sa.Text, nullable=True),
        sa.Column("message_status", sa.Text, nullable=False, server_default="needsMessage"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "message_status IN ('needsMessage', 'needsResponse', 'convo', 'messaged', 'closed')",
            name="ck_campaign_contact_message_status",
        ),
    )
    op.create_index("ix_campaign_contact_campaign_id", "campaign_contact", ["campaign_id"])


def downgrade() -> None:
    op.drop_index("ix_campaign_contact_campaign_id", table_name="campaign_contact")
    # Drop in reverse dependency order
    op.drop_table("campaign_contact")
    op.drop_table("zip_code")
    op.drop_table("job_request")
    op.drop_table("campaign")
    op.drop_table("organization")

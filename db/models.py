"""SQLAlchemy 2.0 ORM models for the contact loader.

Covers 5 tables in the host platform's public schema:
  - owned by the host: organization, campaign, job_request, zip_code
  - written by loaders: campaign_contact
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


_MESSAGE_STATUSES = (
    "needsMessage",
    "needsResponse",
    "convo",
    "messaged",
    "closed",
)

_MESSAGE_STATUS_CHECK = (
    "message_status IN ("
    + ", ".join(f"'{s}'" for s in _MESSAGE_STATUSES)
    + ")"
)

_JOB_STATUSES = ("pending", "running", "completed", "failed")


# ===========================================================================
# Host tables
# ===========================================================================


class Organization(Base):
    """organization — tenant; features holds per-organization config overrides."""

    __tablename__ = "organization"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    features: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    campaigns: Mapped[list["Campaign"]] = relationship(
        "Campaign", back_populates="organization"
    )


class Campaign(Base):
    """campaign — a texting campaign whose contacts are loaded by a loader."""

    __tablename__ = "campaign"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organization.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="campaigns"
    )
    contacts: Mapped[list["CampaignContact"]] = relationship(
        "CampaignContact", back_populates="campaign", passive_deletes=True
    )


class JobRequest(Base):
    """job_request — a queued contact load; payload is the loader's JSON choice."""

    __tablename__ = "job_request"
    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in _JOB_STATUSES) + ")",
            name="ck_job_request_status",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaign.id"), nullable=False
    )
    job_type: Mapped[str] = mapped_column(Text, nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False, server_default="{}")
    status: Mapped[str] = mapped_column(Text, nullable=False, server_default="pending")
    ingest_data_reference: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ingest_result: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    result_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class ZipCode(Base):
    """zip_code — US zip to UTC offset (hours) and DST flag."""

    __tablename__ = "zip_code"

    zip: Mapped[str] = mapped_column(Text, primary_key=True)
    timezone_offset: Mapped[float] = mapped_column(Float, nullable=False)
    has_dst: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")


# ===========================================================================
# Loader output
# ===========================================================================


class CampaignContact(Base):
    """campaign_contact — one recipient of a campaign."""

    __tablename__ = "campaign_contact"
    __table_args__ = (
        CheckConstraint(_MESSAGE_STATUS_CHECK, name="ck_campaign_contact_message_status"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaign.id", ondelete="CASCADE"), nullable=False, index=True
    )
    first_name: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    last_name: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    cell: Mapped[str] = mapped_column(Text, nullable=False)
    zip: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    custom_fields: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timezone_offset: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    message_status: Mapped[str] = mapped_column(
        Text, nullable=False, server_default="needsMessage"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="contacts")

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""XP ledger and badge models."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from silveredge.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from silveredge.utils.datetime import utc_now


class XpTransaction(Base):
    """One XP grant. Rows are only ever inserted.

    The autoincrement id orders grants; a profile's history is the
    newest rows by id.
    """

    __tablename__ = "xp_transactions"
    __table_args__ = (
        Index("ix_xp_transactions_student_id_id", "student_id", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(255), nullable=False)
    source_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)


class Badge(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Global badge catalog entry."""

    __tablename__ = "badges"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    icon_name: Mapped[str] = mapped_column(String(50), nullable=False, default="award")
    gradient_from: Mapped[str | None] = mapped_column(String(20), nullable=True)
    gradient_to: Mapped[str | None] = mapped_column(String(20), nullable=True)
    trigger_type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    trigger_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class StudentBadge(UUIDPrimaryKeyMixin, Base):
    """A badge held by a student; at most one row per pair."""

    __tablename__ = "student_badges"
    __table_args__ = (
        UniqueConstraint("student_id", "badge_id", name="uq_student_badges_student_badge"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    badge_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("badges.id", ondelete="CASCADE"),
        nullable=False,
    )
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)


class SandboxProject(UUIDPrimaryKeyMixin, Base):
    """A sandbox project counted towards a student's activity, once per project."""

    __tablename__ = "sandbox_projects"
    __table_args__ = (
        UniqueConstraint("student_id", "project_id", name="uq_sandbox_projects_student_project"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User and student profile models.

Students, teachers and parents share the users table and are told apart by
their role tag. Only students carry a profile document with derived
gamification state.
"""

from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from silveredge.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Account of any role."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def is_active(self) -> bool:
        """Check whether the account is active."""
        return self.status == "active"


class StudentProfile(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Gamification and enrollment state of one student.

    Mutated only by the XP ledger, the streak tracker, activity counters
    and enrollment. Counters are changed with in-place UPDATE expressions.
    """

    __tablename__ = "student_profiles"
    __table_args__ = (
        CheckConstraint("total_xp >= 0", name="ck_student_profiles_total_xp"),
        CheckConstraint("current_level >= 1", name="ck_student_profiles_level"),
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    class_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("classes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    current_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    currency_balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_streak_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_activity_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_active_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    login_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sandbox_project_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class StudentParent(Base):
    """Back-reference from a student to a linked parent account."""

    __tablename__ = "student_parents"

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    parent_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

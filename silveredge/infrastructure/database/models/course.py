# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course content hierarchy: course → section → lesson → exercises/quiz."""

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from silveredge.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class Course(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A course assigned to classes."""

    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    language: Mapped[str] = mapped_column(String(30), nullable=False, default="python")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")


class Section(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Ordered group of lessons inside a course."""

    __tablename__ = "sections"

    course_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Lesson(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A lesson; completing it grants xp_reward once per student."""

    __tablename__ = "lessons"

    section_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    xp_reward: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Exercise(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Coding exercise attached to a lesson."""

    __tablename__ = "exercises"

    lesson_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("lessons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    xp_reward: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Quiz(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Multiple-choice quiz attached to a lesson.

    questions holds ``[{"id", "prompt", "options", "correctIndex"}]``.
    """

    __tablename__ = "quizzes"

    lesson_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("lessons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    xp_reward: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    questions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

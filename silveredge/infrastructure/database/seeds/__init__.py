# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Seed data for the progress store."""

from silveredge.infrastructure.database.seeds.badges import DEFAULT_BADGES, seed_badges

__all__ = ["DEFAULT_BADGES", "seed_badges"]

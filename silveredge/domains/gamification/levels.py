# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Level curve.

Reaching level L requires ``step * L * (L - 1) / 2`` total XP, so each level
costs ``step`` more than the previous one: with the default step of 100,
level 2 starts at 100 XP, level 3 at 300, level 4 at 600 and level 5 at 1000.

All functions use integer arithmetic and are the only place a level is
derived from XP.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import isqrt

DEFAULT_LEVEL_STEP = 100


@dataclass(frozen=True)
class LevelProgress:
    """Position of a total XP value on the level curve."""

    level: int
    xp_into_level: int
    xp_for_next_level: int
    progress_percent: int


def xp_for_level(level: int, step: int = DEFAULT_LEVEL_STEP) -> int:
    """Minimum total XP needed to be at ``level``.

    Args:
        level: Level number, 1 or higher.
        step: XP increment between consecutive level costs.

    Returns:
        Total XP threshold of the level (0 for level 1).

    Raises:
        ValueError: If level is below 1.
    """
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")
    return step * level * (level - 1) // 2


def level_for_xp(total_xp: int, step: int = DEFAULT_LEVEL_STEP) -> int:
    """Highest level whose threshold ``total_xp`` has reached.

    Negative totals are treated as 0.
    """
    if total_xp <= 0:
        return 1

    # Solve L*(L-1) <= 2*xp/step, then correct isqrt rounding.
    bound = 2 * total_xp // step
    level = (1 + isqrt(1 + 4 * bound)) // 2
    while xp_for_level(level + 1, step) <= total_xp:
        level += 1
    while level > 1 and xp_for_level(level, step) > total_xp:
        level -= 1
    return level


def level_progress(total_xp: int, step: int = DEFAULT_LEVEL_STEP) -> LevelProgress:
    """Describe how far ``total_xp`` is into its current level.

    Args:
        total_xp: Student's total XP.
        step: XP increment between consecutive level costs.

    Returns:
        LevelProgress with the current level, XP earned inside it, XP the
        level spans and a 0-100 percentage.
    """
    total_xp = max(total_xp, 0)
    level = level_for_xp(total_xp, step)
    floor = xp_for_level(level, step)
    span = xp_for_level(level + 1, step) - floor
    into = total_xp - floor
    return LevelProgress(
        level=level,
        xp_into_level=into,
        xp_for_next_level=span,
        progress_percent=(into * 100) // span,
    )

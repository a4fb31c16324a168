# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the Silver Edge progress service.

Example:
    >>> from silveredge.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from silveredge.core.config.settings import (
    APISettings,
    CORSSettings,
    DatabaseSettings,
    GamificationSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "DatabaseSettings",
    "GamificationSettings",
    "CORSSettings",
    "APISettings",
]

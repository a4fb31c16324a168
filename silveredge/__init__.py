"""Silver Edge progress service.

Turns student actions (lesson views, exercise and quiz submissions, logins)
into durable progress state, XP ledgers, levels, streaks, badges and the
roll-up statistics behind class, course and student dashboards.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"

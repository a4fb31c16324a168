# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error categories shared by all domain services.

Each service keeps its own exception hierarchy; these mixins tag the
category so the HTTP layer can map whole families of errors at once.
"""


class ResourceNotFoundError(Exception):
    """A referenced student, lesson, exercise, quiz, course or class is missing."""

    pass


class ValidationFailedError(Exception):
    """A request passed schema validation but is semantically invalid."""

    pass

"""
Base domain exceptions.
"""

from typing import Optional

from sceau.domain.value_objects.auth_state import FailureReason


class SceauException(Exception):
    """Base exception for all Sceau domain errors."""

    reason: Optional[FailureReason] = None

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

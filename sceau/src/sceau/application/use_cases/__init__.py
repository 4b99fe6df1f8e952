"""Application use cases."""

from sceau.application.use_cases.handle_unauthorized import HandleUnauthorized
from sceau.application.use_cases.logout_user import LogoutUser
from sceau.application.use_cases.restore_session import (
    RestoredState,
    RestoreSession,
)

__all__ = [
    "HandleUnauthorized",
    "LogoutUser",
    "RestoredState",
    "RestoreSession",
]

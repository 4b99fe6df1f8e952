"""
Handle Unauthorized use case.
"""

import inspect
from typing import Awaitable, Callable, Optional, Union

from sceau.application.services.session_store import SessionStore

RedirectCallback = Callable[[], Union[None, Awaitable[None]]]


class HandleUnauthorized:
    """
    React to a 401 from any backend call.

    Clears the stored session then sends the user back to login.
    """

    def __init__(
        self,
        session_store: SessionStore,
        redirect_to_login: Optional[RedirectCallback] = None,
    ):
        self.session_store = session_store
        self.redirect_to_login = redirect_to_login

    async def execute(self) -> None:
        await self.session_store.clear(cause="unauthorized")

        if self.redirect_to_login is not None:
            result = self.redirect_to_login()
            if inspect.isawaitable(result):
                await result

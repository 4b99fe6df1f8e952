"""In-memory credential storage."""

from typing import Dict, Optional

from sceau.domain.services.i_credential_storage import ICredentialStorage


class MemoryCredentialStorage(ICredentialStorage):
    """Process-local storage; nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

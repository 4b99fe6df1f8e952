"""
JSON file credential storage.

Durable client-side slot (the CLI equivalent of browser localStorage).
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Dict, Optional

from sceau.domain.services.i_credential_storage import ICredentialStorage


class FileCredentialStorage(ICredentialStorage):
    """
    Key-value slots persisted in a single JSON file.

    Writes go through a temp file and os.replace so a crash never leaves
    a half-written file. The file is created with 0600 permissions.
    """

    def __init__(self, path: str = "~/.sceau/session.json"):
        """
        Initialize file storage.

        Args:
            path: JSON file path (~ expanded)
        """
        self.path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            value = self._read().get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            data = self._read()
            if key not in data:
                return False
            del data[key]
            self._write(data)
            return True

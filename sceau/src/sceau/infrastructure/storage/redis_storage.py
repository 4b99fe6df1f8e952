"""Redis credential storage implementation."""

from typing import Optional

import redis.asyncio as aioredis

from sceau.domain.services.i_credential_storage import ICredentialStorage


class RedisCredentialStorage(ICredentialStorage):
    """
    Credential storage using async redis library.

    Useful when several processes share one session slot.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        prefix: str = "sceau:",
    ):
        """
        Initialize Redis client configuration.

        Args:
            host: Redis server host
            port: Redis server port
            db: Redis database number (0-15)
            password: Redis password (None if no auth)
            prefix: Key namespace prefix
        """
        self.host = host
        self.port = port
        self.db = db
        self.password = password if password else None
        self.prefix = prefix
        self._client: Optional[aioredis.Redis] = None

    async def connect(self) -> None:
        """Establish connection to Redis server."""
        if self._client is not None:
            return

        self._client = aioredis.from_url(
            f"redis://{self.host}:{self.port}/{self.db}",
            password=self.password,
            encoding="utf-8",
            decode_responses=True,
        )

    async def disconnect(self) -> None:
        """Close connection to Redis server."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        if self._client is None:
            await self.connect()
        return await self._client.get(self._key(key))

    async def set(self, key: str, value: str) -> None:
        if self._client is None:
            await self.connect()
        await self._client.set(self._key(key), value)

    async def delete(self, key: str) -> bool:
        if self._client is None:
            await self.connect()
        result = await self._client.delete(self._key(key))
        return result > 0

    async def ping(self) -> bool:
        """
        Check if Redis server is reachable.

        Returns:
            True if server responds
        """
        if self._client is None:
            await self.connect()

        try:
            await self._client.ping()
            return True
        except Exception:
            return False

"""
Credential storage backends.
"""

from sceau.infrastructure.storage.file_storage import FileCredentialStorage
from sceau.infrastructure.storage.memory_storage import MemoryCredentialStorage
from sceau.infrastructure.storage.redis_storage import RedisCredentialStorage

__all__ = [
    "FileCredentialStorage",
    "MemoryCredentialStorage",
    "RedisCredentialStorage",
]

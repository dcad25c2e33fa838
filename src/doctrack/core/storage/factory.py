from urllib.parse import urlparse

from doctrack.config import Config
from doctrack.core.storage.base import Storage
from doctrack.core.storage.memory import MemoryStorage
from doctrack.core.storage.mongo import MongoStorage


def create_storage(config: Config) -> Storage:
    """Select the storage backend from the database URL scheme."""
    scheme = urlparse(config.database_url).scheme
    if scheme == "memory":
        return MemoryStorage()
    if scheme in ("mongodb", "mongodb+srv"):
        return MongoStorage(config.database_url, config.storage_timeout_ms)
    raise ValueError(f"Unsupported database_url scheme: '{scheme}'")

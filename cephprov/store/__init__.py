"""Topology and storage entity store."""

from cephprov.core.config import Settings
from cephprov.store.base import TopologyRepository
from cephprov.store.memory import InMemoryRepository
from cephprov.store.sqlite import SqliteRepository


def create_repository(settings: Settings) -> TopologyRepository:
    """Build the repository selected by ``database.driver``."""
    if settings.database.driver == "memory":
        return InMemoryRepository()
    return SqliteRepository(settings.database.path)


__all__ = [
    "InMemoryRepository",
    "SqliteRepository",
    "TopologyRepository",
    "create_repository",
]

"""API routers."""

from cephprov.routers import storage, tasks

__all__ = ["storage", "tasks"]

"""Pydantic models for request/response validation."""

from cephprov.models.storage import (
    APIResponse,
    AddStorageRequest,
    AsyncTaskResponse,
    ListStorageResponse,
    ProvisioningOptions,
    Storage,
)
from cephprov.models.task import ListTasksResponse, TaskInfo, TaskStatusEntry, TaskSummary
from cephprov.models.topology import Cluster, Node, StorageLogicalUnit

__all__ = [
    "APIResponse",
    "AddStorageRequest",
    "AsyncTaskResponse",
    "Cluster",
    "ListStorageResponse",
    "ListTasksResponse",
    "Node",
    "ProvisioningOptions",
    "Storage",
    "StorageLogicalUnit",
    "TaskInfo",
    "TaskStatusEntry",
    "TaskSummary",
]

"""Pydantic models for storage pool provisioning."""

import uuid
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field

from cephprov.core.exceptions import ValidationError

STATUS_UP = "up"

QUOTA_MAX_OBJECTS = "quota_max_objects"
QUOTA_MAX_BYTES = "quota_max_bytes"
OPTION_PGNUM = "pgnum"


class AddStorageRequest(BaseModel):
    """Request model for creating a storage pool."""

    name: str = Field(
        ...,
        description="Pool name",
        min_length=1,
        max_length=128,
        pattern="^[a-zA-Z0-9_.-]+$",
    )
    type: str = Field(default="replicated", description="Storage type")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    size: str = Field(..., description="Requested capacity, e.g. 100GB")
    replicas: int = Field(..., ge=1, description="Replica count")
    profile: str = Field(default="general", description="Performance profile")
    snapshots_enabled: bool = Field(default=False, description="Enable snapshots")
    quota_enabled: bool = Field(default=False, description="Enable pool quotas")
    quota_params: Dict[str, str] = Field(
        default_factory=dict,
        description="Quota settings (quota_max_objects, quota_max_bytes)",
    )
    options: Dict[str, str] = Field(
        default_factory=dict,
        description="Tuning options (pgnum)",
    )


def _parse_int(params: Dict[str, str], key: str, minimum: int) -> Union[int, None]:
    raw = params.get(key, "")
    if raw == "":
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Error parsing config value for {key}", field=key, details={"value": raw})
    if value < minimum:
        raise ValidationError(
            f"Config value for {key} must be at least {minimum}",
            field=key,
            details={"value": raw},
        )
    return value


class ProvisioningOptions(BaseModel):
    """Validated view of the request's free-form option maps."""

    pgnum: Union[int, None] = Field(default=None, gt=0, description="Explicit PG count")
    quota_max_objects: Union[int, None] = Field(default=None, ge=0, description="Max objects in pool")
    quota_max_bytes: Union[int, None] = Field(default=None, ge=0, description="Max bytes in pool")

    @classmethod
    def from_request(cls, request: AddStorageRequest) -> "ProvisioningOptions":
        """Parse ``options`` and, when quota is enabled, ``quota_params``.

        Raises:
            ValidationError: If a recognised key holds a bad number
        """
        pgnum = _parse_int(request.options, OPTION_PGNUM, 1)
        quota_max_objects = None
        quota_max_bytes = None
        if request.quota_enabled:
            quota_max_objects = _parse_int(request.quota_params, QUOTA_MAX_OBJECTS, 0)
            quota_max_bytes = _parse_int(request.quota_params, QUOTA_MAX_BYTES, 0)

        return cls(
            pgnum=pgnum,
            quota_max_objects=quota_max_objects,
            quota_max_bytes=quota_max_bytes,
        )


class Storage(BaseModel):
    """Storage entity persisted once a pool has been created."""

    storage_id: uuid.UUID = Field(..., description="Storage id")
    name: str = Field(..., description="Pool name")
    type: str = Field(..., description="Storage type")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    cluster_id: uuid.UUID = Field(..., description="Owning cluster id")
    size: str = Field(..., description="Requested capacity")
    status: str = Field(default=STATUS_UP, description="Storage status")
    replicas: int = Field(..., description="Replica count")
    profile: str = Field(..., description="Performance profile")
    snapshots_enabled: bool = Field(default=False, description="Snapshots enabled")
    quota_enabled: bool = Field(default=False, description="Quota enabled")
    quota_params: Dict[str, str] = Field(default_factory=dict, description="Quota settings")
    options: Dict[str, str] = Field(default_factory=dict, description="Tuning options")

    @classmethod
    def from_request(cls, cluster_id: uuid.UUID, request: AddStorageRequest) -> "Storage":
        """Build a fresh ``up`` record from a creation request."""
        return cls(
            storage_id=uuid.uuid4(),
            name=request.name,
            type=request.type,
            tags=request.tags,
            cluster_id=cluster_id,
            size=request.size,
            status=STATUS_UP,
            replicas=request.replicas,
            profile=request.profile,
            snapshots_enabled=request.snapshots_enabled,
            quota_enabled=request.quota_enabled,
            quota_params=request.quota_params,
            options=request.options,
        )


class ListStorageResponse(BaseModel):
    """Response model for listing storage of a cluster."""

    storage: List[Storage] = Field(..., description="Storage records")
    count: int = Field(..., description="Total number of records")


class AsyncTaskResponse(BaseModel):
    """Acknowledgement returned when a task has been created."""

    task_id: str = Field(..., description="Task id to poll for progress")
    message: str = Field(default="Task Created", description="Acknowledgement text")


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status: Literal["success", "error"] = Field(..., description="Response status")
    data: Union[Any, None] = Field(None, description="Response data")
    code: Union[str, None] = Field(None, description="Error code")
    message: Union[str, None] = Field(None, description="Error message")
    details: Union[Dict[str, Any], None] = Field(None, description="Additional details")

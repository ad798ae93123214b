"""Wire models for the cluster control API."""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field

REQUEST_STATE_COMPLETE = "complete"


class CephPoolRequest(BaseModel):
    """Body of a pool creation command."""

    name: str = Field(..., description="Pool name")
    size: int = Field(..., ge=1, description="Replica count")
    min_size: int = Field(default=1, description="Minimum replicas to serve IO")
    quota_max_objects: int = Field(default=0, ge=0, description="Max objects (0 for none)")
    quota_max_bytes: int = Field(default=0, ge=0, description="Max bytes (0 for none)")
    hashpspool: bool = Field(default=False, description="Hash pseudo placement flag")
    pg_num: int = Field(..., gt=0, description="Placement group count")
    pgp_num: int = Field(..., gt=0, description="Placement groups for placement")
    crash_replay_interval: int = Field(default=0, description="Crash replay interval")


class CephAsyncRequest(BaseModel):
    """Descriptor returned when the cluster accepts an asynchronous command."""

    model_config = ConfigDict(extra="ignore")

    request_id: str = Field(..., min_length=1, description="Cluster request id")


class CephRequestStatus(BaseModel):
    """State of an asynchronous cluster request."""

    model_config = ConfigDict(extra="ignore")

    id: Union[str, None] = Field(None, description="Cluster request id")
    state: str = Field(..., description="Request state")
    error: bool = Field(default=False, description="Whether the request failed")
    error_message: Union[str, None] = Field(None, description="Failure description")

    @property
    def is_complete(self) -> bool:
        return self.state == REQUEST_STATE_COMPLETE

"""Pydantic models for cluster topology records."""

import uuid
from typing import Dict, Union

from pydantic import BaseModel, Field

CEPH_OSD = "osd"
MON_OPTION = "mon"
MON_OPTION_ENABLED = "Y"


class Cluster(BaseModel):
    """A managed storage cluster."""

    cluster_id: uuid.UUID = Field(..., description="Cluster id (also the cluster fsid)")
    name: str = Field(..., description="Cluster name")
    status: str = Field(default="unknown", description="Cluster status")


class Node(BaseModel):
    """A host participating in a cluster."""

    node_id: uuid.UUID = Field(..., description="Node id")
    hostname: str = Field(..., description="Addressable host name")
    cluster_id: uuid.UUID = Field(..., description="Owning cluster id")
    options: Dict[str, str] = Field(default_factory=dict, description="Role option flags")

    @property
    def is_monitor(self) -> bool:
        return self.options.get(MON_OPTION) == MON_OPTION_ENABLED


class StorageLogicalUnit(BaseModel):
    """A device contributing raw capacity to a cluster."""

    slu_id: uuid.UUID = Field(..., description="Logical unit id")
    cluster_id: uuid.UUID = Field(..., description="Owning cluster id")
    node_id: Union[uuid.UUID, None] = Field(default=None, description="Node hosting the device")
    type: str = Field(default=CEPH_OSD, description="Logical unit type")
    storage_device_size: int = Field(default=0, ge=0, description="Raw device size in bytes")

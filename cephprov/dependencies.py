"""FastAPI dependencies wiring the service objects together."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from cephprov.ceph.client import CephApiClient, PollPolicy
from cephprov.core.config import get_settings
from cephprov.services.provisioner import StorageProvisioner
from cephprov.services.tasks import TaskManager
from cephprov.store import TopologyRepository, create_repository


@lru_cache
def get_repository() -> TopologyRepository:
    """Store shared by all requests."""
    return create_repository(get_settings())


@lru_cache
def get_task_manager() -> TaskManager:
    """Task manager shared by all requests."""
    return TaskManager(retention=get_settings().provisioning.task_retention)


@lru_cache
def get_ceph_client() -> CephApiClient:
    """Control API client shared by all requests."""
    return CephApiClient(get_settings().ceph_api)


def get_poll_policy() -> PollPolicy:
    provisioning = get_settings().provisioning
    return PollPolicy(
        interval=provisioning.poll_interval,
        timeout=provisioning.poll_timeout,
        max_attempts=provisioning.poll_max_attempts,
    )


def get_provisioner(
    repository: Annotated[TopologyRepository, Depends(get_repository)],
    ceph_client: Annotated[CephApiClient, Depends(get_ceph_client)],
    task_manager: Annotated[TaskManager, Depends(get_task_manager)],
    poll_policy: Annotated[PollPolicy, Depends(get_poll_policy)],
) -> StorageProvisioner:
    return StorageProvisioner(repository, ceph_client, task_manager, poll_policy)

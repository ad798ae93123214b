"""Storage pool endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from cephprov.core.exceptions import ClusterNotFoundError
from cephprov.dependencies import get_provisioner, get_repository
from cephprov.models.storage import (
    APIResponse,
    AddStorageRequest,
    AsyncTaskResponse,
    ListStorageResponse,
)
from cephprov.services.provisioner import StorageProvisioner, parse_cluster_id
from cephprov.store import TopologyRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["Storage"])


@router.post(
    "/{cluster_id}/storage",
    response_model=APIResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Create Storage Pool",
    description="Start creating a replicated pool; progress is reported on the returned task",
)
async def create_storage(
    cluster_id: str,
    request: AddStorageRequest,
    provisioner: Annotated[StorageProvisioner, Depends(get_provisioner)],
) -> APIResponse:
    """Create a storage pool on a cluster.

    The request is validated up front. Pool creation, which waits on the
    cluster, runs in the background.

    Args:
        cluster_id: Target cluster id
        request: Storage creation parameters
        provisioner: Provisioning service

    Returns:
        APIResponse carrying the task id

    Raises:
        ValidationError: If the cluster id, size or option values are malformed
        TaskCreationError: If the background task cannot be started
    """
    task_id = provisioner.submit(cluster_id, request)
    logger.info(f"Accepted creation of storage '{request.name}' on cluster {cluster_id} as task {task_id}")

    return APIResponse(status="success", data=AsyncTaskResponse(task_id=task_id).model_dump())


@router.get(
    "/{cluster_id}/storage",
    response_model=APIResponse,
    summary="List Storage",
)
def list_storage(
    cluster_id: str,
    repository: Annotated[TopologyRepository, Depends(get_repository)],
) -> APIResponse:
    """List storage records of a cluster."""
    parsed_id = parse_cluster_id(cluster_id)
    if repository.get_cluster(parsed_id) is None:
        raise ClusterNotFoundError(cluster_id)

    storage = repository.list_storage(parsed_id)
    response_data = ListStorageResponse(storage=storage, count=len(storage))
    return APIResponse(status="success", data=response_data.model_dump(mode="json"))

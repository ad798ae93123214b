"""Storage pool provisioning."""

import logging
import random
import uuid
from typing import Tuple, Union

from cephprov.ceph.client import CephApiClient, PollPolicy
from cephprov.ceph.models import CephPoolRequest
from cephprov.core.exceptions import (
    CephProvException,
    ClusterNotFoundError,
    PersistenceError,
    StoreError,
    ValidationError,
)
from cephprov.core.logging import AuditLogger, get_audit_logger
from cephprov.models.storage import AddStorageRequest, ProvisioningOptions, Storage
from cephprov.services.monitor import select_monitor
from cephprov.services.pgcalc import resolve_pg_count
from cephprov.services.tasks import Task, TaskManager
from cephprov.store.base import TopologyRepository
from cephprov.utils.size import parse_size

logger = logging.getLogger(__name__)

CREATE_STORAGE_TASK = "CEPH-CreateStorage"


def parse_cluster_id(cluster_id: str) -> uuid.UUID:
    """Parse a cluster id from a request path.

    Raises:
        ValidationError: If the value is not a UUID
    """
    try:
        return uuid.UUID(str(cluster_id))
    except ValueError:
        raise ValidationError(f"Error parsing the cluster id: {cluster_id}", field="cluster_id")


class StorageProvisioner:
    """Creates a replicated pool on a cluster and records it as a Storage entity.

    ``submit`` validates the request synchronously and hands the rest of the
    work to the task manager. The task looks up the cluster, selects a
    monitor, resolves the PG count, creates the pool through the control API
    (waiting for the cluster to finish) and finally inserts the Storage
    record. Any failure stops the sequence; nothing is rolled back.
    """

    def __init__(
        self,
        repository: TopologyRepository,
        ceph_client: CephApiClient,
        task_manager: TaskManager,
        poll_policy: Union[PollPolicy, None] = None,
        rng: Union[random.Random, None] = None,
        audit: Union[AuditLogger, None] = None,
    ) -> None:
        self.repository = repository
        self.ceph_client = ceph_client
        self.task_manager = task_manager
        self.poll_policy = poll_policy or PollPolicy()
        self.rng = rng
        self.audit = audit or get_audit_logger()

    def validate(self, cluster_id: str, request: AddStorageRequest) -> Tuple[uuid.UUID, ProvisioningOptions]:
        """Check everything that can be checked before touching the cluster.

        Raises:
            ValidationError: On a bad cluster id, size, replica count or option value
        """
        parsed_id = parse_cluster_id(cluster_id)
        if request.replicas < 1:
            raise ValidationError("Replica count must be at least 1", field="replicas")
        parse_size(request.size)

        return parsed_id, ProvisioningOptions.from_request(request)

    def submit(self, cluster_id: str, request: AddStorageRequest) -> str:
        """Validate ``request`` and start the provisioning task.

        Returns:
            Id of the task carrying out the work

        Raises:
            ValidationError: If the request is rejected before dispatch
            TaskCreationError: If the task could not be started
        """
        parsed_id, options = self.validate(cluster_id, request)

        def create_storage(task: Task) -> None:
            self.provision(task, parsed_id, request, options)

        return self.task_manager.run(CREATE_STORAGE_TASK, create_storage)

    def provision(
        self,
        task: Task,
        cluster_id: uuid.UUID,
        request: AddStorageRequest,
        options: ProvisioningOptions,
    ) -> None:
        """Task body: create the pool, persist the entity, report the outcome."""
        task.update_status(f"Started ceph provider pool creation: {task.id}")
        try:
            self.create_pool(task, cluster_id, request, options)
            task.update_status("Persisting the storage entity")
            storage = self.persist(cluster_id, request)
        except CephProvException as e:
            logger.error(f"Creation of storage '{request.name}' failed: {e.message}")
            task.update_status(f"Failed. error: {e.message}")
            self.audit.record(
                "CREATE",
                f"storage:{request.name}",
                "FAILED",
                task_id=task.id,
                cluster_id=str(cluster_id),
                code=e.code,
                error=e.message,
            )
            task.mark_done(failed=True)
            return

        self.audit.record(
            "CREATE",
            f"storage:{request.name}",
            "SUCCESS",
            task_id=task.id,
            cluster_id=str(cluster_id),
            storage_id=str(storage.storage_id),
        )
        task.update_status("Success")
        task.mark_done()

    def create_pool(
        self,
        task: Task,
        cluster_id: uuid.UUID,
        request: AddStorageRequest,
        options: ProvisioningOptions,
    ) -> None:
        """Create the pool on the cluster and wait for it to complete."""
        task.update_status("Getting cluster details")
        cluster = self.repository.get_cluster(cluster_id)
        if cluster is None:
            raise ClusterNotFoundError(str(cluster_id))

        task.update_status("Getting mons for cluster")
        nodes = self.repository.list_nodes(cluster_id)
        monitor = select_monitor(nodes, cluster_id, self.rng)
        task.update_status(f"Selected mon {monitor.hostname}")

        pg_num = resolve_pg_count(self.repository, cluster_id, request.size, request.replicas, options)

        pool = CephPoolRequest(
            name=request.name,
            size=request.replicas,
            min_size=1,
            quota_max_objects=options.quota_max_objects or 0,
            quota_max_bytes=options.quota_max_bytes or 0,
            hashpspool=False,
            pg_num=pg_num,
            pgp_num=pg_num,
            crash_replay_interval=0,
        )

        task.update_status(f"Creating pool with {pg_num} PGs")
        self.ceph_client.create_pool(monitor.hostname, str(cluster.cluster_id), pool, self.poll_policy)

    def persist(self, cluster_id: uuid.UUID, request: AddStorageRequest) -> Storage:
        """Insert the Storage record for a pool the cluster has created.

        Raises:
            PersistenceError: If the store rejects the insert
        """
        storage = Storage.from_request(cluster_id, request)
        try:
            self.repository.insert_storage(storage)
        except StoreError as e:
            # The pool exists on the cluster but has no local record
            logger.error(
                f"Pool '{request.name}' was created on cluster {cluster_id} "
                f"but its storage record could not be saved: {e.message}"
            )
            raise PersistenceError(request.name, e.message) from e
        return storage

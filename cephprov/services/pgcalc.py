"""Placement group count derivation.

Rules, tiered on the number of OSDs ``n`` in the cluster:

* ``n <= 5``: 128 PGs
* ``5 < n <= 10``: 512 PGs
* ``10 < n <= 50``: 4096 PGs
* ``n > 50``: ``(target PGs per OSD * n * data fraction) / replicas``, rounded
  up to the next power of two, where the data fraction is the requested size
  over the maximum allocatable size
  ``(average OSD size * n / replicas) * max utilization``.

An explicit ``pgnum`` option on the request bypasses all of the above.
"""

import logging
import uuid
from typing import List

from cephprov.core.exceptions import StoreError, ValidationError
from cephprov.models.storage import ProvisioningOptions
from cephprov.models.topology import CEPH_OSD, StorageLogicalUnit
from cephprov.store.base import TopologyRepository
from cephprov.utils.size import parse_size

logger = logging.getLogger(__name__)

DEFAULT_PG_NUM = 128
TARGET_PGS_PER_OSD = 200
MAX_UTILIZATION_FACTOR = 0.8

# (max OSD count, PG count), checked in order
PG_TIERS = (
    (5, DEFAULT_PG_NUM),
    (10, 512),
    (50, 4096),
)


def next_power_of_two(value: float) -> int:
    """Smallest power of two that is greater than or equal to ``value`` (at least 1)."""
    result = 1
    while result < value:
        result <<= 1
    return result


def average_osd_size(units: List[StorageLogicalUnit]) -> float:
    if not units:
        return 0.0
    return sum(u.storage_device_size for u in units) / len(units)


def pg_count_for_osds(units: List[StorageLogicalUnit], size_bytes: int, replicas: int) -> int:
    """Apply the tiered rules to an OSD inventory.

    Raises:
        ValidationError: If ``replicas`` is below 1
    """
    if replicas < 1:
        raise ValidationError("Replica count must be at least 1", field="replicas")

    osd_count = len(units)
    for max_osds, pg_num in PG_TIERS:
        if osd_count <= max_osds:
            return pg_num

    avg_size = average_osd_size(units)
    max_alloc_size = avg_size * osd_count / replicas * MAX_UTILIZATION_FACTOR
    if max_alloc_size <= 0:
        logger.warning(
            f"OSDs report no capacity ({osd_count} OSDs, average size {avg_size}), "
            f"using default PG count {DEFAULT_PG_NUM}"
        )
        return DEFAULT_PG_NUM

    data_fraction = size_bytes / max_alloc_size
    raw = TARGET_PGS_PER_OSD * osd_count * data_fraction / replicas
    return next_power_of_two(raw)


def derive_pg_count(
    repository: TopologyRepository,
    cluster_id: uuid.UUID,
    size: str,
    replicas: int,
) -> int:
    """Derive the PG count for a new pool from the cluster's OSD inventory.

    A store failure while listing OSDs yields ``DEFAULT_PG_NUM`` rather than
    an error.

    Args:
        repository: Topology store
        cluster_id: Cluster the pool is created in
        size: Requested capacity string (e.g. "100GB")
        replicas: Replica count

    Returns:
        Positive PG count

    Raises:
        ValidationError: If ``size`` cannot be parsed or ``replicas`` is below 1
    """
    size_bytes = parse_size(size)
    try:
        units = repository.list_logical_units(cluster_id, CEPH_OSD)
    except StoreError as e:
        logger.warning(f"Could not list OSDs for cluster {cluster_id}, using default PG count: {e}")
        return DEFAULT_PG_NUM

    pg_num = pg_count_for_osds(units, size_bytes, replicas)
    logger.debug(f"Derived PG count {pg_num} for {len(units)} OSDs in cluster {cluster_id}")
    return pg_num


def resolve_pg_count(
    repository: TopologyRepository,
    cluster_id: uuid.UUID,
    size: str,
    replicas: int,
    options: ProvisioningOptions,
) -> int:
    """Return the explicit ``pgnum`` option if given, else the derived count."""
    if options.pgnum is not None:
        return options.pgnum
    return derive_pg_count(repository, cluster_id, size, replicas)

"""Load cluster topology descriptions into a repository.

Expected layout (YAML or the equivalent dict)::

    clusters:
      - name: ceph-east
        cluster_id: 6f1c...      # optional, derived from the name otherwise
        status: ok
        nodes:
          - hostname: mon1.example.com
            options: {mon: "Y"}
            osds:
              - size: 1TB        # or storage_device_size in bytes

Ids that are not given are derived deterministically from names, so
loading the same file twice updates records instead of duplicating them.
"""

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from cephprov.core.exceptions import ValidationError
from cephprov.models.topology import CEPH_OSD, Cluster, Node, StorageLogicalUnit
from cephprov.store.base import TopologyRepository
from cephprov.utils.size import parse_size

logger = logging.getLogger(__name__)

TOPOLOGY_NAMESPACE = uuid.UUID("5b0c6f43-3c1e-4a8e-9d54-1f2f3c0e7a11")


def _derived_id(given: Union[str, None], *parts: str) -> uuid.UUID:
    if given:
        return uuid.UUID(str(given))
    return uuid.uuid5(TOPOLOGY_NAMESPACE, "/".join(parts))


def _device_size(osd: Dict[str, Any]) -> int:
    if "storage_device_size" in osd:
        return int(osd["storage_device_size"])
    return parse_size(str(osd.get("size", "0")))


def load_topology(repository: TopologyRepository, data: Dict[str, Any]) -> Dict[str, int]:
    """Insert or update every cluster, node and OSD in ``data``.

    Returns:
        Counts of loaded clusters, nodes and osds

    Raises:
        ValidationError: If an entry is missing a name or has a bad size or id
    """
    counts = {"clusters": 0, "nodes": 0, "osds": 0}

    for cluster_data in data.get("clusters") or []:
        name = cluster_data.get("name")
        if not name:
            raise ValidationError("Cluster entry without a name", field="clusters")
        try:
            cluster = Cluster(
                cluster_id=_derived_id(cluster_data.get("cluster_id"), name),
                name=name,
                status=cluster_data.get("status", "unknown"),
            )
        except ValueError as e:
            raise ValidationError(f"Invalid cluster entry '{name}': {e}", field="clusters") from e
        repository.add_cluster(cluster)
        counts["clusters"] += 1

        for node_data in cluster_data.get("nodes") or []:
            hostname = node_data.get("hostname")
            if not hostname:
                raise ValidationError(f"Node without a hostname in cluster '{name}'", field="nodes")
            node = Node(
                node_id=_derived_id(node_data.get("node_id"), name, hostname),
                hostname=hostname,
                cluster_id=cluster.cluster_id,
                options={k: str(v) for k, v in (node_data.get("options") or {}).items()},
            )
            repository.add_node(node)
            counts["nodes"] += 1

            for index, osd_data in enumerate(node_data.get("osds") or []):
                unit = StorageLogicalUnit(
                    slu_id=_derived_id(osd_data.get("slu_id"), name, hostname, f"osd.{index}"),
                    cluster_id=cluster.cluster_id,
                    node_id=node.node_id,
                    type=osd_data.get("type", CEPH_OSD),
                    storage_device_size=_device_size(osd_data),
                )
                repository.add_logical_unit(unit)
                counts["osds"] += 1

    logger.info(
        f"Loaded {counts['clusters']} clusters, {counts['nodes']} nodes and {counts['osds']} OSDs"
    )
    return counts


def load_topology_file(repository: TopologyRepository, path: Union[str, Path]) -> Dict[str, int]:
    """Load a YAML topology file.

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file is not valid YAML
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return load_topology(repository, data)

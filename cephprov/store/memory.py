"""In-process topology store, used for development and tests."""

import threading
import uuid
from typing import Dict, List, Union

from cephprov.core.exceptions import StoreError
from cephprov.models.storage import Storage
from cephprov.models.topology import Cluster, Node, StorageLogicalUnit
from cephprov.store.base import TopologyRepository


class InMemoryRepository(TopologyRepository):
    """Dictionary-backed repository guarded by a single lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._clusters: Dict[uuid.UUID, Cluster] = {}
        self._nodes: Dict[uuid.UUID, Node] = {}
        self._units: Dict[uuid.UUID, StorageLogicalUnit] = {}
        self._storage: Dict[uuid.UUID, Storage] = {}

    def get_cluster(self, cluster_id: uuid.UUID) -> Union[Cluster, None]:
        with self._lock:
            return self._clusters.get(cluster_id)

    def get_cluster_by_name(self, name: str) -> Union[Cluster, None]:
        with self._lock:
            for cluster in self._clusters.values():
                if cluster.name == name:
                    return cluster
        return None

    def list_clusters(self) -> List[Cluster]:
        with self._lock:
            return list(self._clusters.values())

    def list_nodes(self, cluster_id: uuid.UUID) -> List[Node]:
        with self._lock:
            return [n for n in self._nodes.values() if n.cluster_id == cluster_id]

    def list_logical_units(
        self,
        cluster_id: uuid.UUID,
        unit_type: Union[str, None] = None,
    ) -> List[StorageLogicalUnit]:
        with self._lock:
            return [
                u
                for u in self._units.values()
                if u.cluster_id == cluster_id and (unit_type is None or u.type == unit_type)
            ]

    def list_storage(self, cluster_id: Union[uuid.UUID, None] = None) -> List[Storage]:
        with self._lock:
            return [
                s for s in self._storage.values() if cluster_id is None or s.cluster_id == cluster_id
            ]

    def insert_storage(self, storage: Storage) -> None:
        with self._lock:
            if storage.storage_id in self._storage:
                raise StoreError(
                    f"Duplicate storage id {storage.storage_id}",
                    details={"storage_id": str(storage.storage_id)},
                )
            self._storage[storage.storage_id] = storage

    def add_cluster(self, cluster: Cluster) -> None:
        with self._lock:
            self._clusters[cluster.cluster_id] = cluster

    def add_node(self, node: Node) -> None:
        with self._lock:
            self._nodes[node.node_id] = node

    def add_logical_unit(self, unit: StorageLogicalUnit) -> None:
        with self._lock:
            self._units[unit.slu_id] = unit

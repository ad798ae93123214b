"""Topology repository contract."""

import uuid
from abc import ABC, abstractmethod
from typing import List, Union

from cephprov.models.storage import Storage
from cephprov.models.topology import Cluster, Node, StorageLogicalUnit

COLL_NAME_STORAGE_CLUSTERS = "storage_clusters"
COLL_NAME_STORAGE_NODES = "storage_nodes"
COLL_NAME_STORAGE_LOGICAL_UNITS = "storage_logical_units"
COLL_NAME_STORAGE = "storage"


class TopologyRepository(ABC):
    """Durable store of clusters, nodes, logical units and storage records.

    Drivers raise ``StoreError`` for any backend failure. Lookups of a single
    record return ``None`` when nothing matches.
    """

    @abstractmethod
    def get_cluster(self, cluster_id: uuid.UUID) -> Union[Cluster, None]:
        ...

    @abstractmethod
    def get_cluster_by_name(self, name: str) -> Union[Cluster, None]:
        ...

    @abstractmethod
    def list_clusters(self) -> List[Cluster]:
        ...

    @abstractmethod
    def list_nodes(self, cluster_id: uuid.UUID) -> List[Node]:
        ...

    @abstractmethod
    def list_logical_units(
        self,
        cluster_id: uuid.UUID,
        unit_type: Union[str, None] = None,
    ) -> List[StorageLogicalUnit]:
        ...

    @abstractmethod
    def list_storage(self, cluster_id: Union[uuid.UUID, None] = None) -> List[Storage]:
        ...

    @abstractmethod
    def insert_storage(self, storage: Storage) -> None:
        ...

    @abstractmethod
    def add_cluster(self, cluster: Cluster) -> None:
        ...

    @abstractmethod
    def add_node(self, node: Node) -> None:
        ...

    @abstractmethod
    def add_logical_unit(self, unit: StorageLogicalUnit) -> None:
        ...

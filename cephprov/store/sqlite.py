"""SQLite-backed JSON document store."""

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cephprov.core.exceptions import StoreError
from cephprov.models.storage import Storage
from cephprov.models.topology import Cluster, Node, StorageLogicalUnit
from cephprov.store.base import (
    COLL_NAME_STORAGE,
    COLL_NAME_STORAGE_CLUSTERS,
    COLL_NAME_STORAGE_LOGICAL_UNITS,
    COLL_NAME_STORAGE_NODES,
    TopologyRepository,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SqliteRepository(TopologyRepository):
    """Stores each record as a JSON document keyed by collection and id.

    ``cluster_id`` is kept in its own column so per-cluster reads do not
    have to scan document bodies.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        try:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create database directory for {db_path}: {e}") from e
        self.init_db()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open database {self.db_path}: {e}") from e

        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Store operation failed: {e}")
            raise StoreError(f"Store operation failed: {e}") from e
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the documents table if it does not exist."""
        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    cluster_id TEXT,
                    body TEXT NOT NULL,
                    PRIMARY KEY (collection, doc_id)
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_documents_cluster
                ON documents(collection, cluster_id)
            """)

    def _insert(
        self,
        collection: str,
        doc_id: uuid.UUID,
        doc: BaseModel,
        cluster_id: Union[uuid.UUID, None] = None,
        replace: bool = False,
    ) -> None:
        verb = "INSERT OR REPLACE" if replace else "INSERT"
        with self._connection() as conn:
            conn.execute(
                f"{verb} INTO documents (collection, doc_id, cluster_id, body) VALUES (?, ?, ?, ?)",
                (
                    collection,
                    str(doc_id),
                    str(cluster_id) if cluster_id else None,
                    doc.model_dump_json(),
                ),
            )

    def _find(self, model: Type[ModelT], collection: str, where: str = "", params: tuple = ()) -> List[ModelT]:
        query = "SELECT body FROM documents WHERE collection = ?"
        if where:
            query += f" AND {where}"
        with self._connection() as conn:
            rows = conn.execute(query + " ORDER BY rowid", (collection, *params)).fetchall()
        try:
            return [model.model_validate_json(row[0]) for row in rows]
        except PydanticValidationError as e:
            logger.error(f"Corrupt document in {collection}: {e}")
            raise StoreError(f"Corrupt {collection} document: {e}") from e

    def get_cluster(self, cluster_id: uuid.UUID) -> Union[Cluster, None]:
        found = self._find(Cluster, COLL_NAME_STORAGE_CLUSTERS, "doc_id = ?", (str(cluster_id),))
        return found[0] if found else None

    def get_cluster_by_name(self, name: str) -> Union[Cluster, None]:
        found = self._find(
            Cluster,
            COLL_NAME_STORAGE_CLUSTERS,
            "json_extract(body, '$.name') = ?",
            (name,),
        )
        return found[0] if found else None

    def list_clusters(self) -> List[Cluster]:
        return self._find(Cluster, COLL_NAME_STORAGE_CLUSTERS)

    def list_nodes(self, cluster_id: uuid.UUID) -> List[Node]:
        return self._find(Node, COLL_NAME_STORAGE_NODES, "cluster_id = ?", (str(cluster_id),))

    def list_logical_units(
        self,
        cluster_id: uuid.UUID,
        unit_type: Union[str, None] = None,
    ) -> List[StorageLogicalUnit]:
        if unit_type is None:
            return self._find(
                StorageLogicalUnit,
                COLL_NAME_STORAGE_LOGICAL_UNITS,
                "cluster_id = ?",
                (str(cluster_id),),
            )
        return self._find(
            StorageLogicalUnit,
            COLL_NAME_STORAGE_LOGICAL_UNITS,
            "cluster_id = ? AND json_extract(body, '$.type') = ?",
            (str(cluster_id), unit_type),
        )

    def list_storage(self, cluster_id: Union[uuid.UUID, None] = None) -> List[Storage]:
        if cluster_id is None:
            return self._find(Storage, COLL_NAME_STORAGE)
        return self._find(Storage, COLL_NAME_STORAGE, "cluster_id = ?", (str(cluster_id),))

    def insert_storage(self, storage: Storage) -> None:
        self._insert(COLL_NAME_STORAGE, storage.storage_id, storage, storage.cluster_id)

    def add_cluster(self, cluster: Cluster) -> None:
        self._insert(COLL_NAME_STORAGE_CLUSTERS, cluster.cluster_id, cluster, cluster.cluster_id, replace=True)

    def add_node(self, node: Node) -> None:
        self._insert(COLL_NAME_STORAGE_NODES, node.node_id, node, node.cluster_id, replace=True)

    def add_logical_unit(self, unit: StorageLogicalUnit) -> None:
        self._insert(COLL_NAME_STORAGE_LOGICAL_UNITS, unit.slu_id, unit, unit.cluster_id, replace=True)

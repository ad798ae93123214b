"""Tests for the topology stores and topology loading."""

import sqlite3
import uuid
from pathlib import Path

import pytest

from cephprov.core.config import Settings
from cephprov.core.exceptions import StoreError, ValidationError
from cephprov.models.storage import AddStorageRequest, Storage
from cephprov.models.topology import Cluster, Node, StorageLogicalUnit
from cephprov.services.pgcalc import DEFAULT_PG_NUM, derive_pg_count
from cephprov.store import InMemoryRepository, SqliteRepository, TopologyRepository, create_repository
from cephprov.store.loader import load_topology, load_topology_file

from conftest import CLUSTER_ID, TB

TOPOLOGY_YAML = """
clusters:
  - name: ceph-east
    cluster_id: 12345678-1234-1234-1234-123456789abc
    status: ok
    nodes:
      - hostname: mon1
        options: {mon: "Y"}
      - hostname: mon2
        options: {mon: "Y"}
      - hostname: osd1
        osds:
          - size: 1TB
          - size: 1TB
          - storage_device_size: 2048
  - name: ceph-west
"""


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path) -> TopologyRepository:
    """Each test runs against both drivers."""
    if request.param == "memory":
        return InMemoryRepository()
    return SqliteRepository(str(tmp_path / "store" / "cephprov.db"))


def make_storage(name: str = "pool1", cluster_id: uuid.UUID = CLUSTER_ID) -> Storage:
    return Storage.from_request(cluster_id, AddStorageRequest(name=name, size="10GB", replicas=2))


class TestRepository:
    """Behaviour shared by every driver."""

    def test_cluster_lookup(self, store: TopologyRepository) -> None:
        """Test clusters can be fetched by id and by name."""
        cluster = Cluster(cluster_id=CLUSTER_ID, name="ceph1", status="ok")
        store.add_cluster(cluster)

        assert store.get_cluster(CLUSTER_ID) == cluster
        assert store.get_cluster_by_name("ceph1") == cluster
        assert store.get_cluster(uuid.uuid4()) is None
        assert store.get_cluster_by_name("nope") is None

    def test_add_cluster_replaces(self, store: TopologyRepository) -> None:
        """Test re-adding a cluster updates it in place."""
        store.add_cluster(Cluster(cluster_id=CLUSTER_ID, name="ceph1"))
        store.add_cluster(Cluster(cluster_id=CLUSTER_ID, name="ceph1", status="ok"))

        assert len(store.list_clusters()) == 1
        assert store.get_cluster(CLUSTER_ID).status == "ok"

    def test_nodes_by_cluster(self, store: TopologyRepository) -> None:
        """Test nodes are listed per cluster."""
        other = uuid.uuid4()
        store.add_node(Node(node_id=uuid.uuid4(), hostname="mon1", cluster_id=CLUSTER_ID, options={"mon": "Y"}))
        store.add_node(Node(node_id=uuid.uuid4(), hostname="far", cluster_id=other))

        nodes = store.list_nodes(CLUSTER_ID)
        assert [n.hostname for n in nodes] == ["mon1"]
        assert nodes[0].is_monitor

    def test_logical_units_by_type(self, store: TopologyRepository) -> None:
        """Test logical units can be filtered by type."""
        store.add_logical_unit(
            StorageLogicalUnit(slu_id=uuid.uuid4(), cluster_id=CLUSTER_ID, storage_device_size=TB)
        )
        store.add_logical_unit(
            StorageLogicalUnit(slu_id=uuid.uuid4(), cluster_id=CLUSTER_ID, type="journal", storage_device_size=1)
        )

        assert len(store.list_logical_units(CLUSTER_ID)) == 2
        osds = store.list_logical_units(CLUSTER_ID, "osd")
        assert [u.storage_device_size for u in osds] == [TB]
        assert store.list_logical_units(uuid.uuid4(), "osd") == []

    def test_storage_round_trip(self, store: TopologyRepository) -> None:
        """Test a storage record is read back intact."""
        storage = make_storage()
        store.insert_storage(storage)

        assert store.list_storage(CLUSTER_ID) == [storage]
        assert store.list_storage() == [storage]
        assert store.list_storage(uuid.uuid4()) == []

    def test_duplicate_storage_id(self, store: TopologyRepository) -> None:
        """Test inserting the same storage id twice fails."""
        storage = make_storage()
        store.insert_storage(storage)

        with pytest.raises(StoreError):
            store.insert_storage(storage)


class TestSqliteRepository:
    """Driver specific behaviour of the SQLite store."""

    def test_data_survives_reopen(self, tmp_path: Path) -> None:
        """Test records persist across repository instances."""
        db_path = str(tmp_path / "cephprov.db")
        SqliteRepository(db_path).add_cluster(Cluster(cluster_id=CLUSTER_ID, name="ceph1"))

        assert SqliteRepository(db_path).get_cluster_by_name("ceph1").cluster_id == CLUSTER_ID

    def test_unusable_path(self, tmp_path: Path) -> None:
        """Test a database path that cannot be opened raises StoreError."""
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(StoreError):
            SqliteRepository(str(blocker / "cephprov.db"))

    def test_corrupt_document(self, tmp_path: Path) -> None:
        """Test an undecodable stored body raises StoreError."""
        db_path = str(tmp_path / "cephprov.db")
        repository = SqliteRepository(db_path)
        with sqlite3.connect(db_path) as conn:
            conn.execute(
                "INSERT INTO documents VALUES (?, ?, ?, ?)",
                ("storage_clusters", "broken", None, "{not json"),
            )

        with pytest.raises(StoreError, match="Corrupt"):
            repository.list_clusters()

    def test_corrupt_osd_falls_back_to_default_pg_count(self, tmp_path: Path) -> None:
        """Test a corrupt OSD record yields the default PG count."""
        db_path = str(tmp_path / "cephprov.db")
        repository = SqliteRepository(db_path)
        repository.add_cluster(Cluster(cluster_id=CLUSTER_ID, name="ceph1"))
        with sqlite3.connect(db_path) as conn:
            conn.execute(
                "INSERT INTO documents VALUES (?, ?, ?, ?)",
                ("storage_logical_units", "broken", str(CLUSTER_ID), '{"type": "osd", "storage_device_size": -1}'),
            )

        assert derive_pg_count(repository, CLUSTER_ID, "100GB", 3) == DEFAULT_PG_NUM


class TestCreateRepository:
    """Tests for driver selection."""

    def test_memory(self) -> None:
        """Test the memory driver."""
        settings = Settings(database={"driver": "memory"})
        assert isinstance(create_repository(settings), InMemoryRepository)

    def test_sqlite(self, tmp_path: Path) -> None:
        """Test the sqlite driver uses the configured path."""
        settings = Settings(database={"driver": "sqlite", "path": str(tmp_path / "db.sqlite")})
        repository = create_repository(settings)
        assert isinstance(repository, SqliteRepository)
        assert (tmp_path / "db.sqlite").exists()


class TestLoadTopology:
    """Tests for loading topology files."""

    def test_load_file(self, store: TopologyRepository, tmp_path: Path) -> None:
        """Test clusters, nodes and OSDs are loaded from YAML."""
        path = tmp_path / "topology.yaml"
        path.write_text(TOPOLOGY_YAML)

        counts = load_topology_file(store, path)

        assert counts == {"clusters": 2, "nodes": 3, "osds": 3}
        cluster = store.get_cluster(CLUSTER_ID)
        assert cluster.name == "ceph-east"
        assert cluster.status == "ok"
        assert sorted(n.hostname for n in store.list_nodes(CLUSTER_ID) if n.is_monitor) == ["mon1", "mon2"]
        sizes = sorted(u.storage_device_size for u in store.list_logical_units(CLUSTER_ID, "osd"))
        assert sizes == [2048, TB, TB]
        assert store.get_cluster_by_name("ceph-west") is not None

    def test_reload_is_idempotent(self, store: TopologyRepository, tmp_path: Path) -> None:
        """Test loading the same file twice does not duplicate records."""
        path = tmp_path / "topology.yaml"
        path.write_text(TOPOLOGY_YAML)

        load_topology_file(store, path)
        load_topology_file(store, path)

        assert len(store.list_clusters()) == 2
        assert len(store.list_nodes(CLUSTER_ID)) == 3
        assert len(store.list_logical_units(CLUSTER_ID)) == 3

    def test_missing_name(self, store: TopologyRepository) -> None:
        """Test a cluster without a name is rejected."""
        with pytest.raises(ValidationError):
            load_topology(store, {"clusters": [{"status": "ok"}]})

    def test_bad_cluster_id(self, store: TopologyRepository) -> None:
        """Test a malformed cluster id is rejected."""
        with pytest.raises(ValidationError):
            load_topology(store, {"clusters": [{"name": "c", "cluster_id": "xyz"}]})

    def test_bad_osd_size(self, store: TopologyRepository) -> None:
        """Test an unparseable OSD size is rejected."""
        data = {"clusters": [{"name": "c", "nodes": [{"hostname": "h", "osds": [{"size": "big"}]}]}]}
        with pytest.raises(ValidationError):
            load_topology(store, data)

    def test_empty_document(self, store: TopologyRepository) -> None:
        """Test an empty document loads nothing."""
        assert load_topology(store, {}) == {"clusters": 0, "nodes": 0, "osds": 0}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

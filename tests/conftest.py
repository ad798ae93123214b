"""Shared test fixtures."""

import json
import os

# Must be set before cephprov builds its settings and audit logger
os.environ.setdefault("CEPHPROV_LOGGING__AUDIT_ENABLED", "false")
os.environ.setdefault("CEPHPROV_DATABASE__DRIVER", "memory")

import random
import uuid
from typing import Callable, List
from unittest.mock import MagicMock

import pytest

from cephprov.ceph.client import CephApiClient
from cephprov.models.topology import Cluster, Node, StorageLogicalUnit
from cephprov.store.memory import InMemoryRepository

TB = 1024 ** 4

CLUSTER_ID = uuid.UUID("12345678-1234-1234-1234-123456789abc")


def make_response(status_code: int = 200, json_body=None, text=None) -> MagicMock:
    """Build a requests.Response stand-in."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text if text is not None else json.dumps(json_body or {})
    return response


def populate_cluster(
    repository: InMemoryRepository,
    cluster_id: uuid.UUID = CLUSTER_ID,
    monitors: int = 3,
    osd_count: int = 60,
    osd_size: int = TB,
    name: str = "ceph1",
) -> Cluster:
    """Add a cluster with ``monitors`` mon nodes, one plain node and ``osd_count`` OSDs."""
    cluster = Cluster(cluster_id=cluster_id, name=name, status="ok")
    repository.add_cluster(cluster)

    for i in range(monitors):
        repository.add_node(
            Node(
                node_id=uuid.uuid4(),
                hostname=f"mon{i + 1}",
                cluster_id=cluster_id,
                options={"mon": "Y"},
            )
        )
    osd_node = Node(node_id=uuid.uuid4(), hostname="osd-host", cluster_id=cluster_id, options={"mon": "N"})
    repository.add_node(osd_node)

    for _ in range(osd_count):
        repository.add_logical_unit(
            StorageLogicalUnit(
                slu_id=uuid.uuid4(),
                cluster_id=cluster_id,
                node_id=osd_node.node_id,
                storage_device_size=osd_size,
            )
        )
    return cluster


@pytest.fixture
def repository() -> InMemoryRepository:
    """Empty in-memory store."""
    return InMemoryRepository()


@pytest.fixture
def populated_repository(repository: InMemoryRepository) -> InMemoryRepository:
    """Store holding one cluster with 3 monitors and 60 x 1TB OSDs."""
    populate_cluster(repository)
    return repository


@pytest.fixture
def mock_session() -> MagicMock:
    """HTTP session whose responses are scripted per test."""
    return MagicMock()


@pytest.fixture
def ceph_client(mock_session: MagicMock) -> CephApiClient:
    """Control API client that never sleeps and never touches the network."""
    return CephApiClient(session=mock_session, sleep=lambda _: None)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def pool_responses() -> Callable[..., List[MagicMock]]:
    """Responses for a submit followed by status polls in the given states."""

    def build(*states: str, request_id: str = "req-1") -> List[MagicMock]:
        responses = [make_response(202, {"request_id": request_id})]
        for state in states:
            responses.append(make_response(200, {"id": request_id, "state": state}))
        return responses

    return build

"""Tests for monitor selection."""

import random
import uuid
from collections import Counter

import pytest

from cephprov.core.exceptions import NoMonitorsAvailable
from cephprov.models.topology import Node
from cephprov.services.monitor import cluster_monitors, select_monitor

from conftest import CLUSTER_ID


def make_node(hostname: str, mon: bool, cluster_id: uuid.UUID = CLUSTER_ID) -> Node:
    return Node(
        node_id=uuid.uuid4(),
        hostname=hostname,
        cluster_id=cluster_id,
        options={"mon": "Y" if mon else "N"},
    )


class TestClusterMonitors:
    """Tests for filtering monitor nodes."""

    def test_only_flagged_nodes(self) -> None:
        """Test only nodes with mon=Y are monitors."""
        nodes = [
            make_node("mon1", True),
            make_node("osd1", False),
            Node(node_id=uuid.uuid4(), hostname="bare", cluster_id=CLUSTER_ID),
            Node(node_id=uuid.uuid4(), hostname="lower", cluster_id=CLUSTER_ID, options={"mon": "y"}),
        ]
        assert [n.hostname for n in cluster_monitors(nodes, CLUSTER_ID)] == ["mon1"]

    def test_other_cluster_excluded(self) -> None:
        """Test monitors of another cluster are not eligible."""
        nodes = [make_node("mon1", True), make_node("foreign", True, cluster_id=uuid.uuid4())]
        assert [n.hostname for n in cluster_monitors(nodes, CLUSTER_ID)] == ["mon1"]


class TestSelectMonitor:
    """Tests for select_monitor."""

    def test_no_monitors(self) -> None:
        """Test a cluster without monitors raises NoMonitorsAvailable."""
        with pytest.raises(NoMonitorsAvailable) as exc_info:
            select_monitor([make_node("osd1", False)], CLUSTER_ID)
        assert exc_info.value.status_code == 409

    def test_empty_node_list(self) -> None:
        """Test an empty node list raises NoMonitorsAvailable."""
        with pytest.raises(NoMonitorsAvailable):
            select_monitor([], CLUSTER_ID)

    def test_single_monitor(self) -> None:
        """Test the only monitor is always chosen."""
        mon = make_node("mon1", True)
        for _ in range(5):
            assert select_monitor([mon, make_node("osd1", False)], CLUSTER_ID) is mon

    def test_choice_is_a_monitor(self, rng: random.Random) -> None:
        """Test the selected node is always an eligible monitor."""
        nodes = [make_node(f"mon{i}", True) for i in range(3)] + [make_node("osd1", False)]
        for _ in range(20):
            assert select_monitor(nodes, CLUSTER_ID, rng).is_monitor

    def test_distribution_covers_all_monitors(self) -> None:
        """Test every monitor gets picked over many selections."""
        nodes = [make_node(f"mon{i}", True) for i in range(3)]
        rng = random.Random(7)
        picks = Counter(select_monitor(nodes, CLUSTER_ID, rng).hostname for _ in range(300))
        assert set(picks) == {"mon0", "mon1", "mon2"}
        assert min(picks.values()) > 50


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

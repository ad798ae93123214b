"""Tests for placement group count derivation."""

import uuid
from unittest.mock import MagicMock

import pytest

from cephprov.core.exceptions import StoreError, ValidationError
from cephprov.models.storage import ProvisioningOptions
from cephprov.models.topology import StorageLogicalUnit
from cephprov.services.pgcalc import (
    DEFAULT_PG_NUM,
    derive_pg_count,
    next_power_of_two,
    pg_count_for_osds,
    resolve_pg_count,
)
from cephprov.store.memory import InMemoryRepository

from conftest import CLUSTER_ID, TB, populate_cluster

GB = 1024 ** 3


def make_osds(count: int, size: int = TB) -> list:
    return [
        StorageLogicalUnit(slu_id=uuid.uuid4(), cluster_id=CLUSTER_ID, storage_device_size=size)
        for _ in range(count)
    ]


class TestNextPowerOfTwo:
    """Tests for rounding up to a power of two."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, 1),
            (1, 1),
            (1.5, 2),
            (24.4, 32),
            (64, 64),
            (65, 128),
        ],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        """Test values round up to the next power of two."""
        assert next_power_of_two(value) == expected


class TestTieredCounts:
    """Tests for the fixed tiers by OSD count."""

    @pytest.mark.parametrize(
        "osd_count,expected",
        [
            (0, 128),
            (3, 128),
            (5, 128),
            (6, 512),
            (10, 512),
            (11, 4096),
            (50, 4096),
        ],
    )
    def test_tiers(self, osd_count: int, expected: int) -> None:
        """Test small clusters get a fixed count regardless of size."""
        assert pg_count_for_osds(make_osds(osd_count), 100 * GB, 3) == expected

    def test_tier_ignores_requested_size(self) -> None:
        """Test a tiered count does not depend on the requested size."""
        osds = make_osds(8)
        assert pg_count_for_osds(osds, GB, 3) == pg_count_for_osds(osds, 100 * TB, 3)


class TestProportionalCount:
    """Tests for clusters with more than 50 OSDs."""

    def test_sixty_osds_hundred_gigabytes(self) -> None:
        """Test 60 x 1TB OSDs, 3 replicas and 100GB gives 32 PGs."""
        assert pg_count_for_osds(make_osds(60), 100 * GB, 3) == 32

    def test_full_capacity_request(self) -> None:
        """Test a request for the whole allocatable capacity."""
        # 60 TB raw / 3 replicas * 0.8 = 16 TB allocatable
        assert pg_count_for_osds(make_osds(60), 16 * TB, 3) == 4096

    def test_result_is_power_of_two(self) -> None:
        """Test derived counts are always powers of two."""
        for size in (GB, 7 * GB, 300 * GB, 3 * TB):
            pg_num = pg_count_for_osds(make_osds(64), size, 2)
            assert pg_num > 0
            assert pg_num & (pg_num - 1) == 0

    def test_monotonic_in_size(self) -> None:
        """Test a larger request never gets fewer PGs."""
        osds = make_osds(60)
        counts = [pg_count_for_osds(osds, size, 3) for size in (GB, 10 * GB, 100 * GB, TB, 10 * TB)]
        assert counts == sorted(counts)

    def test_zero_capacity_osds_use_default(self) -> None:
        """Test OSDs reporting no capacity fall back to the default count."""
        assert pg_count_for_osds(make_osds(60, size=0), 100 * GB, 3) == DEFAULT_PG_NUM

    def test_replicas_below_one_rejected(self) -> None:
        """Test a replica count of zero is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            pg_count_for_osds(make_osds(60), 100 * GB, 0)
        assert exc_info.value.details["field"] == "replicas"


class TestDerivePgCount:
    """Tests for deriving the count from the store."""

    def test_reads_osds_from_store(self, populated_repository: InMemoryRepository) -> None:
        """Test the cluster's OSD inventory drives the result."""
        assert derive_pg_count(populated_repository, CLUSTER_ID, "100GB", 3) == 32

    def test_only_cluster_osds_counted(self, repository: InMemoryRepository) -> None:
        """Test OSDs of another cluster are not counted."""
        populate_cluster(repository, osd_count=4)
        populate_cluster(repository, cluster_id=uuid.uuid4(), osd_count=60, name="other")
        assert derive_pg_count(repository, CLUSTER_ID, "100GB", 3) == 128

    def test_store_failure_uses_default(self) -> None:
        """Test a store failure yields the default count."""
        repository = MagicMock()
        repository.list_logical_units.side_effect = StoreError("connection lost")

        assert derive_pg_count(repository, CLUSTER_ID, "100GB", 3) == DEFAULT_PG_NUM

    def test_invalid_size_rejected(self, populated_repository: InMemoryRepository) -> None:
        """Test an unparseable size is reported as a validation error."""
        with pytest.raises(ValidationError):
            derive_pg_count(populated_repository, CLUSTER_ID, "lots", 3)


class TestResolvePgCount:
    """Tests for the explicit pgnum override."""

    def test_override_wins(self, populated_repository: InMemoryRepository) -> None:
        """Test an explicit pgnum is used as-is, without rounding."""
        options = ProvisioningOptions(pgnum=777)
        assert resolve_pg_count(populated_repository, CLUSTER_ID, "100GB", 3, options) == 777

    def test_override_skips_store(self) -> None:
        """Test the store is not consulted when pgnum is given."""
        repository = MagicMock()
        resolve_pg_count(repository, CLUSTER_ID, "100GB", 3, ProvisioningOptions(pgnum=64))
        repository.list_logical_units.assert_not_called()

    def test_no_override_derives(self, populated_repository: InMemoryRepository) -> None:
        """Test the derived count is used without an override."""
        assert resolve_pg_count(populated_repository, CLUSTER_ID, "100GB", 3, ProvisioningOptions()) == 32


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

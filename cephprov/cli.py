#!/usr/bin/env python3
"""
Ceph Pool Provisioning - CLI Management Tool

Management commands for the topology store: loading cluster layouts,
listing clusters and storage, and previewing placement group counts.
"""

import argparse
import sys
from typing import List, Optional

import yaml
from tabulate import tabulate

from cephprov.core.config import Settings, get_settings, reload_settings
from cephprov.core.exceptions import CephProvException
from cephprov.models.storage import ProvisioningOptions
from cephprov.services.monitor import cluster_monitors
from cephprov.services.pgcalc import resolve_pg_count
from cephprov.store import SqliteRepository, TopologyRepository, create_repository
from cephprov.store.loader import load_topology_file
from cephprov.utils.size import format_bytes


def print_error(message: str):
    """Print error message."""
    print(f"✗ Error: {message}", file=sys.stderr)


def print_success(message: str):
    """Print success message."""
    print(f"✓ {message}")


def print_info(message: str):
    """Print info message."""
    print(f"ℹ {message}")


def cmd_init_db(args, settings: Settings, repository: TopologyRepository):
    """Initialize the database."""
    if isinstance(repository, SqliteRepository):
        repository.init_db()
        print_success(f"Database initialized successfully at {settings.database.path}")
    else:
        print_info(f"Store driver '{settings.database.driver}' needs no initialization")


def cmd_load_topology(args, settings: Settings, repository: TopologyRepository):
    """Load clusters, nodes and OSDs from a YAML file."""
    try:
        counts = load_topology_file(repository, args.file)
    except FileNotFoundError:
        print_error(f"Topology file not found: {args.file}")
        sys.exit(1)
    except yaml.YAMLError as e:
        print_error(f"Error parsing topology file: {e}")
        sys.exit(1)

    print_success(
        f"Loaded {counts['clusters']} cluster(s), {counts['nodes']} node(s), {counts['osds']} OSD(s)"
    )


def cmd_list_clusters(args, settings: Settings, repository: TopologyRepository):
    """List clusters with node, monitor and OSD counts."""
    clusters = repository.list_clusters()
    if not clusters:
        print_info("No clusters found")
        return

    table_data = []
    for cluster in clusters:
        nodes = repository.list_nodes(cluster.cluster_id)
        osds = repository.list_logical_units(cluster.cluster_id, "osd")
        table_data.append([
            str(cluster.cluster_id),
            cluster.name,
            cluster.status,
            len(nodes),
            len(cluster_monitors(nodes, cluster.cluster_id)),
            len(osds),
            format_bytes(sum(o.storage_device_size for o in osds)),
        ])

    headers = ["ID", "Name", "Status", "Nodes", "Mons", "OSDs", "Raw Capacity"]
    print(tabulate(table_data, headers=headers, tablefmt="grid"))
    print(f"\nTotal: {len(clusters)} cluster(s)")


def cmd_list_storage(args, settings: Settings, repository: TopologyRepository):
    """List storage records, optionally for one cluster."""
    cluster_id = None
    if args.cluster:
        cluster = repository.get_cluster_by_name(args.cluster)
        if cluster is None:
            print_error(f"Cluster '{args.cluster}' not found")
            sys.exit(1)
        cluster_id = cluster.cluster_id

    records = repository.list_storage(cluster_id)
    if not records:
        print_info("No storage found")
        return

    table_data = [
        [
            str(s.storage_id),
            s.name,
            str(s.cluster_id),
            s.size,
            s.replicas,
            s.status,
            "Yes" if s.quota_enabled else "No",
        ]
        for s in records
    ]
    headers = ["ID", "Name", "Cluster", "Size", "Replicas", "Status", "Quota"]
    print(tabulate(table_data, headers=headers, tablefmt="grid"))
    print(f"\nTotal: {len(records)} storage record(s)")


def cmd_derive_pgnum(args, settings: Settings, repository: TopologyRepository):
    """Preview the PG count a creation request would use."""
    cluster = repository.get_cluster_by_name(args.cluster)
    if cluster is None:
        print_error(f"Cluster '{args.cluster}' not found")
        sys.exit(1)

    try:
        options = ProvisioningOptions(pgnum=args.pgnum)
        pg_num = resolve_pg_count(
            repository,
            cluster.cluster_id,
            args.size,
            args.replicas,
            options,
        )
    except (CephProvException, ValueError) as e:
        print_error(str(e))
        sys.exit(1)

    print(pg_num)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ceph Pool Provisioning - CLI Management Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '--config',
        help='Path to config.yaml (default: ./config.yaml)',
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    subparsers.add_parser(
        'init-db',
        help='Initialize the database',
    )

    load_parser = subparsers.add_parser(
        'load-topology',
        help='Load clusters, nodes and OSDs from a YAML file',
    )
    load_parser.add_argument('file', help='Topology YAML file')

    subparsers.add_parser(
        'list-clusters',
        help='List clusters',
    )

    storage_parser = subparsers.add_parser(
        'list-storage',
        help='List storage records',
    )
    storage_parser.add_argument(
        '--cluster',
        help='Only show storage of this cluster (by name)',
    )

    pgnum_parser = subparsers.add_parser(
        'derive-pgnum',
        help='Show the PG count a pool request would get',
    )
    pgnum_parser.add_argument('cluster', help='Cluster name')
    pgnum_parser.add_argument('size', help='Requested size, e.g. 100GB')
    pgnum_parser.add_argument('replicas', type=int, help='Replica count')
    pgnum_parser.add_argument(
        '--pgnum',
        type=int,
        help='Explicit PG count override',
    )

    return parser


COMMANDS = {
    'init-db': cmd_init_db,
    'load-topology': cmd_load_topology,
    'list-clusters': cmd_list_clusters,
    'list-storage': cmd_list_storage,
    'derive-pgnum': cmd_derive_pgnum,
}


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = reload_settings(args.config) if args.config else get_settings()

    try:
        repository = create_repository(settings)
        COMMANDS[args.command](args, settings, repository)
    except CephProvException as e:
        print_error(e.message)
        sys.exit(1)


if __name__ == '__main__':
    main()

"""Cluster control API client and utilities."""

from cephprov.ceph.client import CephApiClient, PollPolicy
from cephprov.ceph.errors import (
    CephApiError,
    PollTimedOut,
    RemoteDecodeError,
    RemotePollError,
    RemoteRequestFailed,
    RemoteSubmitError,
)
from cephprov.ceph.models import CephAsyncRequest, CephPoolRequest, CephRequestStatus
from cephprov.ceph.routes import DEFAULT_ROUTES, Route, RouteTable

__all__ = [
    "CephApiClient",
    "CephApiError",
    "CephAsyncRequest",
    "CephPoolRequest",
    "CephRequestStatus",
    "DEFAULT_ROUTES",
    "PollPolicy",
    "PollTimedOut",
    "RemoteDecodeError",
    "RemotePollError",
    "RemoteRequestFailed",
    "RemoteSubmitError",
    "Route",
    "RouteTable",
]

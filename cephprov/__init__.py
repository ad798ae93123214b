"""Ceph storage pool provisioning service."""

__version__ = "1.0.0"

"""Custom exception classes for the service."""

from typing import Any, Dict, Union


class CephProvException(Exception):
    """Base exception for all provisioning errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 500,
        details: Union[Dict[str, Any], None] = None,
    ) -> None:
        """Initialize exception with error details.

        Args:
            message: Human-readable error message
            code: Error code identifier
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(CephProvException):
    """Raised when a request field is malformed or cannot be parsed."""

    def __init__(
        self,
        message: str,
        field: Union[str, None] = None,
        details: Union[Dict[str, Any], None] = None,
    ) -> None:
        """Initialize with the offending field."""
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=error_details,
        )


class NotFoundError(CephProvException):
    """Raised when a referenced entity does not exist."""

    def __init__(
        self,
        message: str,
        code: str = "NOT_FOUND",
        details: Union[Dict[str, Any], None] = None,
    ) -> None:
        super().__init__(message=message, code=code, status_code=404, details=details)


class ClusterNotFoundError(NotFoundError):
    """Raised when a cluster cannot be found."""

    def __init__(self, cluster: str, details: Union[Dict[str, Any], None] = None) -> None:
        """Initialize with cluster id or name."""
        super().__init__(
            message=f"Cluster '{cluster}' not found",
            code="CLUSTER_NOT_FOUND",
            details=details or {"cluster": cluster},
        )


class TaskNotFoundError(NotFoundError):
    """Raised when a task id is unknown."""

    def __init__(self, task_id: str) -> None:
        """Initialize with task id."""
        super().__init__(
            message=f"Task '{task_id}' not found",
            code="TASK_NOT_FOUND",
            details={"task_id": task_id},
        )


class TopologyError(CephProvException):
    """Raised when the cluster topology cannot support the operation."""

    def __init__(
        self,
        message: str,
        code: str = "TOPOLOGY_ERROR",
        details: Union[Dict[str, Any], None] = None,
    ) -> None:
        super().__init__(message=message, code=code, status_code=409, details=details)


class NoMonitorsAvailable(TopologyError):
    """Raised when a cluster has no node flagged as monitor."""

    def __init__(self, cluster_id: str) -> None:
        """Initialize with cluster id."""
        super().__init__(
            message=f"No mons available for cluster '{cluster_id}'",
            code="NO_MONITORS_AVAILABLE",
            details={"cluster_id": cluster_id},
        )


class StoreError(CephProvException):
    """Raised when the topology store driver fails."""

    def __init__(self, message: str, details: Union[Dict[str, Any], None] = None) -> None:
        super().__init__(message=message, code="STORE_ERROR", status_code=500, details=details)


class PersistenceError(CephProvException):
    """Raised when the storage entity cannot be written after pool creation."""

    def __init__(self, storage_name: str, reason: str) -> None:
        """Initialize with storage name and failure reason."""
        super().__init__(
            message=f"Failed to persist storage '{storage_name}': {reason}",
            code="PERSISTENCE_ERROR",
            status_code=500,
            details={"storage": storage_name, "reason": reason},
        )


class TaskCreationError(CephProvException):
    """Raised when a background task cannot be started."""

    def __init__(self, name: str, reason: str) -> None:
        """Initialize with task name and failure reason."""
        super().__init__(
            message=f"Task creation failed for {name}",
            code="TASK_CREATION_FAILED",
            status_code=500,
            details={"task": name, "reason": reason},
        )

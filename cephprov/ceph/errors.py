"""Exceptions raised by the cluster control API client."""

from typing import Any

from cephprov.core.exceptions import CephProvException


class CephApiError(CephProvException):
    """Base exception for control API failures."""

    def __init__(
        self,
        message: str,
        code: str = "CEPH_API_ERROR",
        status_code: int = 502,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, status_code=status_code, details=kwargs.get("details"))


class RemoteSubmitError(CephApiError):
    """Submitting a command was rejected or never reached the cluster."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        """Initialize RemoteSubmitError."""
        kwargs.setdefault("code", "CEPH_SUBMIT_FAILED")
        super().__init__(message, **kwargs)


class RemoteDecodeError(CephApiError):
    """A control API response body could not be decoded."""

    def __init__(self, message: str, body: str = "", **kwargs: Any) -> None:
        """Initialize RemoteDecodeError.

        Args:
            message: Description of what was being decoded
            body: Raw response body, truncated in details
            **kwargs: Additional arguments
        """
        kwargs.setdefault("code", "CEPH_DECODE_FAILED")
        kwargs.setdefault("details", {})
        kwargs["details"]["body"] = body[:512]
        super().__init__(message, **kwargs)


class RemotePollError(CephApiError):
    """Reading the status of an asynchronous request failed."""

    def __init__(self, request_id: str, message: str = "Error syncing request status from cluster", **kwargs: Any) -> None:
        """Initialize RemotePollError.

        Args:
            request_id: Cluster request being polled
            message: Error description
            **kwargs: Additional arguments
        """
        kwargs.setdefault("code", "CEPH_POLL_FAILED")
        kwargs.setdefault("details", {})
        kwargs["details"]["request_id"] = request_id
        super().__init__(message, **kwargs)


class PollTimedOut(RemotePollError):
    """An asynchronous request did not complete within the poll policy."""

    def __init__(self, request_id: str, attempts: int, elapsed: float, **kwargs: Any) -> None:
        """Initialize PollTimedOut.

        Args:
            request_id: Cluster request being polled
            attempts: Status reads made before giving up
            elapsed: Seconds spent polling
            **kwargs: Additional arguments
        """
        kwargs.setdefault("code", "CEPH_POLL_TIMEOUT")
        kwargs.setdefault("status_code", 504)
        kwargs.setdefault("details", {})
        kwargs["details"].update({"attempts": attempts, "elapsed": round(elapsed, 3)})
        super().__init__(
            request_id,
            f"Request {request_id} did not complete after {attempts} polls ({elapsed:.1f}s)",
            **kwargs,
        )


class RemoteRequestFailed(CephApiError):
    """The cluster finished an asynchronous request with an error."""

    def __init__(self, request_id: str, error_message: str, **kwargs: Any) -> None:
        """Initialize RemoteRequestFailed."""
        kwargs.setdefault("code", "CEPH_REQUEST_FAILED")
        kwargs.setdefault("details", {})
        kwargs["details"].update({"request_id": request_id, "error_message": error_message})
        super().__init__(f"Request {request_id} failed on cluster: {error_message}", **kwargs)

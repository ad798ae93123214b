"""Cluster control API client."""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Type, TypeVar, Union

import requests
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cephprov.ceph.errors import (
    PollTimedOut,
    RemoteDecodeError,
    RemotePollError,
    RemoteRequestFailed,
    RemoteSubmitError,
)
from cephprov.ceph.models import CephAsyncRequest, CephPoolRequest, CephRequestStatus
from cephprov.ceph.routes import DEFAULT_ROUTES, Route, RouteTable
from cephprov.core.config import CephApiConfig

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ACCEPTED_SUBMIT_CODES = (200, 202)


@dataclass(frozen=True)
class PollPolicy:
    """Bounds on waiting for an asynchronous cluster request.

    ``timeout`` is in seconds. With both ``timeout`` and ``max_attempts``
    unset the wait is unbounded.
    """

    interval: float = 2.0
    timeout: Union[float, None] = None
    max_attempts: Union[int, None] = None


class CephApiClient:
    """Client for the cluster's REST control API, reached through a monitor."""

    def __init__(
        self,
        config: Union[CephApiConfig, None] = None,
        routes: RouteTable = DEFAULT_ROUTES,
        session: Union[requests.Session, None] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize CephApiClient.

        Args:
            config: Endpoint settings (scheme, port, prefix, timeout)
            routes: Operation route table
            session: HTTP session to reuse
            sleep: Called between status polls
            clock: Monotonic clock used for poll deadlines
        """
        self.config = config or CephApiConfig()
        self.routes = routes
        self.session = session or requests.Session()
        self._sleep = sleep
        self._clock = clock

    def build_url(self, route: Route, host: str, **tokens: str) -> str:
        """Full URL of ``route`` on monitor ``host``."""
        return (
            f"{self.config.scheme}://{host}:{self.config.port}/"
            f"{self.config.prefix}/v{route.version}/{route.render(**tokens)}"
        )

    def request(
        self,
        operation: str,
        host: str,
        body: Union[Dict[str, Any], None] = None,
        **tokens: str,
    ) -> requests.Response:
        """Issue ``operation`` against ``host``.

        Writes carry ``body`` as JSON, reads carry no body.

        Raises:
            ValueError: If the route method is not supported
            requests.RequestException: On transport failure
        """
        route = self.routes[operation]
        url = self.build_url(route, host, **tokens)
        logger.debug(f"{route.method} {url}")

        if route.method in ("POST", "PUT", "PATCH"):
            return self.session.request(
                route.method,
                url,
                json=body if body is not None else {},
                timeout=self.config.request_timeout,
                verify=self.config.verify_tls,
            )
        if route.method in ("GET", "DELETE"):
            return self.session.request(
                route.method,
                url,
                timeout=self.config.request_timeout,
                verify=self.config.verify_tls,
            )
        raise ValueError(f"Invalid method type: {route.method}")

    @staticmethod
    def _decode(response: requests.Response, model: Type[ModelT], what: str) -> ModelT:
        text = response.text
        try:
            return model.model_validate(json.loads(text))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(f"Failed to parse {what}: {text!r}")
            raise RemoteDecodeError(f"Error parsing {what}: {e}", body=text) from e

    def submit_create_pool(self, host: str, cluster_id: str, pool: CephPoolRequest) -> CephAsyncRequest:
        """Send a pool creation command and return the async request descriptor.

        Raises:
            RemoteSubmitError: On transport failure or a status other than 200/202
            RemoteDecodeError: If the response is not an async request descriptor
        """
        logger.info(f"Submitting creation of pool '{pool.name}' on cluster {cluster_id} via {host}")
        try:
            response = self.request("CreatePool", host, body=pool.model_dump(), cluster_fsid=cluster_id)
        except requests.RequestException as e:
            logger.error(f"Failed to create pool '{pool.name}': {e}")
            raise RemoteSubmitError(
                f"Failed to create pool: {e}",
                details={"pool": pool.name, "host": host},
            ) from e

        if response.status_code not in ACCEPTED_SUBMIT_CODES:
            logger.error(f"Pool '{pool.name}' creation rejected with HTTP {response.status_code}")
            raise RemoteSubmitError(
                f"Failed to create pool: HTTP {response.status_code}",
                details={"pool": pool.name, "host": host, "http_status": response.status_code},
            )

        return self._decode(response, CephAsyncRequest, "async request response")

    def get_request_status(self, host: str, request_id: str) -> CephRequestStatus:
        """Read the state of an asynchronous request.

        Raises:
            RemotePollError: On transport failure or a non-200 status
            RemoteDecodeError: If the response is not a status descriptor
        """
        try:
            response = self.request("GetRequestStatus", host, request_fsid=request_id)
        except requests.RequestException as e:
            logger.error(f"Error syncing status of request {request_id}: {e}")
            raise RemotePollError(request_id, details={"error": str(e)}) from e

        if response.status_code != 200:
            raise RemotePollError(request_id, details={"http_status": response.status_code})

        return self._decode(response, CephRequestStatus, "request status response")

    def wait_for_request(
        self,
        host: str,
        request_id: str,
        policy: Union[PollPolicy, None] = None,
    ) -> CephRequestStatus:
        """Poll a request until it is complete.

        Each attempt sleeps ``policy.interval`` first, then reads the status.

        Raises:
            PollTimedOut: If the policy's deadline or attempt cap is reached
            RemoteRequestFailed: If the request completed with an error
            RemotePollError: On transport failure
            RemoteDecodeError: If a status response is malformed
        """
        policy = policy or PollPolicy()
        started = self._clock()
        attempts = 0

        while True:
            self._sleep(policy.interval)
            attempts += 1
            status = self.get_request_status(host, request_id)

            if status.is_complete:
                if status.error:
                    raise RemoteRequestFailed(request_id, status.error_message or "unknown error")
                logger.info(f"Request {request_id} complete after {attempts} polls")
                return status

            logger.debug(f"Request {request_id} is {status.state} (poll {attempts})")
            elapsed = self._clock() - started
            if policy.max_attempts is not None and attempts >= policy.max_attempts:
                raise PollTimedOut(request_id, attempts, elapsed)
            if policy.timeout is not None and elapsed >= policy.timeout:
                raise PollTimedOut(request_id, attempts, elapsed)

    def create_pool(
        self,
        host: str,
        cluster_id: str,
        pool: CephPoolRequest,
        policy: Union[PollPolicy, None] = None,
    ) -> CephRequestStatus:
        """Create a pool and wait until the cluster reports it complete."""
        async_request = self.submit_create_pool(host, cluster_id, pool)
        logger.info(f"Pool '{pool.name}' accepted as request {async_request.request_id}")
        return self.wait_for_request(host, async_request.request_id, policy)

"""Control API route table."""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping

_TOKEN_RE = re.compile(r"\{([a-zA-Z0-9_-]+)\}")


@dataclass(frozen=True)
class Route:
    """An operation's HTTP method, path template and API version."""

    method: str
    pattern: str
    version: int

    def render(self, **tokens: str) -> str:
        """Substitute ``{token}`` placeholders in the pattern.

        Hyphenated placeholders are filled from the underscore spelling, so
        ``{cluster-fsid}`` takes ``cluster_fsid=...``.

        Raises:
            ValueError: If a placeholder has no value
        """

        def substitute(match: "re.Match[str]") -> str:
            key = match.group(1).replace("-", "_")
            if key not in tokens:
                raise ValueError(f"Missing value for '{match.group(1)}' in route '{self.pattern}'")
            return str(tokens[key])

        return _TOKEN_RE.sub(substitute, self.pattern)


class RouteTable:
    """Read-only mapping of operation names to routes."""

    def __init__(self, routes: Mapping[str, Route]) -> None:
        self._routes = MappingProxyType(dict(routes))

    def __getitem__(self, name: str) -> Route:
        try:
            return self._routes[name]
        except KeyError:
            raise KeyError(f"Unknown control API operation: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def to_dict(self) -> Dict[str, Route]:
        return dict(self._routes)


DEFAULT_ROUTES = RouteTable(
    {
        "CreatePool": Route(method="POST", pattern="cluster/{cluster-fsid}/pool", version=2),
        "GetRequestStatus": Route(method="GET", pattern="request/{request-fsid}", version=2),
    }
)

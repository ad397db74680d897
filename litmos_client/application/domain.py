"""
This module defines the core domain models for the client.

These classes represent the technology-agnostic values the request pipeline
operates on, together with the ports (interfaces) that the infrastructure
layer implements.
"""

import dataclasses

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence, Tuple, FrozenSet

from .exceptions import ConfigurationError


GET = "GET"
POST = "POST"
PUT = "PUT"
DELETE = "DELETE"
VALID_METHODS = (GET, POST, PUT, DELETE)

# Methods whose responses are paged with `start` / `limit`
PAGED_METHODS = (GET, POST)

# Shorthand verb sets for endpoint declarations
READ_ONLY = frozenset({GET})
READ_CREATE = frozenset({GET, POST})
READ_UPDATE = frozenset({GET, PUT})
CREATE_ONLY = frozenset({POST})


def is_success(status_code: int) -> bool:
    """Return True for 2xx status codes."""
    return 200 <= status_code <= 299


# --- Domain Models ---

@dataclasses.dataclass(frozen=True)
class ResourceDescriptor:
    """
    Static description of one navigable Litmos endpoint.

    `endpoint_segments` are joined with '/' to build the URL path,
    `response_path` is the key path into a decoded response and
    `request_path` selects the envelope used for write bodies: one key for a
    single-record envelope, two keys for a multi-record envelope, none when
    the endpoint accepts no body.
    """

    endpoint_segments: Tuple[str, ...]
    response_path: Tuple[str, ...] = ()
    request_path: Tuple[str, ...] = ()
    methods: FrozenSet[str] = READ_ONLY

    def __post_init__(self):
        object.__setattr__(
            self, "endpoint_segments", tuple(str(s) for s in self.endpoint_segments)
        )
        object.__setattr__(self, "response_path", tuple(self.response_path))
        object.__setattr__(self, "request_path", tuple(self.request_path))
        object.__setattr__(self, "methods", frozenset(self.methods))

        if len(self.request_path) not in (0, 1, 2):
            raise ConfigurationError(
                f"Request path for '{self.endpoint}' must be empty or have 1 or 2 elements, "
                f"got {list(self.request_path)}"
            )

    @property
    def endpoint(self) -> str:
        return "/".join(self.endpoint_segments)

    @property
    def is_collection(self) -> bool:
        """A two-key response path names a container and its repeated item."""
        return len(self.response_path) > 1

    def child(
        self,
        segment: Any,
        response_path: Sequence[str],
        request_path: Sequence[str] = (),
        methods: FrozenSet[str] = READ_ONLY,
    ) -> "ResourceDescriptor":
        """Derive the descriptor of a nested endpoint."""
        return ResourceDescriptor(
            endpoint_segments=self.endpoint_segments + (str(segment),),
            response_path=tuple(response_path),
            request_path=tuple(request_path),
            methods=methods,
        )


@dataclasses.dataclass(frozen=True)
class RequestSpec:
    """A single outgoing request, before authentication is applied."""

    method: str
    endpoint: str
    params: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    content: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class ApiResponse:
    """The final response of one logical send, real or synthetic."""

    status_code: int
    body: str = ""

    @property
    def ok(self) -> bool:
        return is_success(self.status_code)


@dataclasses.dataclass
class RequestState:
    """Mutable per-client bookkeeping shared by the sender and rate limiter."""

    request_count: int = 0
    last_request_time: Optional[float] = None


# --- Ports (Interfaces) ---

class Codec(ABC):
    """A port for converting between wire text and decoded structures."""

    @abstractmethod
    def encode(self, value: Any) -> str:
        """Serializes a structured value (or JSON text) into wire text."""
        pass

    @abstractmethod
    def decode(
        self,
        body: Any,
        path: Sequence[str] = (),
        clean: bool = True,
        as_list: bool = False,
    ) -> Any:
        """Parses wire text and resolves `path` within it."""
        pass

    @abstractmethod
    def clean(self, entries: Any) -> list:
        """Normalizes raw decoded entries into plain records."""
        pass

    @abstractmethod
    def is_trailing_artifact(self, entry: Any) -> bool:
        """Checks whether an entry is the vendor's empty trailing element."""
        pass


class Sender(ABC):
    """A port for performing one logical HTTP call, retries included."""

    @abstractmethod
    async def send(self, spec: RequestSpec) -> ApiResponse:
        """Sends the request and returns the final response."""
        pass


class RateLimiter(ABC):
    """A port for pacing outgoing requests."""

    @abstractmethod
    async def acquire(self) -> None:
        """Suspends the caller until the next request may be dispatched."""
        pass

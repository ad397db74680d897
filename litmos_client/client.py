"""
The Litmos client, main entry point of the library.

Example:

    async with Litmos(apiKey="...", source="my-app") as litmos:
        users = await litmos.users.get()
        courses = await litmos.users.id(users[0]["Id"]).courses.get()
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

import httpx
from dependency_injector import providers

from .application.domain import ResourceDescriptor, VALID_METHODS
from .application.endpoints import (
    CoursesEndpoint,
    LearningPathsEndpoint,
    ResultsEndpoint,
    TeamsEndpoint,
    UsersEndpoint,
)
from .application.exceptions import ValidationError
from .infrastructure.containers import Container
from .infrastructure.options import ClientOptions


class Litmos:
    """
    Async client for the Litmos REST API.

    Options can be given as a `ClientOptions` instance, a mapping, keyword
    arguments, or a mix of the last two (keywords win). `apiKey` and `source`
    are required.
    """

    def __init__(
        self,
        options: Union[ClientOptions, Mapping[str, Any], None] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        **kwargs: Any,
    ):
        """
        Initializes the client and wires its request pipeline.

        Args:
            options: Client options.
            http_client: An existing httpx.AsyncClient to send requests with.
                         The caller stays responsible for closing it.
            **kwargs: Individual options, e.g. `apiKey=...`.

        Raises:
            ConfigurationError: If the options are missing or invalid.
        """

        self.logger = logging.getLogger(self.__class__.__name__)

        if isinstance(options, ClientOptions) and not kwargs:
            self.options = options
        elif isinstance(options, ClientOptions):
            self.options = ClientOptions.from_mapping(
                {**options.model_dump(), **kwargs}, use_settings=False
            )
        else:
            self.options = ClientOptions.from_mapping({**(options or {}), **kwargs})

        self._container = Container(options=providers.Object(self.options))
        self._owns_http_client = http_client is None
        if http_client is not None:
            self._container.http_client.override(providers.Object(http_client))

        self._service = self._container.request_service()
        self._state = self._container.state()

        self.users = UsersEndpoint(self._service)
        self.courses = CoursesEndpoint(self._service)
        self.results = ResultsEndpoint(self._service)
        self.teams = TeamsEndpoint(self._service)
        self.learningpaths = LearningPathsEndpoint(self._service)

    @property
    def request_count(self) -> int:
        """
        Total number of logical requests sent. A single call can account for
        several requests when pagination was needed.
        """
        return self._state.request_count

    async def api(
        self,
        endpoint: str,
        method: str,
        body: Any = None,
        path: Sequence[str] = (),
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[Any]:
        """
        Performs an arbitrary request against the Litmos API.

        Args:
            endpoint: The endpoint relative to the base URL, e.g. "users".
            method: GET, POST, PUT or DELETE.
            body: A mapping, a JSON string or an XML string for POST/PUT.
                  Mappings are encoded as given, without envelopes.
            path: Keys leading to the records in the response.
            params: Additional query parameters.

        Returns:
            The cleaned records.
        """

        if not endpoint:
            raise ValidationError("Expected an endpoint for Litmos API request")

        resource = ResourceDescriptor(
            endpoint_segments=tuple(endpoint.strip("/").split("/")),
            response_path=tuple(path),
            methods=frozenset(VALID_METHODS),
        )
        content = None if body is None else self._service.codec.encode(body)

        return await self._service.send_raw(resource, method, content, params)

    async def aclose(self):
        """Closes the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._container.http_client().aclose()

    async def __aenter__(self) -> "Litmos":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

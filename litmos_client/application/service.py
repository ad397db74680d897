"""
The core request service, containing the pagination logic.

This module defines `RequestService`, the generic dispatcher that every
endpoint declaration goes through. It turns a resource descriptor plus a verb
into one or more paced HTTP calls, follows Litmos' offset pagination and
returns the decoded, cleaned records.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .body_builder import build_body
from .domain import *
from .exceptions import APIError, ConfigurationError, RequestTimeoutError, ValidationError


class RequestService:
    """Executes verbs against resource descriptors."""

    def __init__(
        self,
        sender: Sender,
        rate_limiter: RateLimiter,
        codec: Codec,
        per_page: int,
    ):
        """Initializes the service with its ports and the page size."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.sender = sender
        self.rate_limiter = rate_limiter
        self.codec = codec
        self.per_page = per_page

    async def send_request(
        self,
        resource: ResourceDescriptor,
        method: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[Any]:
        """
        Performs a verb on a declared resource and returns all records.

        Args:
            resource: The descriptor of the endpoint to call.
            method: One of GET, POST, PUT or DELETE.
            body: Raw record data for POST or PUT, wrapped according to the
                  descriptor's request path.
            params: Additional query parameters. An explicit `limit` turns
                    off automatic pagination for this call.

        Returns:
            The cleaned records of every fetched page, in order.

        Raises:
            ValidationError: If the method is invalid or not declared for the
                             resource, or a write is missing its body.
            ConfigurationError: If a body is given for a resource without a
                                request path.
            APIError: If the API answers with a non-2xx status.
            TransportError: If the request cannot be delivered.
        """

        method = self._validate_method(method, body)
        if method not in resource.methods:
            raise ValidationError(
                f"Method {method} is not supported by endpoint '{resource.endpoint}'"
            )

        content = None
        if body is not None:
            if not resource.request_path:
                raise ConfigurationError(
                    f"Endpoint '{resource.endpoint}' does not accept a body"
                )
            content = self.codec.encode(build_body(body, resource.request_path))

        # Enveloped bodies create or update records and are sent exactly once
        return await self.fetch_all(
            resource, method, content, params, paginate=content is None
        )

    async def send_raw(
        self,
        resource: ResourceDescriptor,
        method: str,
        content: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[Any]:
        """Performs a verb with an already encoded body, skipping envelopes."""
        method = self._validate_method(method, content)
        return await self.fetch_all(resource, method, content, params)

    def _validate_method(self, method: str, body: Any) -> str:
        if not method:
            raise ValidationError("Expected a method for Litmos API request")
        method = method.upper()
        if method not in VALID_METHODS:
            raise ValidationError(f"Invalid method for Litmos API request: {method}")
        if method in (POST, PUT) and not body:
            raise ValidationError(
                "Expected a body for Litmos API request with methods POST or PUT"
            )
        return method

    async def fetch_all(
        self,
        resource: ResourceDescriptor,
        method: str,
        content: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
        paginate: bool = True,
    ) -> List[Any]:
        """
        Requests pages until a short page arrives, then cleans the result.

        Only responses whose records decode to a list can continue onto a
        next page. A single record is always a complete answer.

        Cleaning happens once, over the concatenation of every raw page, so
        that the trailing artifact Litmos appends when the total is an exact
        multiple of the page size can still be recognized.
        """

        params = {k: v for k, v in (params or {}).items() if v is not None}
        using_custom_limit = params.get("limit") is not None
        paged = paginate and method in PAGED_METHODS

        page_params: Dict[str, Any] = dict(params)
        if paged:
            page_params = {"start": 0, "limit": self.per_page, **params}

        entries: List[Any] = []
        while True:
            raw = await self._request_page(resource, method, content, page_params)
            if isinstance(raw, list):
                page = raw
            else:
                page = [] if raw is None else [raw]
            entries.extend(page)

            if using_custom_limit or not paged or not isinstance(raw, list):
                break

            records = [e for e in page if not self.codec.is_trailing_artifact(e)]
            if len(records) < int(page_params["limit"]):
                break

            # Litmos may over-return, so advance by what actually arrived
            page_params = {**page_params, "start": int(page_params["start"]) + len(page)}
            self.logger.debug(
                f"Full page from '{resource.endpoint}', "
                f"requesting next page at {page_params['start']}..."
            )

        if entries and self.codec.is_trailing_artifact(entries[-1]):
            entries.pop()

        return self.codec.clean(entries)

    async def _request_page(
        self,
        resource: ResourceDescriptor,
        method: str,
        content: Optional[str],
        params: Mapping[str, Any],
    ) -> Any:
        """Sends one paced request and returns its uncleaned payload."""

        await self.rate_limiter.acquire()
        response = await self.sender.send(
            RequestSpec(
                method=method,
                endpoint=resource.endpoint,
                params=dict(params),
                content=content,
            )
        )

        if not response.ok:
            error_cls = RequestTimeoutError if response.status_code == 408 else APIError
            raise error_cls(
                f"Invalid response code from Litmos API: {response.status_code}",
                status_code=response.status_code,
                body=response.body,
            )

        if not response.body or not response.body.strip():
            return None

        return self.codec.decode(
            response.body,
            resource.response_path,
            clean=False,
            as_list=resource.is_collection,
        )

"""HTTP implementation of the Sender port."""

import json
import logging
import time
from typing import Any, Dict

import httpx

from ..application.domain import ApiResponse, RequestSpec, RequestState, Sender
from ..application.exceptions import TransportError

from .decorators import retry_on_unsuccessful_status
from .options import ClientOptions

TIMEOUT_STATUS = 408


class HttpSender(Sender):
    """Sends requests to the Litmos API, retrying unsuccessful responses."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        options: ClientOptions,
        state: RequestState,
    ):
        """Initializes the sender adapter."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.client = client
        self.api_key = options.api_key
        self.base_url = options.base_url
        self.source = options.source
        self.timeout = options.timeout_seconds
        self.retry_count = options.retry_count
        self.verbose = options.verbose
        self.state = state

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/xml", "apikey": self.api_key}

    def _params(self, spec: RequestSpec) -> Dict[str, Any]:
        return {"source": self.source, **spec.params}

    def _log_request(self, spec: RequestSpec, url: str, params: Dict[str, Any]):
        """Log the outgoing request with the API key obscured."""
        if not self.verbose:
            return
        headers = {**self._headers(), "apikey": "SECRET"}
        self.logger.info(
            f"Sending {spec.method} {url} params={params} headers={headers}"
        )

    async def _execute_attempt(self, spec: RequestSpec) -> ApiResponse:
        """
        Performs one HTTP call.

        Timeouts become a synthetic 408 response so they take part in the
        status-based retry policy.

        Raises:
            TransportError: For any non-timeout network failure.
        """

        url = self.base_url + spec.endpoint
        params = self._params(spec)
        self._log_request(spec, url, params)

        started = time.monotonic()
        try:
            response = await self.client.request(
                spec.method,
                url,
                params=params,
                content=spec.content,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            waited_ms = int((time.monotonic() - started) * 1000)
            self.logger.warning(
                f"{spec.method} {url} timed out after {waited_ms}ms"
            )
            body = {
                "status": "timeout",
                "timeWaited": waited_ms,
                "timeoutMs": int(self.timeout * 1000),
            }
            return ApiResponse(status_code=TIMEOUT_STATUS, body=json.dumps(body))
        except httpx.RequestError as e:
            raise TransportError(
                f"Request to {url} failed: {type(e).__name__}: {e}"
            ) from e

        return ApiResponse(status_code=response.status_code, body=response.text)

    async def send(self, spec: RequestSpec) -> ApiResponse:
        """
        Sends a request, retrying non-2xx responses.

        This public method fulfills the Sender port contract. The request
        counter is incremented once per call, after the final attempt.

        Returns:
            The final response, which may still be unsuccessful.

        Raises:
            TransportError: If the request could not be delivered.
        """

        attempt = retry_on_unsuccessful_status(self.retry_count, self.verbose)(
            self._execute_attempt
        )
        response = await attempt(spec)
        self.state.request_count += 1

        return response

"""
Dependency Injection container for the Litmos client.

This container uses the `dependency-injector` library to wire the request
pipeline (codec, rate limiter, sender and request service) around one set of
validated client options.
"""

from dependency_injector import containers, providers
import httpx

from ..application.domain import *
from ..application.service import RequestService

from .http_sender import HttpSender
from .options import ClientOptions
from .rate_limiter import AsyncRateLimiter
from .xml_codec import XmlCodec


class Container(containers.DeclarativeContainer):
    """DI container for wiring the client components."""

    options = providers.Dependency(instance_of=ClientOptions)

    http_client = providers.Singleton(httpx.AsyncClient)

    state = providers.Singleton(RequestState)

    codec: providers.Singleton[Codec] = providers.Singleton(XmlCodec)

    rate_limiter: providers.Singleton[RateLimiter] = providers.Singleton(
        AsyncRateLimiter,
        state=state,
        rate_per_minute=options.provided.rate_limit_per_minute,
        verbose=options.provided.verbose,
    )

    sender: providers.Singleton[Sender] = providers.Singleton(
        HttpSender,
        client=http_client,
        options=options,
        state=state,
    )

    request_service = providers.Singleton(
        RequestService,
        sender=sender,
        rate_limiter=rate_limiter,
        codec=codec,
        per_page=options.provided.per_page,
    )

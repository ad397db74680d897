"""
Pydantic model for validating the options a Litmos client is built with.

The model is the strict contract for client configuration: required
credentials, numeric bounds and defaults are checked once at construction,
before any request can be made.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..application.exceptions import ConfigurationError
from ..settings import settings

logger = logging.getLogger(__name__)


class ClientOptions(BaseModel):
    """
    Validated configuration for one client instance.

    Fields accept both their snake_case names and the camelCase aliases used
    by the Litmos documentation (`apiKey`, `perPage`, ...). Unset fields fall
    back to the `[client]` table of the Dynaconf settings.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    api_key: str = Field(alias="apiKey", min_length=1)
    source: str = Field(min_length=1)
    base_url: str = Field(default="https://api.litmos.com/v1.svc/", alias="baseUrl")
    per_page: int = Field(default=1000, alias="perPage", gt=0)
    timeout_ms: int = Field(default=10000, alias="timeoutMs", gt=0)
    retry_count: int = Field(default=2, alias="retryCount", ge=0)
    rate_limit_per_minute: Optional[int] = Field(
        default=None, alias="rateLimitPerMinute", gt=0
    )
    verbose: bool = False

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except pydantic.ValidationError as e:
            raise ConfigurationError(f"Invalid client options: {e}") from e

    @model_validator(mode="before")
    @classmethod
    def _warn_unknown_keys(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            known = cls._field_names()
            for key in data:
                if key not in known:
                    logger.warning(
                        f'Unknown option passed to ClientOptions: "{key}". Ignoring'
                    )
        return data

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def _field_names(cls) -> Dict[str, str]:
        """Maps every accepted key (name or alias) to its field name."""
        names = {}
        for name, field in cls.model_fields.items():
            names[name] = name
            if field.alias:
                names[field.alias] = name
        return names

    @classmethod
    def from_mapping(
        cls, values: Mapping[str, Any], use_settings: bool = True
    ) -> "ClientOptions":
        """
        Builds options from user supplied values, warning on unknown keys.

        Args:
            values: Options keyed by field name or camelCase alias.
            use_settings: Fill unset fields from the Dynaconf settings.

        Raises:
            ConfigurationError: If a required option is missing or a value
                                is out of range.
        """

        field_names = cls._field_names()
        data: Dict[str, Any] = {}

        if use_settings:
            # Settings keys may arrive in any case, e.g. API_KEY or apiKey
            by_lower = {key.lower(): name for key, name in field_names.items()}
            defaults = settings.get("client", {}) or {}
            for key, value in dict(defaults).items():
                name = by_lower.get(str(key).lower())
                if name is not None and value is not None:
                    data[name] = value

        # Unknown keys pass through so validation warns about them
        for key, value in values.items():
            data[field_names.get(key, str(key))] = value

        for required in ("api_key", "source"):
            if not data.get(required):
                alias = cls.model_fields[required].alias or required
                raise ConfigurationError(
                    f'No "{alias}" option provided to ClientOptions'
                )

        return cls(**data)

"""Tests for client option validation."""

import logging

import pytest

from litmos_client import ClientOptions, ConfigurationError
from litmos_client.infrastructure import options as options_module

REQUIRED = {"apiKey": "key", "source": "src"}


class TestRequiredOptions:

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError, match="apiKey"):
            ClientOptions.from_mapping({"source": "src"}, use_settings=False)

    def test_missing_source(self):
        with pytest.raises(ConfigurationError, match="source"):
            ClientOptions.from_mapping({"apiKey": "key"}, use_settings=False)

    def test_empty_api_key(self):
        with pytest.raises(ConfigurationError):
            ClientOptions.from_mapping(
                {"apiKey": "", "source": "src"}, use_settings=False
            )


class TestDefaults:

    def test_model_defaults(self):
        options = ClientOptions.from_mapping(REQUIRED, use_settings=False)
        assert options.base_url == "https://api.litmos.com/v1.svc/"
        assert options.per_page == 1000
        assert options.timeout_ms == 10000
        assert options.retry_count == 2
        assert options.rate_limit_per_minute is None
        assert options.verbose is False

    def test_packaged_settings_defaults(self):
        options = ClientOptions.from_mapping(REQUIRED)
        assert options.per_page == 1000
        assert options.retry_count == 2

    def test_explicit_values_win_over_settings(self):
        options = ClientOptions.from_mapping({**REQUIRED, "perPage": 25})
        assert options.per_page == 25


class TestAliases:

    def test_camel_case(self):
        options = ClientOptions.from_mapping(
            {
                **REQUIRED,
                "baseUrl": "https://example.test/",
                "timeoutMs": 500,
                "retryCount": 0,
                "rateLimitPerMinute": 80,
                "verbose": True,
            },
            use_settings=False,
        )
        assert options.api_key == "key"
        assert options.base_url == "https://example.test/"
        assert options.timeout_seconds == 0.5
        assert options.retry_count == 0
        assert options.rate_limit_per_minute == 80
        assert options.verbose is True

    def test_snake_case(self):
        options = ClientOptions.from_mapping(
            {"api_key": "key", "source": "src", "per_page": 10},
            use_settings=False,
        )
        assert options.per_page == 10


class TestInvalidValues:

    @pytest.mark.parametrize(
        "overrides",
        [{"perPage": 0}, {"retryCount": -1}, {"rateLimitPerMinute": 0}],
    )
    def test_out_of_range(self, overrides):
        with pytest.raises(ConfigurationError):
            ClientOptions.from_mapping({**REQUIRED, **overrides}, use_settings=False)


def test_unknown_option_is_ignored_with_warning(caplog):
    with caplog.at_level(logging.WARNING):
        options = ClientOptions.from_mapping(
            {**REQUIRED, "colour": "blue"}, use_settings=False
        )
    assert not hasattr(options, "colour")
    assert 'Unknown option passed to ClientOptions: "colour"' in caplog.text


def test_options_are_immutable():
    options = ClientOptions.from_mapping(REQUIRED, use_settings=False)
    with pytest.raises(Exception):
        options.per_page = 5


class TestDirectConstruction:

    def test_unknown_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            options = ClientOptions(apiKey="key", source="src", colour="blue")
        assert options.api_key == "key"
        assert 'Unknown option passed to ClientOptions: "colour"' in caplog.text

    def test_missing_source_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            ClientOptions(apiKey="key")

    def test_out_of_range_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            ClientOptions(apiKey="key", source="src", perPage=0)


@pytest.mark.parametrize(
    "client_table",
    [
        {"perPage": 7, "retryCount": 1},
        {"PER_PAGE": 7, "RETRY_COUNT": 1},
        {"per_page": 7, "retry_count": 1},
    ],
)
def test_settings_keys_match_in_any_case(monkeypatch, client_table):
    monkeypatch.setattr(options_module, "settings", {"client": client_table})

    options = ClientOptions.from_mapping(REQUIRED)

    assert options.per_page == 7
    assert options.retry_count == 1

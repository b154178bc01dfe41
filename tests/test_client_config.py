import pytest

from barco_projector import (
    BarcoProjectorClient,
    BarcoProjectorClientConfig,
    BarcoProjectorError,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    HEARTBEAT_INTERVAL,
    HEARTBEAT_COMMAND,
    RECONNECT_DELAY,
)


def test_defaults():
    config = BarcoProjectorClientConfig()
    assert config.default_host is None
    assert config.default_port == DEFAULT_PORT
    assert config.timeout_secs == DEFAULT_TIMEOUT
    assert config.heartbeat_interval_secs == HEARTBEAT_INTERVAL == 30.0
    assert config.heartbeat_command == HEARTBEAT_COMMAND == "NOOP"
    assert config.reconnect_delay_secs == RECONNECT_DELAY == 1.0
    assert config.reconnect_policy == "fixed"
    assert config.auto_reconnect is True
    assert config.response_terminator is None
    assert config.encoding == "utf-8"


def test_environment_is_ignored(monkeypatch):
    monkeypatch.setenv("BARCO_PROJECTOR_HOST", "10.1.1.1")
    monkeypatch.setenv("BARCO_PROJECTOR_PORT", "abc")
    config = BarcoProjectorClientConfig()
    assert config.default_host is None
    assert config.default_port == DEFAULT_PORT


def test_client_port_defaults_to_control_port(monkeypatch):
    monkeypatch.setenv("BARCO_PROJECTOR_PORT", "9999")
    client = BarcoProjectorClient("10.0.0.5")
    assert client.host == "10.0.0.5"
    assert client.port == 3023


def test_explicit_values_override_base_config():
    base = BarcoProjectorClientConfig("10.0.0.5", heartbeat_interval_secs=5.0, timeout_secs=None)
    config = BarcoProjectorClientConfig(default_port=4000, reconnect_delay_secs=0.5, base_config=base)
    assert config.default_host == "10.0.0.5"
    assert config.default_port == 4000
    assert config.heartbeat_interval_secs == 5.0
    assert config.timeout_secs is None
    assert config.reconnect_delay_secs == 0.5
    # base is unchanged
    assert base.default_port == DEFAULT_PORT
    assert base.reconnect_delay_secs == RECONNECT_DELAY


def test_empty_terminator_means_unframed():
    config = BarcoProjectorClientConfig(response_terminator=b"")
    assert config.response_terminator is None


@pytest.mark.parametrize("kwargs", [
    dict(heartbeat_interval_secs=0),
    dict(reconnect_delay_secs=-1),
    dict(reconnect_policy="sometimes"),
    dict(reconnect_backoff_multiplier=0.5),
])
def test_invalid_values(kwargs):
    with pytest.raises(BarcoProjectorError):
        BarcoProjectorClientConfig(**kwargs)


def test_jsonable_round_trip():
    config = BarcoProjectorClientConfig(
        "10.0.0.5",
        reconnect_policy="exponential",
        response_terminator=b"\r",
        timeout_secs=None,
    )
    jsonable = config.to_jsonable()
    assert jsonable["response_terminator"] == "\r"
    assert jsonable["reconnect_policy"] == "exponential"

    restored = BarcoProjectorClientConfig.from_jsonable(jsonable)
    assert restored.default_host == "10.0.0.5"
    assert restored.response_terminator == b"\r"
    assert restored.reconnect_policy == "exponential"
    assert restored.timeout_secs is None


def test_from_jsonable_partial():
    config = BarcoProjectorClientConfig.from_jsonable({"default_port": 4000})
    assert config.default_port == 4000
    assert config.timeout_secs == DEFAULT_TIMEOUT

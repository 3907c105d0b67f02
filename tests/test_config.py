import logging
from pathlib import Path

import pytest

from config import (
    DevelopmentConfig,
    Environment,
    TestingConfig,
    check_host,
    check_num_threads,
    load_settings,
)
from exceptions import InvalidConfigError


def _warnings(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.levelno == logging.WARNING]


@pytest.mark.parametrize("value", [0, -1, "abc", "", None, True, 2.5, "4.5"])
def test_invalid_thread_counts_are_rejected(value) -> None:
    with pytest.raises(InvalidConfigError) as excinfo:
        check_num_threads(value)
    assert excinfo.value.code == "NUM_THREADS_INCORRECT"


def test_high_thread_count_warns_but_succeeds(caplog: pytest.LogCaptureFixture) -> None:
    assert check_num_threads(300) == 300
    warnings = _warnings(caplog)
    assert len(warnings) == 1
    assert "unusually high" in warnings[0].getMessage()


def test_normal_thread_count_does_not_warn(caplog: pytest.LogCaptureFixture) -> None:
    assert check_num_threads("4") == 4
    assert _warnings(caplog) == []


def test_all_interfaces_host_warns(caplog: pytest.LogCaptureFixture) -> None:
    check_host("0.0.0.0")
    check_host("127.0.0.1")
    warnings = _warnings(caplog)
    assert len(warnings) == 1
    assert "all interfaces" in warnings[0].getMessage()


def test_environment_parse_defaults_to_production() -> None:
    assert Environment.parse("development") is Environment.development
    assert Environment.parse("DEVELOPMENT") is Environment.development
    assert Environment.parse("production") is Environment.production
    assert Environment.parse("staging") is Environment.production
    assert Environment.parse(None) is Environment.production


def test_load_settings_merges_overrides(tmp_path: Path) -> None:
    settings = load_settings(
        {"data_dir": str(tmp_path / "x" / ".." / "data"), "num_threads": "8", "port": "8080", "ssl": "no"},
        config_class=TestingConfig,
    )
    assert settings.data_dir == (tmp_path / "data").resolve()
    assert settings.data_dir.is_absolute()
    assert settings.num_threads == 8
    assert settings.port == 8080
    assert settings.ssl is False
    assert settings.open_browser is False
    assert settings.environment is Environment.production


def test_none_overrides_keep_defaults(tmp_path: Path) -> None:
    settings = load_settings(
        {"data_dir": str(tmp_path), "port": None, "host": None}, config_class=DevelopmentConfig
    )
    assert settings.environment is Environment.development
    assert settings.host == DevelopmentConfig.HOST
    assert settings.port == int(DevelopmentConfig.PORT)


def test_data_dir_expands_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = load_settings({"data_dir": "~/.eye2gene"}, config_class=TestingConfig)
    assert settings.data_dir == (tmp_path / ".eye2gene").resolve()


def test_invalid_thread_count_in_settings(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigError):
        load_settings({"data_dir": str(tmp_path), "num_threads": 0}, config_class=TestingConfig)


@pytest.mark.parametrize("port", ["http", 0, 70000])
def test_invalid_port(tmp_path: Path, port) -> None:
    with pytest.raises(InvalidConfigError) as excinfo:
        load_settings({"data_dir": str(tmp_path), "port": port}, config_class=TestingConfig)
    assert excinfo.value.code == "PORT_INCORRECT"


@pytest.mark.parametrize(
    "files",
    [
        {},
        {"ssl_certfile": "cert.pem"},
        {"ssl_keyfile": "key.pem"},
        {"ssl_certfile": "", "ssl_keyfile": ""},
    ],
)
def test_ssl_needs_both_cert_and_key(tmp_path: Path, files: dict) -> None:
    with pytest.raises(InvalidConfigError) as excinfo:
        load_settings(
            {"data_dir": str(tmp_path), "ssl": True, "host": "127.0.0.1", **files},
            config_class=TestingConfig,
        )
    assert excinfo.value.code == "SSL_CONFIG_INCORRECT"


def test_ssl_with_cert_and_key(tmp_path: Path) -> None:
    settings = load_settings(
        {"data_dir": str(tmp_path), "ssl": "true", "ssl_certfile": "cert.pem", "ssl_keyfile": "key.pem"},
        config_class=TestingConfig,
    )
    assert settings.ssl is True
    assert (settings.ssl_certfile, settings.ssl_keyfile) == ("cert.pem", "key.pem")


@pytest.mark.parametrize("minutes", ["soon", "-5", 1.5])
def test_invalid_cleanup_age_is_rejected(tmp_path: Path, minutes) -> None:
    with pytest.raises(InvalidConfigError) as excinfo:
        load_settings(
            {"data_dir": str(tmp_path), "cleanup_tmp_on_start": True, "cleanup_max_age_minutes": minutes},
            config_class=TestingConfig,
        )
    assert excinfo.value.code == "CLEANUP_MAX_AGE_INCORRECT"


def test_cleanup_age_is_coerced(tmp_path: Path) -> None:
    settings = load_settings(
        {"data_dir": str(tmp_path), "cleanup_max_age_minutes": " 30 "}, config_class=TestingConfig
    )
    assert settings.cleanup_max_age_minutes == 30


def test_unknown_setting_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigError) as excinfo:
        load_settings({"data_dir": str(tmp_path), "threads": 4}, config_class=TestingConfig)
    assert excinfo.value.code == "UNKNOWN_SETTING"

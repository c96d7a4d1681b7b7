"""Tests for configuration loading."""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from prom2json.config import Config, load_config
from prom2json.errors import ConfigError

REPO_ROOT = Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    monkeypatch.delenv("PROM2JSON_URL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


def test_default_config_file_loads():
    config = load_config(str(REPO_ROOT / "configs" / "default.yaml"))

    assert isinstance(config, Config)
    assert config.global_.log_level == "INFO"
    assert config.fetch.timeout_s == 10
    assert config.output.effective_indent() == 2
    assert config.api.port == 8082


def test_defaults_without_file():
    config = load_config()

    assert config.fetch.url is None
    assert config.output.effective_indent() is None
    assert config.api.self_metrics_prefix == "prom2json_"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("global:\n  log_level: INFO\n")
    monkeypatch.setenv("PROM2JSON_URL", "http://localhost:9090/metrics")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = load_config(str(path))

    assert config.fetch.url == "http://localhost:9090/metrics"
    assert config.global_.log_level == "DEBUG"


@pytest.mark.parametrize("content", [
    "fetch:\n  url: ftp://example.com/metrics\n",
    "global:\n  log_level: LOUD\n",
    "output:\n  indent: wide\n",
    "- just\n- a list\n",
])
def test_invalid_config(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError):
        load_config(str(path))


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(str(path)) == Config()

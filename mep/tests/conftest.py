"""
Shared test fixtures for MEP.

Provides the CLI runner and an isolated config file for tests that
exercise config.yaml loading.
"""

import pytest

from mep.core import config as config_module


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def temp_config(tmp_path, monkeypatch):
    """
    Point the config loader at a throwaway config.yaml.

    Returns a writer: call it with YAML text to replace the file contents.
    The config cache is cleared before and after the test.
    """
    path = tmp_path / "config.yaml"
    monkeypatch.setattr(config_module, "CONFIG_PATH", path)
    monkeypatch.setattr(config_module, "_config_cache", None)

    def _write(text: str):
        path.write_text(text, encoding="utf-8")
        config_module._config_cache = None
        return path

    return _write

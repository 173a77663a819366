"""Shared fixtures for CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from dspflow import config as config_mod
from dspflow.cli import run as run_mod
from dspflow.config import ClientConfig
from tests.conftest import FakeComputeClient


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep the user's ~/.config and environment out of CLI tests."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_mod, "_CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_mod, "_CONFIG_FILE", config_dir / "config.yaml")
    monkeypatch.delenv("DSPFLOW_API_URL", raising=False)


@pytest.fixture
def cli_client(monkeypatch: pytest.MonkeyPatch) -> FakeComputeClient:
    """Route `dspflow run` to an in-memory client.

    The configs the command built are recorded on ``client.configs``.
    """
    client = FakeComputeClient()
    client.configs = []

    def make_client(config: ClientConfig) -> FakeComputeClient:
        client.configs.append(config)
        return client

    monkeypatch.setattr(run_mod, "_make_client", make_client)
    return client

"""Pytest configuration and fixtures for tablevault tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from tablevault.application import VaultStore
from tablevault.infrastructure.config import CodecConfig, Config, StorageConfig
from tablevault.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration rooted in a temporary directory."""
    return Config(
        storage=StorageConfig(
            default_path=temp_dir / "database.ht",
            fsync=False,  # Faster for tests
        ),
        codec=CodecConfig(key_size=32, fail_open=True),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def store_path(temp_dir: Path) -> Path:
    return temp_dir / "store.ht"


@pytest.fixture
def store(store_path: Path, test_config: Config, metrics_registry: MetricsRegistry) -> VaultStore:
    """A store on a fresh file with password 'password'."""
    return VaultStore(
        store_path, "password", config=test_config, metrics=metrics_registry
    )


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")

"""Shared pytest helpers and fixtures for the mackerel-otel test suite.

write_catalog(path, sections)  — write a system_metrics.yml-format file
catalog_file                   — small two-platform catalog in tmp_path
fresh_catalog                  — clears the bundled-catalog cache around a test
"""

from pathlib import Path

import pytest
import yaml

from mackerel_otel import catalog


def write_catalog(path: Path, sections: dict[str, list[str]]) -> Path:
    """Write *sections* (platform → patterns) as a catalog file at *path*."""
    path.write_text(yaml.safe_dump({"system_metrics": sections}), encoding="utf-8")
    return path


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """A catalog with one shared pattern, one duplicate and one per-platform entry."""
    return write_catalog(
        tmp_path / "system_metrics.yml",
        {
            "linux": ["loadavg1", "disk.*.reads.delta", "memory.used", "memory.used"],
            "windows": ["processor_queue_length", "disk.*.reads.delta"],
        },
    )


@pytest.fixture
def fresh_catalog(monkeypatch):
    """Ensure the bundled catalog is reloaded from disk for this test."""
    monkeypatch.setattr(catalog, "_catalog", None)

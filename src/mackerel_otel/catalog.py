"""System metric catalog: patterns mackerel-agent reports on its own.

``get_catalog()`` loads the bundled ``data/system_metrics.yml`` once and
returns a read-only ``SystemMetricCatalog``.  ``is_system_metric(name)``
tells an exporter whether *name* would collide with a host metric Mackerel
already collects, as opposed to a custom metric it must define a graph for.

Schema
------
The YAML file has a single top-level key, ``system_metrics``, mapping a
platform name to a list of metric patterns::

    system_metrics:
      linux:
        - loadavg1
        - disk.*.reads.delta
      windows:
        - processor_queue_length

The same pattern may be listed under several platforms, or more than once
under one; the loader keeps one entry per pattern, in first-seen order.
"""

from __future__ import annotations

from dataclasses import dataclass
import threading
from pathlib import Path

import yaml

from mackerel_otel.logging import get_logger
from mackerel_otel.names import MetricName, normalize_metric_name

_CATALOG_FILE = Path(__file__).parent / "data" / "system_metrics.yml"

_log = get_logger(__name__)

# Built once by get_catalog(), never mutated afterwards.
_catalog: SystemMetricCatalog | None = None
_catalog_lock = threading.Lock()


@dataclass(frozen=True)
class CatalogEntry:
    """One system metric pattern and the platforms that report it."""

    pattern: MetricName
    platforms: frozenset[str]


@dataclass(frozen=True)
class SystemMetricCatalog:
    """Immutable set of system metric patterns.

    Membership is an existential test: a name is a system metric if any
    entry's pattern matches it.
    """

    entries: tuple[CatalogEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def platforms(self) -> list[str]:
        return sorted({p for e in self.entries for p in e.platforms})

    def patterns(self, platform: str | None = None) -> list[MetricName]:
        """Patterns in file order, optionally limited to one *platform*."""
        return [e.pattern for e in self._select(platform)]

    def find(self, name: str, platform: str | None = None) -> CatalogEntry | None:
        """Return the first entry whose pattern matches normalised *name*."""
        name = normalize_metric_name(name)
        for entry in self._select(platform):
            if entry.pattern.match(name):
                return entry
        return None

    def contains(self, name: str, platform: str | None = None) -> bool:
        return self.find(name, platform) is not None

    def _select(self, platform: str | None) -> tuple[CatalogEntry, ...]:
        if platform is None:
            return self.entries
        return tuple(e for e in self.entries if platform in e.platforms)


def load_catalog(path: Path) -> SystemMetricCatalog:
    """Load and parse a system metric catalog YAML file.

    Args:
        path: Path to a ``system_metrics.yml``-format file.

    Returns:
        A deduplicated ``SystemMetricCatalog``.

    Raises:
        KeyError:   If the file is missing the ``system_metrics`` top-level key.
        TypeError:  If a platform section is not a list of strings.
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    sections = raw["system_metrics"]

    platforms: dict[str, set[str]] = {}
    for platform, patterns in sections.items():
        if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
            raise TypeError(f"platform {platform!r} must list metric patterns as strings")
        for pattern in patterns:
            # dict keeps insertion order, so the first occurrence fixes position.
            platforms.setdefault(pattern, set()).add(platform)

    catalog = SystemMetricCatalog(
        entries=tuple(
            CatalogEntry(pattern=MetricName(p), platforms=frozenset(ps))
            for p, ps in platforms.items()
        )
    )
    _log.debug("system metric catalog loaded", path=str(path), patterns=len(catalog))
    return catalog


def get_catalog() -> SystemMetricCatalog:
    """Return the bundled catalog (loaded on first call, shared thereafter).

    The first load happens under a lock, so concurrent first callers all
    receive the same instance and the file is parsed exactly once.
    """
    global _catalog
    if _catalog is None:
        with _catalog_lock:
            if _catalog is None:
                _catalog = load_catalog(_CATALOG_FILE)
    return _catalog


def is_system_metric(name: str, platform: str | None = None) -> bool:
    """Return whether *name* is a host metric Mackerel collects natively.

    *name* is normalised before matching, so ``"cpu/user.percentage"`` and
    ``"cpu_user.percentage"`` are treated alike.
    """
    return get_catalog().contains(name, platform)

"""mackerel-otel: metric naming bridge from OpenTelemetry to Mackerel.

Maps dotted instrumentation names onto Mackerel's graph-definition scheme:
normalises names into the legal character set, matches and generalises
wildcard patterns (``*`` and ``#``), binds graph names onto metric names,
and tells custom metrics apart from the host metrics mackerel-agent already
collects.

No I/O happens here; submitting the resulting graph definitions is the
exporter's job.
"""

__version__ = "0.1.0"

from mackerel_otel.catalog import is_system_metric
from mackerel_otel.graphdef import GraphDefOptions, NumberKind, Unit, graph_unit, new_graph_def
from mackerel_otel.models.graphdef import GraphDefsMetric, GraphDefsParam
from mackerel_otel.names import (
    MetricName,
    NameMismatchError,
    Wildcard,
    bind_graph_metric_name,
    generalize_metric_name,
    match,
    normalize_metric_name,
)

__all__ = [
    "GraphDefOptions",
    "GraphDefsMetric",
    "GraphDefsParam",
    "MetricName",
    "NameMismatchError",
    "NumberKind",
    "Unit",
    "Wildcard",
    "bind_graph_metric_name",
    "generalize_metric_name",
    "graph_unit",
    "is_system_metric",
    "match",
    "new_graph_def",
    "normalize_metric_name",
]

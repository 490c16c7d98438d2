"""Graph-definition builder: instrument name → validated ``GraphDefsParam``.

``new_graph_def(name, options)`` is the single entry point.  It resolves the
graph name and the metric pattern from *options*, checks the pattern still
matches the instrument name, and returns the Mackerel record with both names
under the ``custom.`` namespace.

Name resolution, over the two optional strings in ``GraphDefOptions``:

    name   metric_name   result
    ----   -----------   ------------------------------------------------
    ""     ""            metric_name = generalize(instrument); name = metric_name
    set    ""            metric_name = bind(name, instrument)
    ""     set           name = metric_name
    set    set           used as given

Names must already be normalised (see ``normalize_metric_name``); the builder
does not rewrite them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from mackerel_otel.logging import get_logger
from mackerel_otel.models.graphdef import GraphDefsMetric, GraphDefsParam, GraphUnitTag
from mackerel_otel.names import (
    MetricName,
    NameMismatchError,
    bind_graph_metric_name,
    generalize_metric_name,
)

# Mackerel requires every custom metric and graph to live under this namespace.
CUSTOM_PREFIX = "custom."

_log = get_logger(__name__)


class Unit(StrEnum):
    """OpenTelemetry unit codes the builder knows how to map."""

    DIMENSIONLESS = "1"
    BYTES = "By"
    MILLISECONDS = "ms"


class NumberKind(StrEnum):
    INT64 = "int64"
    FLOAT64 = "float64"


_UNIT_TAGS: dict[Unit, GraphUnitTag] = {
    Unit.DIMENSIONLESS: "float",
    Unit.BYTES: "bytes",
    Unit.MILLISECONDS: "float",
}


@dataclass(frozen=True)
class GraphDefOptions:
    """Optional overrides for a graph definition.

    ``name`` is the graph (display) name; ``metric_name`` the pattern of the
    one metric it contains.  Empty strings mean "derive it".
    """

    name: str = ""
    metric_name: str = ""
    unit: Unit | str | None = None
    kind: NumberKind | None = None


def graph_unit(unit: Unit | str | None, kind: NumberKind | None = None) -> GraphUnitTag:
    """Map an instrumentation unit onto Mackerel's graph unit tag.

    Empty units count as dimensionless.  Units without a Mackerel
    counterpart fall back to a generic numeric tag chosen by *kind*.
    """
    if not unit:
        unit = Unit.DIMENSIONLESS
    try:
        return _UNIT_TAGS[Unit(unit)]
    except ValueError:
        return "float" if kind is NumberKind.FLOAT64 else "integer"


def resolve_names(name: str, options: GraphDefOptions) -> tuple[str, str]:
    """Return ``(graph_name, metric_name)`` for instrument *name*.

    Raises:
        NameMismatchError: The resolved metric name does not match *name*.
    """
    graph_name, metric_name = options.name, options.metric_name
    if not metric_name and not graph_name:
        metric_name = generalize_metric_name(name)
        graph_name = metric_name
    elif not metric_name:
        metric_name = bind_graph_metric_name(graph_name, name)
    elif not graph_name:
        graph_name = metric_name

    if not MetricName(metric_name).match(name):
        raise NameMismatchError(metric_name, name)
    return graph_name, metric_name


def new_graph_def(name: str, options: GraphDefOptions | None = None) -> GraphDefsParam:
    """Build the graph definition holding the single metric *name*.

    Args:
        name:    Normalised instrument name, e.g. ``"disk.sda.reads.delta"``.
        options: Naming and unit overrides; all fields optional.

    Returns:
        A ``GraphDefsParam`` whose graph and metric names carry the
        ``custom.`` prefix.

    Raises:
        NameMismatchError: The graph name cannot bind onto *name*, or the
                           metric name does not match *name*.
    """
    if options is None:
        options = GraphDefOptions()

    try:
        graph_name, metric_name = resolve_names(name, options)
    except NameMismatchError as exc:
        _log.debug("graph definition rejected", metric=name, pattern=exc.pattern)
        raise

    return GraphDefsParam(
        name=CUSTOM_PREFIX + graph_name,
        unit=graph_unit(options.unit, options.kind),
        metrics=(GraphDefsMetric(name=CUSTOM_PREFIX + metric_name),),
    )

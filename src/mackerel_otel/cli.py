"""CLI root — entry point for all mackerel-otel subcommands.

Entry points:
  mackerel-otel
  python -m mackerel_otel

Command surface:
  mackerel-otel normalize     map names into Mackerel's character set
  mackerel-otel match         test a name against a wildcard pattern
  mackerel-otel generalize    derive the wildcard pattern for a name
  mackerel-otel bind          bind a graph name onto a metric name
  mackerel-otel graphdef      print the graph definition for a metric
  mackerel-otel classify      tell system metrics from custom ones
  mackerel-otel catalog list  print the system metric catalog
  mackerel-otel config show   print resolved configuration
"""

import json

import typer

from mackerel_otel import __version__
from mackerel_otel.config import Platform
from mackerel_otel.logging import get_logger

app = typer.Typer(
    name="mackerel-otel",
    help="Metric naming bridge from OpenTelemetry to Mackerel graph definitions.",
    no_args_is_help=True,
)

_log = get_logger(__name__)


def _load_catalog():
    """Return the catalog selected by settings (bundled unless overridden)."""
    from mackerel_otel.catalog import get_catalog, load_catalog
    from mackerel_otel.config import get_settings

    settings = get_settings()
    if settings.catalog.file is not None:
        return load_catalog(settings.catalog.file)
    return get_catalog()


def _platform_or_default(platform: Platform | None) -> Platform | None:
    from mackerel_otel.config import get_settings

    return platform or get_settings().catalog.platform


# ---------------------------------------------------------------------------
# Global callback — runs before every subcommand
# ---------------------------------------------------------------------------


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mackerel-otel {__version__}")
        raise typer.Exit()


@app.callback()
def _main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Print version and exit.",
    ),
) -> None:
    """Metric naming bridge from OpenTelemetry to Mackerel graph definitions."""
    # --version exits before this body runs.
    from mackerel_otel.logging import configure_logging

    configure_logging()


# ---------------------------------------------------------------------------
# Name algebra
# ---------------------------------------------------------------------------


@app.command("normalize")
def normalize(
    names: list[str] = typer.Argument(..., help="Metric names to normalise."),
) -> None:
    """Replace characters Mackerel rejects with "_", one name per line."""
    from mackerel_otel.names import normalize_metric_name

    for name in names:
        typer.echo(normalize_metric_name(name))


@app.command("match")
def match_cmd(
    pattern: str = typer.Argument(..., help="Pattern, e.g. disk.*.reads.delta"),
    name: str = typer.Argument(..., help="Metric name to test."),
) -> None:
    """Test NAME against PATTERN.

    Exit codes: 0 = match, 1 = no match.
    """
    from mackerel_otel.names import match

    if match(pattern, name):
        typer.echo("match")
        return
    typer.echo("no match")
    raise typer.Exit(1)


@app.command("generalize")
def generalize(
    name: str = typer.Argument(..., help="Metric name to generalise."),
) -> None:
    """Print the one-level wildcard pattern for NAME."""
    from mackerel_otel.names import generalize_metric_name

    typer.echo(generalize_metric_name(name))


@app.command("bind")
def bind(
    prefix: str = typer.Argument(..., help="Graph name, e.g. disk.*"),
    full: str = typer.Argument(..., help="Metric name, e.g. disk.sda.reads.delta"),
) -> None:
    """Bind PREFIX onto the leading segments of FULL and print the result."""
    from mackerel_otel.names import NameMismatchError, bind_graph_metric_name

    try:
        typer.echo(bind_graph_metric_name(prefix, full))
    except NameMismatchError as exc:
        _log.error("bind failed", prefix=prefix, metric=full)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


# ---------------------------------------------------------------------------
# graphdef
# ---------------------------------------------------------------------------


@app.command("graphdef")
def graphdef(
    name: str = typer.Argument(..., help="Normalised instrument name."),
    graph_name: str = typer.Option(
        "",
        "--name",
        "-n",
        help="Graph name; bound onto NAME when --metric-name is not given.",
    ),
    metric_name: str = typer.Option(
        "",
        "--metric-name",
        "-m",
        help="Metric pattern; must match NAME.",
    ),
    unit: str = typer.Option(
        "",
        "--unit",
        "-u",
        help='OpenTelemetry unit code ("1", "By", "ms", …).  Empty = dimensionless.',
    ),
    kind: str = typer.Option(
        "int64",
        "--kind",
        "-k",
        help="Number kind of the instrument: int64 or float64.",
    ),
) -> None:
    """Print the Mackerel graph definition for NAME as JSON.

    Exit codes: 0 = printed, 1 = the names do not match, 2 = bad option.
    """
    from mackerel_otel.graphdef import GraphDefOptions, NumberKind, new_graph_def
    from mackerel_otel.names import NameMismatchError

    try:
        number_kind = NumberKind(kind)
    except ValueError as exc:
        raise typer.BadParameter(
            f"must be one of {[k.value for k in NumberKind]}", param_hint="--kind"
        ) from exc

    options = GraphDefOptions(
        name=graph_name, metric_name=metric_name, unit=unit, kind=number_kind
    )
    try:
        param = new_graph_def(name, options)
    except NameMismatchError as exc:
        _log.error("graph definition rejected", metric=name, pattern=exc.pattern)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    typer.echo(json.dumps(param.to_payload(), indent=2))
    _log.info("graph definition built", metric=name, graph=param.name)


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


@app.command("classify")
def classify(
    names: list[str] = typer.Argument(..., help="Metric names to classify."),
    platform: Platform | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Only consider this platform's system metrics.  Default: all.",
    ),
) -> None:
    """Print "system" or "custom" for each name.

    System metrics are host metrics mackerel-agent already reports; the
    matching catalog pattern is shown alongside.
    """
    catalog = _load_catalog()
    selected = _platform_or_default(platform)

    width = max(len(n) for n in names)
    n_system = 0
    for name in names:
        entry = catalog.find(name, selected)
        if entry is None:
            typer.echo(f"  {name.ljust(width)}  custom")
        else:
            n_system += 1
            typer.echo(f"  {name.ljust(width)}  system  {entry.pattern}")
    _log.info("classify finished", system=n_system, custom=len(names) - n_system)


# ---------------------------------------------------------------------------
# catalog subcommands
# ---------------------------------------------------------------------------

_catalog_app = typer.Typer(help="Inspect the system metric catalog.")
app.add_typer(_catalog_app, name="catalog")


@_catalog_app.command("list")
def catalog_list(
    platform: Platform | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Only list this platform's patterns.  Default: all.",
    ),
) -> None:
    """Print every system metric pattern and the platforms reporting it."""
    catalog = _load_catalog()
    selected = _platform_or_default(platform)

    patterns = catalog.patterns(selected)
    if not patterns:
        typer.echo(f"No system metrics found for platform '{selected}'")
        return

    entries = [e for e in catalog.entries if e.pattern in patterns]
    width = max(len("pattern"), *(len(e.pattern) for e in entries))
    typer.echo(f"  {'pattern'.ljust(width)}  platforms")
    for entry in entries:
        typer.echo(f"  {entry.pattern.ljust(width)}  {','.join(sorted(entry.platforms))}")


# ---------------------------------------------------------------------------
# config subcommands
# ---------------------------------------------------------------------------

_config_app = typer.Typer(help="Inspect resolved configuration.")
app.add_typer(_config_app, name="config")


@_config_app.command("show")
def config_show() -> None:
    """Print the fully-resolved configuration and exit.

    Shows which config file was loaded and the final value of every setting
    after environment-variable overrides are applied.
    """
    from mackerel_otel.config import _config_file, get_settings

    settings = get_settings()

    typer.echo(f"\n  config : {_config_file()}\n")

    for section_name, section in settings.model_dump().items():
        typer.echo(f"  [{section_name}]")
        width = max(len(k) for k in section)
        for key, val in section.items():
            typer.echo(f"  {key.ljust(width)} = {val}")
        typer.echo()

"""structlog setup for the mackerel-otel command line.

The naming core (``names``, ``graphdef``, ``catalog``) only asks for loggers
through ``get_logger`` and emits debug events: a graph definition rejected
for a name mismatch, the system metric catalog being loaded.  Until
``configure_logging`` runs, those events go through structlog's defaults.

The CLI callback calls ``configure_logging`` before every subcommand.  It
honours ``[logging]`` from the settings (level and ``json`` / ``text``
output), writes to stderr so stdout stays clean for graph-definition JSON
and classification tables, and tags every event with a short ``run_id``:

    {"metric": "disk.sda.reads.delta", "graph": "custom.disk.*",
     "event": "graph definition built", "run_id": "3f9a01c2",
     "level": "info", "timestamp": "2026-10-19T02:41:55Z"}
"""

import logging as _stdlib
import sys
import uuid

import structlog

from mackerel_otel.config import Settings, get_settings


def _renderer(fmt: str) -> structlog.typing.Processor:
    if fmt == "text":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging(settings: Settings | None = None) -> str:
    """Point structlog at stderr and return the run_id for this invocation.

    Safe to call repeatedly; each call rebuilds the processor chain and
    binds a new run_id.

    Args:
        settings: Resolved settings; ``get_settings()`` is used when None.

    Returns:
        The 8-character hex run_id attached to every subsequent event.
    """
    cfg = (settings or get_settings()).logging

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _renderer(cfg.format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(_stdlib, cfg.level, _stdlib.INFO)
        ),
        context_class=dict,
        # Resolve sys.stderr per configure call, never cache: CliRunner swaps
        # the stream for every invocation.
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    run_id = uuid.uuid4().hex[:8]
    structlog.contextvars.bind_contextvars(run_id=run_id)
    return run_id


def get_logger(name: str = "mackerel_otel") -> structlog.BoundLogger:
    """Return a structlog logger; modules pass ``__name__``."""
    return structlog.get_logger(name)

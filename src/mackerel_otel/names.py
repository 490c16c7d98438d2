"""Metric-name pattern algebra for Mackerel graph definitions.

Mackerel names custom metrics as dot-separated segments.  A graph definition
groups metrics under a *pattern*: a dotted name where some segments are
wildcards.

    disk.sda.reads.delta        concrete metric name
    disk.*.reads.delta          pattern: ``*`` matches any one segment
    interface.#.rxBytes.delta   pattern: ``#`` matches any one segment too

``*`` and ``#`` differ only in how :func:`generalize_metric_name` treats
them: a trailing ``#`` is already the most general form for that position,
so it is never rewritten to ``*``.

Operations (all pure):

    normalize_metric_name(s)          map s into Mackerel's character set
    match(pattern, name)              does name fit pattern?
    generalize_metric_name(name)      "a.b.c" → "a.b.*"
    bind_graph_metric_name(pre, full) pre + rest of full, validated
"""

from __future__ import annotations

import re
from enum import StrEnum

METRIC_NAME_SEP = "."

# Anything outside [0-9a-zA-Z._#*-] becomes "_".
_ILLEGAL_CHARS = re.compile(r"[^0-9a-zA-Z._#*\-]")


class Wildcard(StrEnum):
    """Reserved segment tokens.  Each matches exactly one segment."""

    ANY = "*"
    ID = "#"  # per-instance id (disk, interface…); blocks generalisation

    @classmethod
    def of(cls, segment: str) -> Wildcard | None:
        """Return the wildcard *segment* denotes, or None for a literal."""
        try:
            return cls(segment)
        except ValueError:
            return None


class NameMismatchError(ValueError):
    """A metric name does not satisfy the pattern it was declared under.

    Raised when a bind prefix is longer than its target, or when a graph
    definition's metric name cannot match the instrument name.  Both are
    static naming-configuration defects; the caller should reject the
    metric rather than retry.
    """

    def __init__(self, pattern: str, name: str, reason: str = "") -> None:
        self.pattern = pattern
        self.name = name
        detail = f": {reason}" if reason else ""
        super().__init__(f"mismatched metric names: {pattern!r} vs {name!r}{detail}")


class MetricName(str):
    """A dotted metric name, interpreted as a pattern when matching."""

    __slots__ = ()

    @property
    def segments(self) -> list[str]:
        return self.split(METRIC_NAME_SEP)

    def match(self, name: str) -> bool:
        """Return True if *name* fits this pattern segment-for-segment.

        Segment counts must be equal; wildcards never match zero or many
        segments.  Empty segments are compared literally.
        """
        expr = self.segments
        parts = name.split(METRIC_NAME_SEP)
        if len(expr) != len(parts):
            return False
        return all(
            Wildcard.of(e) is not None or e == p for e, p in zip(expr, parts, strict=True)
        )


def match(pattern: str, name: str) -> bool:
    """Functional form of :meth:`MetricName.match`."""
    return MetricName(pattern).match(name)


def normalize_metric_name(s: str) -> str:
    """Replace every character Mackerel rejects with ``_`` (one-for-one).

    Total and idempotent; the wildcard characters ``*`` and ``#`` survive.
    """
    return _ILLEGAL_CHARS.sub("_", s)


def generalize_metric_name(name: str) -> str:
    """Generalise ``"a.b"`` to ``"a.*"`` unless *name* already has wildcards.

    Returns *name* unchanged when it is empty, contains a ``*`` segment, or
    ends in ``#``.
    """
    if not name:
        return ""
    segments = name.split(METRIC_NAME_SEP)
    if Wildcard.ANY in segments:
        return name
    if Wildcard.of(segments[-1]) is Wildcard.ID:
        return name
    segments[-1] = Wildcard.ANY.value
    return METRIC_NAME_SEP.join(segments)


def bind_graph_metric_name(prefix: str, full: str) -> str:
    """Return *prefix* followed by the rest of *full*.

    *prefix* must match the leading segments of *full*; its own segments
    (wildcards included) replace them in the result::

        >>> bind_graph_metric_name("disk.*", "disk.sda.reads.delta")
        'disk.*.reads.delta'

    Raises:
        NameMismatchError: *prefix* has more segments than *full*, or does
                           not match *full*'s leading segments.
    """
    head = prefix.split(METRIC_NAME_SEP)
    segments = full.split(METRIC_NAME_SEP)
    if len(head) > len(segments):
        raise NameMismatchError(prefix, full, "prefix is longer than the metric name")

    leading = METRIC_NAME_SEP.join(segments[: len(head)])
    if not MetricName(prefix).match(leading):
        raise NameMismatchError(prefix, full, f"prefix does not match {leading!r}")

    segments[: len(head)] = head
    return METRIC_NAME_SEP.join(segments)

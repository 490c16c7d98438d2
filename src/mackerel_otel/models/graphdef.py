"""Pydantic models for Mackerel's graph-definition record.

Mirrors the body of ``POST /api/v0/graph-defs/create`` exactly.  Field names
are snake_case in Python and camelCase on the wire:

    {
        "name": "custom.disk.sda.reads.*",
        "displayName": "Disk reads",
        "unit": "float",
        "metrics": [
            {"name": "custom.disk.sda.reads.*", "displayName": "reads", "isStacked": false}
        ]
    }

``to_payload()`` produces that dict, omitting optional fields that were
never set.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

GraphUnitTag = Literal[
    "float",
    "integer",
    "percentage",
    "seconds",
    "milliseconds",
    "bytes",
    "bytes/sec",
    "bits/sec",
    "iops",
]


class GraphDefsMetric(BaseModel):
    """One metric line inside a graph definition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    display_name: str | None = Field(default=None, alias="displayName")
    is_stacked: bool = Field(default=False, alias="isStacked")


class GraphDefsParam(BaseModel):
    """A graph definition as submitted to Mackerel."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    display_name: str | None = Field(default=None, alias="displayName")
    unit: GraphUnitTag = "float"
    metrics: tuple[GraphDefsMetric, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready request body (camelCase, unset fields dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

"""Ecosystem metric models."""

from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field

from .base import DBModel


class NumericValue(BaseModel):
    """A single number."""

    kind: Literal["numeric"] = "numeric"
    value: float

    def display(self) -> str:
        return f"{self.value:g}"


class StructuredValue(BaseModel):
    """A small label to number mapping, e.g. deal size per stage."""

    kind: Literal["structured"] = "structured"
    values: Dict[str, float]

    def display(self) -> str:
        return ", ".join(f"{k}: {v:g}" for k, v in self.values.items())


MetricValue = Annotated[Union[NumericValue, StructuredValue], Field(discriminator="kind")]


def to_metric_value(raw: Any) -> Union[NumericValue, StructuredValue]:
    """Wrap a generator result (number, mapping or tagged dict) in the tagged union."""
    if isinstance(raw, (NumericValue, StructuredValue)):
        return raw
    if isinstance(raw, dict):
        if raw.get("kind") == "numeric":
            return NumericValue(**raw)
        if raw.get("kind") == "structured":
            return StructuredValue(**raw)
        return StructuredValue(values={str(k): float(v) for k, v in raw.items()})
    if isinstance(raw, bool) or raw is None:
        raise TypeError(f"Unsupported metric value: {raw!r}")
    return NumericValue(value=float(raw))


class MetricRecord(DBModel):
    """One metric value attributed to a reporting period."""

    metric_name: str = Field(..., description="Indicator name")
    value: MetricValue = Field(..., description="Tagged numeric or structured value")
    unit: str = Field(..., description="Unit of measure")
    period_start: datetime = Field(..., description="Inclusive period start")
    period_end: datetime = Field(..., description="Exclusive period end")
    geography: str = Field("Global", description="Geography tag")
    data_source: str = Field(..., description="Upstream source tag")
    recorded_at: Optional[datetime] = Field(None, description="Last time the value was written")

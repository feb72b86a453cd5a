"""
Pydantic models for chart configuration, breakdowns and derived results
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, Union, runtime_checkable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Structure(str, Enum):
    """Chart data layouts"""
    BREAKDOWN = "breakdown"
    TOP = "top"


TOTAL_KEY = "total"
TIMESTAMP_FIELD = "timestamp"

Number = Union[int, float]
GraphPoint = Dict[str, Any]


class BreakdownValue(BaseModel):
    """One category inside a breakdown; ``on`` toggles it in statistics"""
    name: Optional[str] = None
    key: Any
    on: bool = True

    model_config = ConfigDict(extra="allow")


class Breakdown(BaseModel):
    """A named partition of the data into categorical series"""
    name: Optional[str] = None
    breakdown_name: Optional[str] = Field(default=None, alias="breakdownName")
    total: bool = False
    values: List[BreakdownValue] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @classmethod
    def total_breakdown(cls) -> "Breakdown":
        """The synthetic default breakdown that sums everything"""
        return cls(
            name="Total",
            breakdown_name=None,
            total=True,
            values=[BreakdownValue(name=TOTAL_KEY, key=TOTAL_KEY, on=True)],
        )


class GraphConfig(BaseModel):
    """
    Chart configuration.

    Only the fields the engine reads are declared; anything else a dashboard
    puts in its config is kept and ignored. ``value`` and ``key`` are not
    required here, a chart missing them fails when its data is set.
    """
    value: Optional[str] = None
    structure: Optional[str] = None
    key: Optional[str] = None
    cumulative: bool = False
    additive: bool = False
    area: Optional[Any] = None
    dark_color: Optional[Any] = Field(default=None, alias="darkColor")
    breakdowns: Optional[List[Breakdown]] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def is_top(self) -> bool:
        return self.structure == Structure.TOP.value


class ValueRange(BaseModel):
    """Min/max of the visible values, used for axis scaling"""
    min: Optional[Number] = None
    max: Optional[Number] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max}


@runtime_checkable
class DimensionalDataset(Protocol):
    """
    Dataset contract the engine consumes.

    ``measure`` selects the grouping dimension for later ``breakdown`` calls.
    ``breakdown`` returns ordered rows of ``{"timestamp": ..., value_field: ...}``,
    where the value is a number, or a ``{category: number}`` mapping when a
    breakdown dimension is given.
    """

    def measure(self, dimension: str) -> None:
        ...

    def breakdown(self, value_field: str, breakdown_dimension: Optional[str] = None) -> Sequence[Dict[str, Any]]:
        ...

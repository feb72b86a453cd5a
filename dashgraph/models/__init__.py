"""Models package for the dashgraph chart engine"""

from .schemas import (
    # Enums and constants
    Structure, TOTAL_KEY, TIMESTAMP_FIELD,

    # Configuration
    GraphConfig, Breakdown, BreakdownValue,

    # Results
    GraphPoint, ValueRange,

    # Collaborators
    DimensionalDataset,
)

__all__ = [
    "Structure", "TOTAL_KEY", "TIMESTAMP_FIELD",
    "GraphConfig", "Breakdown", "BreakdownValue",
    "GraphPoint", "ValueRange",
    "DimensionalDataset",
]

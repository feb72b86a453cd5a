"""
Aggregation & Statistics Engine

Summaries over canonical chart points, restricted to the categories switched
on in the active breakdown. Empty inputs produce "no data" (None) instead of
raising; callers see the same outcomes a dashboard expects:
- additive aggregate of nothing is 0
- average of nothing is None
- percent change with no data or a zero baseline is None
"""

from decimal import Decimal, ROUND_HALF_DOWN, ROUND_HALF_UP
from typing import Any, List, Mapping, Optional, Sequence

from dashgraph.models.schemas import GraphPoint, Number, TOTAL_KEY, ValueRange

AGGREGATE_LABEL_TOTAL = "Total"
AGGREGATE_LABEL_AVERAGE = "Average"


def round_half_ceiling(value: Number, places: int) -> float:
    """
    Round halves towards positive infinity (2.25 -> 2.3, -2.25 -> -2.2),
    the way chart libraries round displayed values; not banker's rounding.
    """
    quantum = Decimal(1).scaleb(-places)
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return float(Decimal(str(value)).quantize(quantum, rounding=rounding))


def _active_items(totals: Any, active: Mapping[Any, bool]) -> List[Number]:
    if not isinstance(totals, Mapping):
        return []
    return [value for key, value in totals.items() if key in active and value is not None]


def aggregated_values(
    points: Sequence[GraphPoint],
    active: Mapping[Any, bool],
    limit_to_last_n: Optional[int] = None,
) -> List[Number]:
    """
    Per-point sum of active category values, optionally only the last N.

    ``limit_to_last_n`` of None/0, or larger than the series, returns everything.
    """
    values = [sum(_active_items(point[TOTAL_KEY], active)) for point in points]
    limit = min(limit_to_last_n or len(values), len(values))
    if limit <= 0:
        return []
    return values[-limit:]


def mean(values: Sequence[Number], places: int) -> Optional[float]:
    if not values:
        return None
    return round_half_ceiling(sum(values) / len(values), places)


def limited_aggregate(values: Sequence[Number], additive: bool, places: int = 1) -> Optional[Number]:
    """Sum for additive metrics, rounded mean otherwise (None when there is nothing to average)"""
    if additive:
        return sum(values)
    return mean(values, places)


def change_over_range(values: Sequence[Number], places: int = 2) -> Optional[str]:
    """
    Percent change from first to last value, formatted with ``places`` decimals.

    None when there is no data or the first value is zero; a rise from zero is
    reported the same way.
    """
    if not values or values[0] == 0:
        return None
    first, last = values[0], values[-1]
    change = (last - first) / first * 100
    # + 0.0 turns a -0.0 left by rounding into 0.0
    return f"{round(change, places) + 0.0:.{places}f}"


def _rank_key(row: GraphPoint):
    rank = row.get("rank")
    return (rank is None, rank if rank is not None else 0)


def top_min_max(points: Sequence[GraphPoint]) -> ValueRange:
    """Range of ranked rows: head of the ranking is the max, tail the min"""
    if not points:
        return ValueRange(min=0, max=0)
    ranked = sorted(points, key=_rank_key)
    return ValueRange(min=ranked[-1][TOTAL_KEY][TOTAL_KEY], max=ranked[0][TOTAL_KEY][TOTAL_KEY])


def breakdown_min_max(points: Sequence[GraphPoint], active: Mapping[Any, bool]) -> ValueRange:
    """
    Range of active category values across all points.

    The range starts at 0/0, so it always contains zero (axis floor/ceiling).
    """
    low: Number = 0
    high: Number = 0
    for point in points:
        visible = _active_items(point[TOTAL_KEY], active)
        if not visible:
            continue
        low = min(low, min(visible))
        high = max(high, max(visible))
    return ValueRange(min=low, max=high)


def aggregate_label(additive: bool) -> str:
    return AGGREGATE_LABEL_TOTAL if additive else AGGREGATE_LABEL_AVERAGE


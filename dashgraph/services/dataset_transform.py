"""
Dataset Transform Pipeline - dimensional dataset rows -> canonical chart points

Two layouts are produced:
- breakdown mode: one point per time bucket, ``{"month": ..., "total": {category: value}}``
- top mode: rows ranked by value, each carrying ``total.total`` plus its own fields
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from dashgraph.models.schemas import DimensionalDataset, GraphConfig, GraphPoint, TIMESTAMP_FIELD, TOTAL_KEY

Row = Dict[str, Any]
DatasetFunction = Callable[[Sequence[Row]], List[Row]]
DateBucketer = Callable[[Any], str]


def identity(rows: Sequence[Row]) -> Sequence[Row]:
    return rows


def infer_value_field(row: Row) -> Optional[str]:
    """First key of ``row`` that isn't the timestamp"""
    for key in row:
        if key != TIMESTAMP_FIELD:
            return key
    return None


def accumulate(rows: Sequence[Row], value_field: Optional[str] = None) -> List[Row]:
    """
    Running totals per category.

    Each output row holds, for every category, the sum of that category's
    values over all rows up to and including it. Categories are collected
    from every row in order of first appearance; a category missing from a
    row contributes nothing and keeps its running total.

    Args:
        rows: Ordered rows of ``{"timestamp": ..., value_field: {category: number}}``
        value_field: Name of the per-category mapping; inferred from the first
            row when omitted

    Returns:
        New rows, input rows are left untouched
    """
    if not rows:
        return []

    if value_field is None:
        value_field = infer_value_field(rows[0])

    running: Dict[Any, Any] = {}
    accumulated: List[Row] = []
    for row in rows:
        for category, value in (row.get(value_field) or {}).items():
            running[category] = running.get(category, 0) + (value or 0)
        accumulated.append({TIMESTAMP_FIELD: row.get(TIMESTAMP_FIELD), value_field: dict(running)})
    return accumulated


def as_category_row(row: Row, value_field: Optional[str]) -> Row:
    """
    Wrap a plain number value as ``{"total": value}``.

    Datasets return scalars when no breakdown dimension is requested; the
    per-category shape keeps statistics and accumulation uniform.
    """
    value = row[value_field]
    if value is None or isinstance(value, Mapping):
        return row
    return {**row, value_field: {TOTAL_KEY: value}}


def make_accumulator(value_field: Optional[str]) -> DatasetFunction:
    """Bind ``accumulate`` to a known value field"""

    def _accumulate(rows: Sequence[Row]) -> List[Row]:
        return accumulate(rows, value_field)

    return _accumulate


def top_x_by_y(dataset: DimensionalDataset, config: GraphConfig) -> List[Row]:
    """
    Rows grouped by ``config.key``, ranked by ``config.value`` descending.

    Rows with equal values keep the order the dataset returned them in;
    rows without a value rank last.
    """
    x = config.key
    y = config.value
    dataset.measure(x)
    results = dataset.breakdown(y)

    def _by_value(row: Row):
        value = row[y]
        return (value is not None, value if value is not None else 0)

    return sorted(results, key=_by_value, reverse=True)


def build_top_points(dataset: DimensionalDataset, config: GraphConfig, create_date: DateBucketer) -> List[GraphPoint]:
    """Top-N layout: ranked rows with the value moved into ``total.total``"""
    value_field = config.value
    points = []
    for row in top_x_by_y(dataset, config):
        point = dict(row)
        point[TOTAL_KEY] = {TOTAL_KEY: point.pop(value_field)}
        point["month"] = create_date(point[TIMESTAMP_FIELD])
        points.append(point)
    return points


def build_breakdown_points(
    dataset: DimensionalDataset,
    config: GraphConfig,
    breakdown_name: Optional[str],
    create_date: DateBucketer,
    dataset_function: DatasetFunction = identity,
) -> List[GraphPoint]:
    """Breakdown layout: one point per dataset row, split by ``breakdown_name``"""
    value_field = config.value
    dataset.measure(TIMESTAMP_FIELD)
    rows = [as_category_row(row, value_field) for row in dataset.breakdown(value_field, breakdown_name)]
    raw_values = dataset_function(rows)
    return [
        {"month": create_date(row[TIMESTAMP_FIELD]), TOTAL_KEY: row[value_field]}
        for row in raw_values
    ]

"""
Graph Model - chart configuration + dataset -> chart points and headline statistics

The model owns:
- the breakdown registry (Total at index 0, plus the configured breakdowns)
- ``graph_data``, rebuilt from scratch on every ``set_data`` call
- the pending annotation fetch, if the dashboard started one

Statistics and export read ``graph_data`` on demand.
"""

import functools
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

import structlog

from dashgraph.config.settings import Settings, resolve_settings
from dashgraph.models.schemas import Breakdown, DimensionalDataset, GraphConfig, GraphPoint, Number, Structure, ValueRange
from dashgraph.services import dataset_transform, export_flattener, graph_statistics
from dashgraph.services.annotations import AnnotationCallback, AnnotationHook
from dashgraph.services.breakdown_registry import BreakdownLike, BreakdownRegistry
from dashgraph.utils.date_bucket import create_date as default_create_date
from dashgraph.utils.errors import raise_invalid_input

logger = structlog.get_logger(__name__)

ConfigLike = Union[GraphConfig, Mapping[str, Any]]


class GraphModel:
    """
    Reshapes dimensional time-series data for one dashboard chart.

    Example:
        model = GraphModel({"value": "edits", "additive": True, "breakdowns": [...]})
        model.set_data(dataset)
        model.get_aggregate(), model.get_change_over_range(), model.get_min_max()
    """

    def __init__(
        self,
        configuration: ConfigLike,
        create_date: Optional[Callable[[Any], str]] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            configuration: GraphConfig or the raw config mapping
            create_date: Time-bucketing function; defaults to dashgraph.utils.create_date
            settings: Optional settings override
        """
        self.settings = resolve_settings(settings)
        self.config = (
            configuration
            if isinstance(configuration, GraphConfig)
            else GraphConfig.model_validate(configuration)
        )
        self.graph_data: List[GraphPoint] = []
        self.data: Optional[DimensionalDataset] = None

        self.registry = BreakdownRegistry(self.config.breakdowns)
        self._annotations = AnnotationHook()
        self._create_date = create_date or functools.partial(default_create_date, settings=self.settings)

        # unless the metric is cumulative the dataset passes through unchanged
        self.dataset_function = dataset_transform.identity
        if self.config.cumulative:
            self.dataset_function = dataset_transform.make_accumulator(self.config.value)

    # Presentation hints

    @property
    def area(self) -> Any:
        return self.config.area

    @property
    def dark_color(self) -> Any:
        return self.config.dark_color

    # Breakdowns

    @property
    def breakdowns(self) -> List[Breakdown]:
        return self.registry.breakdowns

    @property
    def active_breakdown(self) -> Breakdown:
        return self.registry.active_breakdown

    def get_default_breakdown(self) -> Breakdown:
        """The Total breakdown, always at index 0"""
        return self.registry.default_breakdown

    def get_active_breakdown_values(self) -> Dict[Any, bool]:
        return self.registry.active_values()

    def activate_breakdown_if_available(self, breakdown: BreakdownLike) -> bool:
        return self.registry.activate_if_available(breakdown)

    # Data

    def set_data(self, data: DimensionalDataset) -> None:
        """
        Rebuild ``graph_data`` from a dimensional dataset.

        Raises:
            InvalidGraphInputError: the config or dataset doesn't have the
                fields/operations this chart needs
        """
        self.data = data
        mode = (Structure.TOP if self.config.is_top else Structure.BREAKDOWN).value
        try:
            if self.config.is_top:
                points = dataset_transform.build_top_points(data, self.config, self._create_date)
            else:
                points = dataset_transform.build_breakdown_points(
                    data,
                    self.config,
                    self.active_breakdown.breakdown_name,
                    self._create_date,
                    self.dataset_function,
                )
        except (AttributeError, KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise_invalid_input(
                "set_data",
                exc,
                mode=mode,
                value_field=self.config.value,
                breakdown_name=self.active_breakdown.breakdown_name,
            )

        self.graph_data = points
        logger.debug(
            "Dataset transformed",
            mode=mode,
            points=len(points),
            cumulative=self.config.cumulative,
            breakdown_name=self.active_breakdown.breakdown_name,
        )

    def download_data(self, mode: Optional[str] = None) -> List[Dict[str, Any]]:
        """Flat key/value rows for CSV export (``mode`` overrides Settings.export_flatten_mode)"""
        return export_flattener.flatten_records(self.graph_data, mode or self.settings.export_flatten_mode)

    # Statistics

    def get_aggregate_label(self) -> str:
        return graph_statistics.aggregate_label(self.config.additive)

    def get_aggregate(self) -> Optional[Number]:
        return self.get_limited_aggregate()

    def get_limited_aggregate(self, limit_to_last_n: Optional[int] = None) -> Optional[Number]:
        """Sum (additive) or rounded mean of the last N aggregated values; None if there is nothing to average"""
        values = self.get_aggregated_values(limit_to_last_n)
        return graph_statistics.limited_aggregate(
            values, self.config.additive, self.settings.aggregate_precision
        )

    def get_aggregated_values(self, limit_to_last_n: Optional[int] = None) -> List[Number]:
        return graph_statistics.aggregated_values(
            self.graph_data, self.get_active_breakdown_values(), limit_to_last_n
        )

    def get_change_over_range(self) -> Optional[str]:
        return graph_statistics.change_over_range(
            self.get_aggregated_values(), self.settings.change_precision
        )

    def get_min_max(self) -> ValueRange:
        if self.config.is_top:
            return graph_statistics.top_min_max(self.graph_data)
        return graph_statistics.breakdown_min_max(self.graph_data, self.get_active_breakdown_values())

    # Annotations

    @property
    def annotation_promise(self):
        return self._annotations.pending

    @annotation_promise.setter
    def annotation_promise(self, awaitable: Optional[Awaitable[Any]]) -> None:
        self._annotations.set(awaitable)

    def after_annotations(self, callback: AnnotationCallback) -> None:
        self._annotations.after(callback)

"""
Breakdown Registry - the breakdowns a chart can be split by, and which one is active

Breakdowns live in a list owned by the registry. Index 0 is always the
synthetic "Total" breakdown; the active breakdown is an index into the list,
so toggling values on ``active_breakdown`` changes the registry entry itself.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import structlog

from dashgraph.models.schemas import Breakdown

logger = structlog.get_logger(__name__)

BreakdownLike = Union[Breakdown, Mapping[str, Any]]


def _as_breakdown(candidate: BreakdownLike) -> Breakdown:
    if isinstance(candidate, Breakdown):
        return candidate
    return Breakdown.model_validate(candidate)


class BreakdownRegistry:
    """Holds the chart's breakdowns and the active-breakdown pointer."""

    DEFAULT_INDEX = 0

    def __init__(self, breakdowns: Optional[Iterable[BreakdownLike]] = None):
        # copies, so toggling never reaches the caller's configuration
        copied = [_as_breakdown(b).model_copy(deep=True) for b in (breakdowns or [])]
        self._breakdowns: List[Breakdown] = [Breakdown.total_breakdown(), *copied]
        self._active_index = self.DEFAULT_INDEX

    @property
    def breakdowns(self) -> List[Breakdown]:
        return self._breakdowns

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def active_breakdown(self) -> Breakdown:
        return self._breakdowns[self._active_index]

    @property
    def default_breakdown(self) -> Breakdown:
        return self._breakdowns[self.DEFAULT_INDEX]

    def find_index(self, breakdown_name: Optional[str]) -> Optional[int]:
        """Index of the first breakdown splitting on ``breakdown_name``, if any"""
        for index, breakdown in enumerate(self._breakdowns):
            if breakdown.breakdown_name == breakdown_name:
                return index
        return None

    def activate_if_available(self, candidate: BreakdownLike) -> bool:
        """
        Make the registry breakdown matching ``candidate`` active.

        Every value of the registry entry takes the ``on`` state of the
        candidate value with the same key; values the candidate doesn't
        mention are switched off. Unknown breakdowns are ignored.

        Returns:
            True when a breakdown was activated
        """
        candidate = _as_breakdown(candidate)
        index = self.find_index(candidate.breakdown_name)
        if index is None:
            logger.debug("Breakdown not available", breakdown_name=candidate.breakdown_name)
            return False

        requested = {}
        for value in candidate.values:
            requested.setdefault(value.key, value.on)

        found = self._breakdowns[index]
        for value in found.values:
            value.on = requested.get(value.key, False)

        self._active_index = index
        logger.debug(
            "Breakdown activated",
            breakdown_name=found.breakdown_name,
            active_keys=[v.key for v in found.values if v.on],
        )
        return True

    def active_values(self) -> Dict[Any, bool]:
        """``{key: True}`` for every switched-on value of the active breakdown"""
        return {value.key: True for value in self.active_breakdown.values if value.on}

"""
Tests for the breakdown registry
"""

import pytest

from dashgraph.models.schemas import Breakdown
from dashgraph.services.breakdown_registry import BreakdownRegistry


def _total_shape(breakdown: Breakdown) -> dict:
    return {
        "name": breakdown.name,
        "breakdown_name": breakdown.breakdown_name,
        "total": breakdown.total,
        "values": [(v.key, v.on) for v in breakdown.values],
    }


TOTAL_SHAPE = {"name": "Total", "breakdown_name": None, "total": True, "values": [("total", True)]}


class TestRegistryConstruction:
    """Total is injected at index 0"""

    @pytest.mark.parametrize("breakdowns", [None, [], "region"])
    def test_total_always_first(self, breakdowns, region_breakdown):
        """Test that Total is always at index 0"""
        if breakdowns == "region":
            breakdowns = [region_breakdown]
        registry = BreakdownRegistry(breakdowns)

        assert _total_shape(registry.breakdowns[0]) == TOTAL_SHAPE
        assert registry.default_breakdown is registry.breakdowns[0]
        assert registry.active_breakdown is registry.breakdowns[0]

    def test_configured_breakdowns_follow_total(self, region_breakdown):
        """Test that configured breakdowns keep their order after Total"""
        registry = BreakdownRegistry([region_breakdown])

        assert len(registry.breakdowns) == 2
        assert registry.breakdowns[1].breakdown_name == "region"

    def test_copies_caller_breakdowns(self, region_breakdown):
        """Test that the registry works on copies"""
        model = Breakdown.model_validate(region_breakdown)
        registry = BreakdownRegistry([model])

        registry.breakdowns[1].values[0].on = False

        assert model.values[0].on is True
        assert registry.breakdowns[1] is not model

    def test_total_in_config_does_not_replace_synthetic_total(self):
        """Test that a configured Total doesn't replace the injected one"""
        registry = BreakdownRegistry([{"name": "Everything", "breakdownName": None, "values": []}])

        assert _total_shape(registry.breakdowns[0]) == TOTAL_SHAPE
        assert registry.breakdowns[1].name == "Everything"


class TestActivateIfAvailable:
    """Activating breakdowns and syncing their toggles"""

    def test_activates_matching_breakdown(self, region_breakdown):
        """Test that a matching breakdown becomes active with its toggles"""
        registry = BreakdownRegistry([region_breakdown])

        activated = registry.activate_if_available({
            "breakdownName": "region",
            "values": [{"key": "eu", "on": True}, {"key": "am", "on": False}],
        })

        assert activated is True
        assert registry.active_index == 1
        assert registry.active_breakdown is registry.breakdowns[1]
        # "as" is absent from the candidate, so it is switched off
        assert [(v.key, v.on) for v in registry.active_breakdown.values] == [
            ("eu", True), ("am", False), ("as", False),
        ]

    def test_unknown_breakdown_is_noop(self, region_breakdown):
        """Test that an unknown breakdown changes nothing"""
        registry = BreakdownRegistry([region_breakdown])

        activated = registry.activate_if_available({"breakdownName": "browser", "values": []})

        assert activated is False
        assert registry.active_index == 0
        assert all(v.on for v in registry.breakdowns[1].values)

    def test_idempotent(self, region_breakdown):
        """Test that activating twice gives the same state"""
        candidate = {"breakdownName": "region", "values": [{"key": "as", "on": True}]}
        once = BreakdownRegistry([region_breakdown])
        twice = BreakdownRegistry([region_breakdown])

        once.activate_if_available(candidate)
        twice.activate_if_available(candidate)
        twice.activate_if_available(candidate)

        assert once.active_index == twice.active_index
        assert once.active_values() == twice.active_values() == {"as": True}

    def test_reactivating_total(self, region_breakdown):
        """Test switching back to Total"""
        registry = BreakdownRegistry([region_breakdown])
        registry.activate_if_available({"breakdownName": "region", "values": [{"key": "eu", "on": True}]})

        registry.activate_if_available(registry.default_breakdown)

        assert registry.active_index == 0
        assert registry.active_values() == {"total": True}

    def test_accepts_breakdown_model(self, region_breakdown):
        """Test activation with a Breakdown model instead of a mapping"""
        registry = BreakdownRegistry([region_breakdown])
        candidate = Breakdown.model_validate(region_breakdown)
        candidate.values[1].on = False

        registry.activate_if_available(candidate)

        assert registry.active_values() == {"eu": True, "as": True}

    def test_first_matching_candidate_value_wins(self, region_breakdown):
        """Test that the first candidate entry for a key wins"""
        registry = BreakdownRegistry([region_breakdown])

        registry.activate_if_available({
            "breakdownName": "region",
            "values": [{"key": "eu", "on": False}, {"key": "eu", "on": True}],
        })

        assert registry.active_values() == {}


class TestActiveValues:
    def test_default_is_total(self):
        """Test active values for the Total breakdown"""
        assert BreakdownRegistry().active_values() == {"total": True}

    def test_mutation_through_active_breakdown(self, region_breakdown):
        """Test that toggles set on the active breakdown show up in active values"""
        registry = BreakdownRegistry([region_breakdown])
        registry.activate_if_available(region_breakdown)

        registry.active_breakdown.values[0].on = False

        assert registry.breakdowns[1].values[0].on is False
        assert registry.active_values() == {"am": True, "as": True}

"""Tests for commission structure validation."""

from decimal import Decimal

import pytest

from app.services.commission import validate_commission_structure

from factories import STANDARD_TIERS, flat, profit_sharing, target_based, tier, tiered


def test_well_formed_structures_pass():
    for structure in (flat("5"), tiered(), target_based(), profit_sharing()):
        result = validate_commission_structure(structure)
        assert result.valid, result.errors
        assert result.errors == []


def test_every_violation_is_reported():
    result = validate_commission_structure(tiered(tiers=[], rate="150"))

    assert not result.valid
    assert "Base rate must be between 0 and 100" in result.errors
    assert "Tiered commission structure must have at least one tier" in result.errors
    assert len(result.errors) == 2


def test_blank_name_is_rejected():
    result = validate_commission_structure(flat("5").model_copy(update={"name": "   "}))
    assert result.errors == ["Commission structure name is required"]


@pytest.mark.parametrize("rate", ["-0.01", "100.01"])
def test_base_rate_outside_percentage_range(rate):
    result = validate_commission_structure(flat(rate))
    assert result.errors == ["Base rate must be between 0 and 100"]


@pytest.mark.parametrize("rate", ["0", "100"])
def test_base_rate_bounds_are_inclusive(rate):
    assert validate_commission_structure(flat(rate)).valid


class TestTiers:
    def test_gap_between_tiers(self):
        result = validate_commission_structure(tiered(tiers=[tier(0, 1000, 5), tier(1500, 5000, 8)]))
        assert result.errors == ["Gap or overlap detected between tier 1 and tier 2"]

    def test_overlap_between_tiers(self):
        result = validate_commission_structure(tiered(tiers=[tier(0, 1000, 5), tier(900, 5000, 8)]))
        assert result.errors == ["Gap or overlap detected between tier 1 and tier 2"]

    def test_each_bad_boundary_is_reported(self):
        tiers = [tier(0, 1000, 5), tier(1200, 5000, 8), tier(4000, 9000, 10)]

        result = validate_commission_structure(tiered(tiers=tiers))

        assert result.errors == [
            "Gap or overlap detected between tier 1 and tier 2",
            "Gap or overlap detected between tier 2 and tier 3",
        ]

    def test_negative_minimum(self):
        result = validate_commission_structure(tiered(tiers=[tier(-10, 1000, 5)]))
        assert result.errors == ["Tier 1: Minimum amount cannot be negative"]

    def test_inverted_bounds(self):
        tiers = [STANDARD_TIERS[0], tier(1000, 1000, 8)]
        result = validate_commission_structure(tiered(tiers=tiers))
        assert result.errors == ["Tier 2: Maximum amount must be greater than minimum amount"]

    def test_rate_out_of_range(self):
        result = validate_commission_structure(tiered(tiers=[tier(0, 1000, 101)]))
        assert result.errors == ["Tier 1: Rate must be between 0 and 100"]


class TestTargetBased:
    @pytest.mark.parametrize("target", ["0", "-500"])
    def test_target_must_be_positive(self, target):
        result = validate_commission_structure(target_based(target=target))
        assert result.errors == [
            "Target-based commission structure must have a positive target amount"
        ]

    def test_missing_target(self):
        structure = target_based().model_copy(update={"target_amount": None})
        result = validate_commission_structure(structure)
        assert not result.valid


class TestRawMappings:
    def test_valid_mapping_is_parsed(self):
        result = validate_commission_structure(
            {
                "type": "tiered",
                "name": "Press operators",
                "base_rate": "0",
                "tiers": [
                    {"min_amount": "0", "max_amount": "1000", "rate": "5"},
                    {"min_amount": "1000", "max_amount": "5000", "rate": "8"},
                ],
            }
        )
        assert result.valid

    def test_mapping_errors_are_collected_too(self):
        result = validate_commission_structure(
            {"type": "target-based", "name": "", "base_rate": "120", "target_amount": "0"}
        )
        assert not result.valid
        assert len(result.errors) == 3

    def test_parse_failure_still_reports_other_defects(self):
        result = validate_commission_structure(
            {
                "type": "tiered",
                "name": "",
                "base_rate": "150",
                "tiers": [{"min_amount": "0", "max_amount": "1000"}],
            }
        )

        assert not result.valid
        assert "tiered.tiers.0.rate: Field required" in result.errors
        assert "Commission structure name is required" in result.errors
        assert "Base rate must be between 0 and 100" in result.errors
        assert "Tier 1: Rate must be between 0 and 100" in result.errors

    def test_parse_failure_on_target_structure_checks_target(self):
        result = validate_commission_structure(
            {"type": "target-based", "name": "Account managers", "base_rate": "abc", "target_amount": "-5"}
        )

        assert not result.valid
        assert "Base rate must be between 0 and 100" in result.errors
        assert "Target-based commission structure must have a positive target amount" in result.errors

    def test_parse_failure_checks_tier_boundaries(self):
        result = validate_commission_structure(
            {
                "type": "tiered",
                "name": "Press sales",
                "base_rate": 0,
                "tiers": [
                    {"min_amount": 0, "max_amount": 1000, "rate": 5},
                    {"min_amount": 1500, "max_amount": 5000, "rate": "eight"},
                ],
            }
        )

        assert "Gap or overlap detected between tier 1 and tier 2" in result.errors
        assert "Tier 2: Rate must be between 0 and 100" in result.errors

    def test_unknown_type_is_invalid(self):
        result = validate_commission_structure({"type": "hourly", "name": "x", "base_rate": "5"})
        assert not result.valid
        assert result.errors

    def test_non_finite_rate_is_invalid(self):
        result = validate_commission_structure({"type": "flat-rate", "name": "x", "base_rate": "NaN"})
        assert not result.valid
        assert any("base_rate" in error for error in result.errors)

    def test_non_finite_tier_bound_is_invalid(self):
        result = validate_commission_structure(
            {
                "type": "tiered",
                "name": "x",
                "base_rate": 0,
                "tiers": [{"min_amount": 0, "max_amount": "Infinity", "rate": 5}],
            }
        )
        assert not result.valid


@pytest.mark.parametrize("structure", [None, "tiered", 42, object(), [flat("5")]])
def test_non_structures_are_invalid_without_raising(structure):
    result = validate_commission_structure(structure)
    assert not result.valid
    assert result.errors == ["Commission structure is required"]


def test_validation_does_not_touch_the_structure():
    structure = tiered(tiers=[tier(0, 1000, 5), tier(2000, 3000, 8)])
    before = structure.model_dump()

    validate_commission_structure(structure)

    assert structure.model_dump() == before
    assert structure.tiers[1].min_amount == Decimal("2000")

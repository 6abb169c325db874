"""
Tests for agent review state: overrides, removals and validation.
"""
import pytest

from claimassist.models.enums import Severity
from claimassist.services.exceptions import ReviewValidationError
from claimassist.services.review import ReviewState
from conftest import make_damage


@pytest.fixture
def review() -> ReviewState:
    return ReviewState([
        make_damage(cost=1000.0, area="Front Bumper"),
        make_damage(Severity.MINOR, cost=200.0, area="Hood"),
        make_damage(cost=500.0, area="Door Panel"),
    ])


class TestOverrides:
    """Test per-item cost overrides."""

    def test_enable_seeds_original_cost(self, review):
        review.enable_override(0)
        assert review.active_overrides() == {0: 1000.0}
        assert review.adjusted_total() == 1700.0
        assert review.cost_adjustments() == ()

    def test_override_changes_total(self, review):
        review.override(0, cost=1400.0, reason="OEM part required")
        assert review.adjusted_total() == 2100.0
        adjustment = review.cost_adjustments()[0]
        assert adjustment.damage_index == 0
        assert adjustment.original_cost == 1000.0
        assert adjustment.adjusted_cost == 1400.0
        assert adjustment.reason == "OEM part required"

    def test_disable_reverts_to_original(self, review):
        review.override(0, cost=1400.0, reason="OEM part required")
        review.disable_override(0)
        assert review.adjusted_total() == 1700.0
        assert review.has_modifications is False

    def test_reenable_reseeds(self, review):
        review.override(0, cost=1400.0)
        review.disable_override(0)
        review.enable_override(0)
        assert review.active_overrides()[0] == 1000.0

    def test_negative_cost_rejected(self, review):
        review.enable_override(1)
        with pytest.raises(ReviewValidationError):
            review.set_override_cost(1, -10.0)

    @pytest.mark.parametrize("cost", [float("inf"), float("nan")])
    def test_non_finite_cost_rejected(self, review, cost):
        review.enable_override(1)
        with pytest.raises(ReviewValidationError, match="finite"):
            review.set_override_cost(1, cost)
        assert review.adjusted_total() == 1700.0

    def test_cost_requires_enabled_override(self, review):
        with pytest.raises(ReviewValidationError):
            review.set_override_cost(1, 10.0)

    def test_zero_cost_allowed(self, review):
        review.override(1, cost=0.0, reason="Covered by warranty")
        assert review.adjusted_total() == 1500.0

    def test_invalid_index(self, review):
        with pytest.raises(ReviewValidationError):
            review.enable_override(3)


class TestRemoval:
    """Test excluding items from the estimate."""

    def test_remove_excludes_item(self, review):
        review.remove_item(2)
        assert review.adjusted_total() == 1200.0
        assert review.removed_items() == (2,)
        assert review.has_modifications is True
        assert len(review.damages) == 3

    def test_remove_clears_override(self, review):
        review.override(2, cost=900.0, reason="Extra labor")
        review.remove_item(2)
        review.restore_item(2)
        assert review.active_overrides() == {}
        assert review.adjusted_total() == 1700.0

    def test_remove_restore_round_trip(self, review):
        review.remove_item(1)
        review.restore_item(1)
        assert review.adjusted_total() == review.original_total
        assert review.has_modifications is False

    def test_cannot_override_removed_item(self, review):
        review.remove_item(0)
        with pytest.raises(ReviewValidationError):
            review.enable_override(0)


class TestValidation:
    def test_missing_reason_rejected(self, review):
        review.override(0, cost=1100.0)
        with pytest.raises(ReviewValidationError) as exc_info:
            review.validate()
        assert "items: 0" in str(exc_info.value)

    def test_unchanged_override_needs_no_reason(self, review):
        review.enable_override(0)
        review.validate()

    def test_annotate_records_audit_trail(self, review, generator):
        assessment = generator.generate("CLM-TEST0001", 3)
        state = ReviewState(assessment.damages)
        state.override(0, cost=0.0, reason="Pre-existing")
        state.set_notes("  Checked with shop  ")
        state.annotate(assessment)
        assert len(assessment.manual_overrides) == 1
        assert assessment.override_notes == "Checked with shop"

    def test_line_items(self, review):
        review.override(0, cost=1250.0, reason="Paint blend")
        review.remove_item(1)
        items = review.line_items()
        assert items[0]["contribution"] == 1250.0
        assert items[0]["override_enabled"] is True
        assert items[1]["removed"] is True
        assert items[1]["contribution"] == 0.0
        assert items[2]["contribution"] == 500.0

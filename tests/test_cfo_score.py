"""
Tests for the CFO score: risk-adjusted NPV/ROI, absolute-anchor effort,
execution health and quadrant classification.
"""
import pytest

from src.app.services.roi.engine.core.cfo_score import (
    calculate_cfo_score,
    classify_quadrant,
    effective_risk,
    execution_health,
    exposure_risk_factor,
    implementation_effort,
    risk_adjusted_npv,
    risk_adjusted_rate,
)
from src.app.services.roi.engine.models.scoring import CFOScoreInput, Quadrant


@pytest.fixture
def score_input():
    return CFOScoreInput(
        initial_cost=50000,
        savings_years=[40000, 40000, 40000],
        complexity_index=4.5,
    )


class TestCalculateCFOScore:
    """Reference process: 50k initial cost, 40k savings for three years"""

    def test_reference_values(self, score_input):
        result = calculate_cfo_score(score_input)

        assert result.r_adj == pytest.approx(0.1135)
        assert result.npv_final == pytest.approx(47156.6, abs=1)
        assert result.roi_a == pytest.approx(0.9431, abs=1e-4)
        assert result.implementation_effort == pytest.approx(0.3515, abs=1e-4)
        assert result.execution_health == 1.0
        assert result.risk_factor == 1.0
        assert result.quadrant == Quadrant.QUICK_WIN
        assert result.roi_risk_weighted == pytest.approx(0.7309, abs=1e-4)
        assert result.cfo_score_raw == pytest.approx(0.9716, abs=1e-4)
        assert result.cfo_score_norm == pytest.approx(6.57, abs=0.01)

    def test_serialized(self, score_input):
        data = calculate_cfo_score(score_input).to_dict()
        assert data["quadrant"] == "Quick Win"
        assert data["rAdj"] == 0.1135
        assert data["cfoScoreNorm"] == 6.57

    def test_global_risk_factor_overrides_complexity(self, score_input):
        score_input.global_risk_factor = 10
        result = calculate_cfo_score(score_input)
        assert result.effective_risk == 10
        assert result.r_adj == pytest.approx(0.13)

    def test_zero_initial_cost_gives_zero_roi(self):
        result = calculate_cfo_score(CFOScoreInput(initial_cost=0, savings_years=[1000]))
        assert result.roi_a == 0.0
        assert result.risk_factor == 1.0

    def test_norm_caps_roi_at_three(self):
        high = calculate_cfo_score(CFOScoreInput(initial_cost=1000, savings_years=[100000] * 3))
        assert high.roi_a > 3
        assert high.cfo_score_norm == pytest.approx(10.0)

    def test_from_dict_defaults(self):
        params = CFOScoreInput.from_dict({"initial_cost": 100, "savings_years": [50]})
        assert params.discount_rate == 0.10
        assert params.estimated_cost is None
        assert params.cost_target == 100000.0


class TestComponents:
    def test_effective_risk(self):
        assert effective_risk(4.5) == 4.5
        assert effective_risk(4.5, 0) == 0
        assert effective_risk(4.5, 8) == 8

    def test_risk_adjusted_rate(self):
        assert risk_adjusted_rate(0.10, 0.03, 10) == pytest.approx(0.13)

    def test_npv_skips_years_before_start(self):
        full = risk_adjusted_npv(100, [110, 121], 0.10)
        late = risk_adjusted_npv(100, [110, 121], 0.10, start_year=2)
        assert full == pytest.approx(100.0)
        assert late == pytest.approx(0.0)

    def test_effort_terms_are_capped(self):
        """Cost and time beyond the anchors count as 1"""
        effort = implementation_effort(1_000_000, 100, 10, 100000, 6)
        assert effort == pytest.approx(1.0)

    def test_effort_zero_anchor_drops_term(self):
        effort = implementation_effort(50000, 10, 0, 0, 0)
        assert effort == 0.0

    def test_effort_is_absolute(self):
        """The same process scores the same regardless of its peers"""
        assert implementation_effort(20000, 4.33, 2, 100000, 6) == \
            pytest.approx(0.5 * 0.2 + 0.3 * (1 / 6) + 0.2 * 0.2)

    @pytest.mark.parametrize('budget,eac,expected', [
        (100, 100, 1.0),
        (100, 120, 0.8),
        (100, 80, 0.8),
        (100, 300, 0.0),
        (0, 500, 1.0),
        (None, 500, 1.0),
    ])
    def test_execution_health(self, budget, eac, expected):
        assert execution_health(budget, eac) == pytest.approx(expected)

    @pytest.mark.parametrize('emv,initial,expected', [
        (2000, 10000, 0.8),
        (0, 10000, 1.0),
        (20000, 10000, 0.0),
        (-5000, 10000, 1.0),
        (500, 0, 1.0),
    ])
    def test_exposure_risk_factor(self, emv, initial, expected):
        assert exposure_risk_factor(emv, initial) == pytest.approx(expected)


class TestQuadrants:
    """Fixed thresholds at 50% ROI and 40% effort"""

    @pytest.mark.parametrize('roi_a,effort,quadrant', [
        (0.5, 0.4, Quadrant.QUICK_WIN),
        (2.0, 0.1, Quadrant.QUICK_WIN),
        (0.5, 0.41, Quadrant.STRATEGIC_BET),
        (0.49, 0.4, Quadrant.NICE_TO_HAVE),
        (-1.0, 0.9, Quadrant.DEPRIORITIZE),
    ])
    def test_classify_quadrant(self, roi_a, effort, quadrant):
        assert classify_quadrant(roi_a, effort) == quadrant

"""
Unit tests for the pressure, vulnerability and opportunity scorers.
"""
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from regintel.scoring import did_cross_threshold, lead_time_months, opportunity_score, pressure_score, vulnerability_score
from regintel.scoring.pressure_scorer import funding_amount_points, funding_recency_points, pressure_band
from regintel.scoring.vulnerability_scorer import RISK_FACTOR_WEIGHTS, extract_role_title, title_points

NOW = datetime(2026, 3, 2, 12, 0, 0)


def make_company(**overrides):
    fields = dict(
        last_funding_date=None,
        last_funding_amount=None,
        gtm_gap_detected=False,
        executive_turnover=False,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_executive(**overrides):
    fields = dict(
        title="Head of Partnerships",
        risk_factors=[],
        desperation_signals=[],
        last_linkedin_post=None,
        vulnerability_score=0,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_opportunity(**overrides):
    fields = dict(
        revenue_potential=None,
        market_gap=None,
        competition_level=None,
        lead_time_months=None,
        status="IDENTIFIED",
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestPressureScore:

    def test_worked_example_scores_99(self):
        """Fresh $60M round, GTM gap, turnover and a vulnerable executive."""
        company = make_company(
            last_funding_date=NOW - timedelta(days=15),
            last_funding_amount=60_000_000,
            gtm_gap_detected=True,
            executive_turnover=True,
        )
        executives = [make_executive(vulnerability_score=80)]

        assert pressure_score(company, executives, now=NOW) == 99

    def test_empty_company_scores_zero(self):
        assert pressure_score(make_company(), now=NOW) == 0

    def test_clamps_at_100(self):
        company = make_company(
            last_funding_date=NOW - timedelta(days=1),
            last_funding_amount=100_000_000,
            gtm_gap_detected=True,
            executive_turnover=True,
        )
        executives = [make_executive(vulnerability_score=100)]

        assert pressure_score(company, executives, now=NOW) == 100

    @pytest.mark.parametrize("days,points", [
        (0, 30), (30, 30), (31, 25), (60, 25), (90, 20), (180, 10), (181, 0),
    ])
    def test_funding_recency_tiers(self, days, points):
        assert funding_recency_points(NOW - timedelta(days=days), now=NOW) == points

    @pytest.mark.parametrize("amount,points", [
        (None, 0), (0, 0), (9_999_999, 0), (10_000_000, 10), (20_000_000, 15), (50_000_000, 20),
    ])
    def test_funding_amount_tiers(self, amount, points):
        assert funding_amount_points(amount) == points

    def test_non_decreasing_as_funding_gets_more_recent(self):
        scores = [
            pressure_score(make_company(last_funding_date=NOW - timedelta(days=d)), now=NOW)
            for d in (365, 180, 90, 60, 30, 1)
        ]
        assert scores == sorted(scores)

    def test_non_decreasing_in_funding_amount(self):
        scores = [
            pressure_score(make_company(last_funding_amount=a), now=NOW)
            for a in (0, 5_000_000, 10_000_000, 25_000_000, 75_000_000)
        ]
        assert scores == sorted(scores)

    def test_only_top_executive_counts(self):
        executives = [make_executive(vulnerability_score=40), make_executive(vulnerability_score=99)]
        assert pressure_score(make_company(), executives, now=NOW) == 4

    def test_bands(self):
        assert pressure_band(70) == "high"
        assert pressure_band(69) == "medium"
        assert pressure_band(40) == "medium"
        assert pressure_band(39) == "low"


class TestVulnerabilityScore:

    @pytest.mark.parametrize("title,points", [
        ("CMO", 20),
        ("Chief Revenue Officer", 20),
        ("VP Sales EMEA", 15),
        ("VP of Marketing", 15),
        ("Director of Engineering", 10),
        ("VP Engineering", 0),
        ("Software Engineer", 0),
        (None, 0),
    ])
    def test_title_points(self, title, points):
        assert title_points(title) == points

    @pytest.mark.parametrize("factor", sorted(RISK_FACTOR_WEIGHTS))
    def test_adding_a_risk_factor_adds_its_weight(self, factor):
        base = make_executive(risk_factors=["pipeline_pressure"])
        more = make_executive(risk_factors=["pipeline_pressure", factor])

        delta = vulnerability_score(more, now=NOW) - vulnerability_score(base, now=NOW)
        assert delta == RISK_FACTOR_WEIGHTS[factor]

    def test_unknown_risk_factor_weighs_five(self):
        executive = make_executive(risk_factors=["mystery"])
        assert vulnerability_score(executive, now=NOW) == 5

    def test_risk_factor_cap_leaves_score_unchanged_at_boundary(self):
        base = make_executive(risk_factors=["board_pressure", "board_pressure"])
        more = make_executive(risk_factors=["board_pressure", "board_pressure", "public_criticism"])

        assert vulnerability_score(base, now=NOW, risk_factor_cap=40) == 40
        assert vulnerability_score(more, now=NOW, risk_factor_cap=40) == 40

    def test_desperation_signals_and_cap(self):
        executive = make_executive(desperation_signals=["a", "b", "c", "d", "e"])
        assert vulnerability_score(executive, now=NOW) == 25
        assert vulnerability_score(executive, now=NOW, desperation_cap=20) == 20

    def test_recent_post_bonus(self):
        recent = make_executive(last_linkedin_post=NOW - timedelta(days=7))
        stale = make_executive(last_linkedin_post=NOW - timedelta(days=8))
        assert vulnerability_score(recent, now=NOW) == 5
        assert vulnerability_score(stale, now=NOW) == 0

    def test_company_bonuses(self):
        company = make_company(gtm_gap_detected=True, last_funding_date=NOW - timedelta(days=90))
        assert vulnerability_score(make_executive(), company, now=NOW) == 20
        assert vulnerability_score(make_executive(), None, now=NOW) == 0

    def test_clamped_to_100(self):
        executive = make_executive(
            title="CMO",
            risk_factors=list(RISK_FACTOR_WEIGHTS),
            desperation_signals=["x"] * 10,
        )
        assert vulnerability_score(executive, now=NOW) == 100

    def test_role_title_buckets(self):
        assert extract_role_title("Chief Executive Officer (CEO)") == "CEO"
        assert extract_role_title("VP Growth") == "VP"
        assert extract_role_title("Sales Director") == "Director"
        assert extract_role_title("CTO & Co-founder") == "CTO"
        assert extract_role_title("Head of Sales") == "Other"


class TestOpportunityScore:

    def test_worked_example_clamps_to_100(self):
        opportunity = make_opportunity(
            revenue_potential="HIGH",
            market_gap="VERY_HIGH",
            competition_level="NONE",
            lead_time_months=20,
            status="PURSUING",
        )
        assert opportunity_score(opportunity) == 100

    def test_base_score_without_ordinals(self):
        assert opportunity_score(make_opportunity()) == 50

    @pytest.mark.parametrize("status", ["LOST", "ARCHIVED"])
    def test_closed_statuses_halve_with_half_up_rounding(self, status):
        # 50 + 10 + 5 + 0 + 0 = 65 -> 32.5 -> 33
        opportunity = make_opportunity(
            revenue_potential="LOW",
            market_gap="LOW",
            competition_level="SATURATED",
            status=status,
        )
        assert opportunity_score(opportunity) == 33

    def test_closed_status_halves_before_clamp(self):
        opportunity = make_opportunity(
            revenue_potential="VERY_HIGH",
            market_gap="VERY_HIGH",
            competition_level="NONE",
            lead_time_months=24,
            status="LOST",
        )
        # 50 + 40 + 35 + 25 + 15 = 165 -> 82.5 -> 83
        assert opportunity_score(opportunity) == 83

    @pytest.mark.parametrize("months,expected", [
        (None, 50), (0, 50), (5, 50), (6, 55), (12, 60), (18, 65), (-3, 50),
    ])
    def test_lead_time_tiers(self, months, expected):
        assert opportunity_score(make_opportunity(lead_time_months=months)) == expected

    def test_lead_time_months_uses_30_day_months(self):
        assert lead_time_months(NOW + timedelta(days=365), now=NOW) == 12
        assert lead_time_months(NOW + timedelta(days=29), now=NOW) == 0
        assert lead_time_months(NOW - timedelta(days=31), now=NOW) == -2
        assert lead_time_months(None, now=NOW) is None

    def test_always_in_range(self):
        for revenue in (None, "LOW", "VERY_HIGH"):
            for gap in (None, "LOW", "VERY_HIGH"):
                for status in ("IDENTIFIED", "LOST"):
                    score = opportunity_score(make_opportunity(
                        revenue_potential=revenue, market_gap=gap, status=status
                    ))
                    assert 0 <= score <= 100


class TestThresholdCrossing:

    def test_fires_when_crossing_upwards(self):
        assert did_cross_threshold(69, 70, 70) is True

    def test_new_record_counts_as_below(self):
        assert did_cross_threshold(None, 85, 70) is True
        assert did_cross_threshold(None, 10, 70) is False

    def test_does_not_refire_while_high(self):
        assert did_cross_threshold(75, 90, 70) is False
        assert did_cross_threshold(70, 70, 70) is False

    def test_falling_does_not_fire(self):
        assert did_cross_threshold(80, 50, 70) is False

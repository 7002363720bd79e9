"""
Unit tests for briefing assembly: summary sentences, action items and the
generator's use of its repository. No database; the repository is faked.
"""
from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from regintel.briefings.generator import (
    FALLBACK_SUMMARY,
    BriefingGenerator,
    build_action_items,
    build_executive_summary,
    build_stats,
    format_euros_k,
    render_markdown,
    vulnerability_change,
)

NOW = datetime(2026, 3, 2, 8, 0, 0)
TODAY = date(2026, 3, 2)


def opportunity(id=1, score=50, market_size=None, title="Opportunity"):
    return SimpleNamespace(
        id=id,
        title=f"{title} {id}",
        description="desc",
        opportunity_score=score,
        revenue_potential="HIGH",
        estimated_market_size=market_size,
    )


def procurement(id=1, days_left=10, value=None):
    return SimpleNamespace(
        id=id,
        title=f"Tender {id}",
        region="Bavaria",
        estimated_value=value,
        submission_deadline=NOW + timedelta(days=days_left),
    )


def executive(id=1, score=85, previous=None):
    return SimpleNamespace(
        id=id,
        name=f"Exec {id}",
        title="CMO",
        vulnerability_score=score,
        previous_vulnerability_score=previous,
        company=SimpleNamespace(name="Acme"),
    )


def alert(id=1, severity="high", message="Something happened"):
    return SimpleNamespace(id=id, severity=severity, message=message)


def activity(id=1, threat="HIGH"):
    return SimpleNamespace(
        id=id,
        competitor_name="Rival",
        activity_type="product_launch",
        activity_date=NOW - timedelta(hours=3),
        description="Launched",
        threat_level=threat,
    )


class FakeRepository:
    """Stands in for BriefingRepository; records calls and saved reports."""

    def __init__(self, **rows):
        self.rows = rows
        self.calls = {}
        self.saved = []

    async def _rows(self, name, *args, **kwargs):
        self.calls[name] = (args, kwargs)
        return self.rows.get(name, [])

    async def new_opportunities(self, *args, **kwargs):
        return await self._rows("opportunities", *args, **kwargs)

    async def competitor_activities(self, *args, **kwargs):
        return await self._rows("activities", *args, **kwargs)

    async def upcoming_procurements(self, *args, **kwargs):
        return await self._rows("procurements", *args, **kwargs)

    async def vulnerable_executives(self, *args, **kwargs):
        return await self._rows("executives", *args, **kwargs)

    async def unread_alerts(self, *args, **kwargs):
        return await self._rows("alerts", *args, **kwargs)

    async def pressured_companies(self, *args, **kwargs):
        return await self._rows("companies", *args, **kwargs)

    async def save_report(self, user_id, report_date, title, content, report_type="daily_briefing"):
        self.saved.append((user_id, report_date, title, content))


class FailingRepository(FakeRepository):

    async def unread_alerts(self, *args, **kwargs):
        raise RuntimeError("database unavailable")


class TestExecutiveSummary:

    def test_empty_day_uses_fallback(self):
        assert build_executive_summary([], [], [], [], []) == FALLBACK_SUMMARY

    def test_low_threat_activity_alone_falls_back(self):
        assert build_executive_summary([], [activity(threat="LOW")], [], [], []) == FALLBACK_SUMMARY

    def test_sentences_in_order(self):
        summary = build_executive_summary(
            [opportunity(market_size=250_000), opportunity(id=2, market_size=1_500_000)],
            [activity(threat="CRITICAL"), activity(id=2, threat="MEDIUM")],
            [procurement()],
            [executive()],
            [alert(severity="critical"), alert(id=2, severity="low")],
        )
        assert summary == (
            "Today we identified 2 new regulatory opportunities with a combined revenue potential of €1,750k. "
            "1 high-threat competitor activities require immediate attention. "
            "1 government procurement deadlines are approaching in the next 14 days. "
            "1 executives show increased vulnerability, presenting potential engagement opportunities. "
            "1 high-priority alerts require immediate action."
        )

    def test_high_priority_counts_high_and_critical(self):
        alerts = [alert(severity="critical"), alert(id=2, severity="high"), alert(id=3, severity="medium")]
        assert build_stats([], [], [], [], alerts)["high_priority_items"] == 2

    def test_format_euros_k(self):
        assert format_euros_k(None) == "€0k"
        assert format_euros_k(2_345_678) == "€2,346k"


class TestActionItems:

    def test_empty_inputs_give_no_items(self):
        assert build_action_items([], [], [], [], NOW) == []

    def test_category_order_and_thresholds(self):
        items = build_action_items(
            [opportunity(score=80, market_size=500_000), opportunity(id=2, score=79)],
            [procurement(days_left=7, value=90_000), procurement(id=2, days_left=8)],
            [executive(score=80), executive(id=2, score=79)],
            [alert(severity="high"), alert(id=2, severity="medium")],
            NOW,
        )

        assert [i["title"] for i in items] == [
            "Research opportunity: Opportunity 1",
            "Prepare bid: Tender 1",
            "Engage with Exec 1",
            "Address alert",
        ]
        assert items[0]["description"] == "High-scoring opportunity (80%) with €500k potential"
        assert items[1]["description"] == "Deadline in 7 days - €90k value"
        assert items[2] == {
            "priority": "medium",
            "title": "Engage with Exec 1",
            "description": "CMO at Acme - vulnerability score 80%",
        }

    def test_capped_at_ten_without_displacing_earlier_categories(self):
        opportunities = [opportunity(id=i, score=90) for i in range(8)]
        procurements = [procurement(id=i, days_left=2) for i in range(4)]
        executives = [executive(id=i) for i in range(5)]
        alerts = [alert(id=i) for i in range(6)]

        items = build_action_items(opportunities, procurements, executives, alerts, NOW)

        assert len(items) == 10
        assert [i["title"].split(":")[0] for i in items] == ["Research opportunity"] * 8 + ["Prepare bid"] * 2

    def test_per_category_limits(self):
        items = build_action_items(
            [], [], [executive(id=i) for i in range(5)], [alert(id=i) for i in range(7)], NOW
        )
        assert sum(1 for i in items if i["title"].startswith("Engage")) == 3
        assert sum(1 for i in items if i["title"] == "Address alert") == 5
        assert len(items) == 8

    @pytest.mark.parametrize("volume", [0, 1, 5, 20, 100])
    def test_never_more_than_ten(self, volume):
        items = build_action_items(
            [opportunity(id=i, score=100) for i in range(volume)],
            [procurement(id=i, days_left=1) for i in range(volume)],
            [executive(id=i) for i in range(volume)],
            [alert(id=i) for i in range(volume)],
            NOW,
        )
        assert len(items) <= 10


class TestVulnerabilityChange:

    def test_first_score_is_new(self):
        assert vulnerability_change(executive(score=72, previous=None)) == {
            "change_type": "new", "change_amount": 72,
        }

    def test_increase_and_decrease(self):
        assert vulnerability_change(executive(score=80, previous=65)) == {
            "change_type": "increase", "change_amount": 15,
        }
        assert vulnerability_change(executive(score=60, previous=75)) == {
            "change_type": "decrease", "change_amount": 15,
        }

    def test_unchanged(self):
        assert vulnerability_change(executive(score=70, previous=70))["change_type"] == "unchanged"


class TestBriefingGenerator:

    @pytest.mark.asyncio
    async def test_empty_day(self):
        repository = FakeRepository()
        generator = BriefingGenerator(repository, clock=lambda: NOW)

        briefing = await generator.generate(7, TODAY)

        assert briefing["executive_summary"] == FALLBACK_SUMMARY
        assert briefing["action_items"] == []
        assert briefing["stats"] == build_stats([], [], [], [], [])
        assert briefing["date"] == "2026-03-02"
        assert briefing["generated_at"] == NOW.isoformat()
        assert repository.saved == [(7, TODAY, "Daily Briefing - 2026-03-02", briefing)]

    @pytest.mark.asyncio
    async def test_windows_passed_to_repository(self):
        repository = FakeRepository()
        generator = BriefingGenerator(repository, clock=lambda: NOW)

        await generator.gather_context(7, TODAY)

        start = datetime(2026, 3, 2)
        (user_id, since, until), kwargs = repository.calls["opportunities"]
        assert user_id == 7
        assert since == start - timedelta(days=1)
        assert until.date() == TODAY
        assert kwargs["limit"] == 5

        (_, since, until), kwargs = repository.calls["procurements"]
        assert since == start
        assert until == start + timedelta(days=14)

        _, kwargs = repository.calls["executives"]
        assert kwargs == {"min_score": 60, "limit": 10}

    @pytest.mark.asyncio
    async def test_sections_are_populated(self):
        repository = FakeRepository(
            opportunities=[opportunity(score=88, market_size=100_000)],
            activities=[activity()],
            procurements=[procurement(days_left=3)],
            executives=[executive(score=82, previous=70)],
            alerts=[alert()],
            companies=[SimpleNamespace(id=4, name="Acme", pressure_score=91, executives=[executive(score=82)])],
        )
        generator = BriefingGenerator(repository, clock=lambda: NOW)

        briefing = await generator.generate(1, TODAY)

        assert briefing["upcoming_deadlines"][0]["days_until"] == 3
        assert briefing["executive_alerts"][0]["change_type"] == "increase"
        assert briefing["executive_alerts"][0]["change_amount"] == 12
        assert briefing["pressured_companies"][0]["vulnerable_executives"][0]["name"] == "Exec 1"
        assert briefing["stats"]["high_priority_items"] == 1
        assert len(briefing["action_items"]) == 4

    @pytest.mark.asyncio
    async def test_read_failure_persists_nothing(self):
        repository = FailingRepository()
        generator = BriefingGenerator(repository, clock=lambda: NOW)

        with pytest.raises(RuntimeError):
            await generator.generate(1, TODAY)
        assert repository.saved == []


class TestRenderMarkdown:

    def test_renders_headline_sections(self):
        briefing = {
            "date": "2026-03-02",
            "stats": build_stats([], [], [], [], []),
            "executive_summary": FALLBACK_SUMMARY,
            "action_items": [{"priority": "high", "title": "Prepare bid: Tender 1", "description": "Deadline in 2 days"}],
            "opportunities": [],
            "competitor_activities": [],
            "upcoming_deadlines": [],
            "executive_alerts": [],
            "pressured_companies": [],
        }

        markdown = render_markdown(briefing)

        assert markdown.startswith("# Daily Briefing")
        assert FALLBACK_SUMMARY in markdown
        assert "**[HIGH]** Prepare bid: Tender 1: Deadline in 2 days" in markdown

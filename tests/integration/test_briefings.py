"""
Integration tests for daily briefings against the database: windowed reads,
persistence and regeneration.
"""
from datetime import date, datetime, timedelta

import pytest

from regintel.alerts.database import Alert
from regintel.briefings import BriefingRepository
from regintel.briefings.generator import FALLBACK_SUMMARY
from regintel.briefings.service import generate_briefing, generate_for_all_users, get_briefing, list_briefings
from regintel.companies.database import Company, Executive
from regintel.opportunities.database import CompetitorActivity, Opportunity
from regintel.procurement.database import Procurement

DAY = date(2026, 3, 2)
MORNING = datetime(2026, 3, 2, 9, 0)


@pytest.fixture
async def seeded(db_session, user, other_user):
    """One user's day: rows inside and outside the briefing windows, plus another user's data."""
    fresh = Opportunity(
        user_id=user.id, title="AI Act", description="d", regulation_type="AI",
        opportunity_score=85, estimated_market_size=400_000, created_at=MORNING,
    )
    stale = Opportunity(
        user_id=user.id, title="Old", description="d", regulation_type="AI",
        opportunity_score=90, created_at=MORNING - timedelta(days=5),
    )
    foreign = Opportunity(
        user_id=other_user.id, title="Not mine", description="d", regulation_type="AI",
        opportunity_score=99, created_at=MORNING,
    )
    db_session.add_all([fresh, stale, foreign])
    await db_session.flush()

    db_session.add_all([
        CompetitorActivity(
            opportunity_id=fresh.id, competitor_name="Rival", activity_type="launch",
            activity_date=MORNING - timedelta(hours=20), description="x", threat_level="HIGH",
        ),
        CompetitorActivity(
            opportunity_id=foreign.id, competitor_name="Rival", activity_type="launch",
            activity_date=MORNING, description="x", threat_level="CRITICAL",
        ),
        Procurement(
            user_id=user.id, title="Soon", description="d", region="Bavaria", issuing_authority="City",
            publish_date=MORNING - timedelta(days=10), submission_deadline=MORNING + timedelta(days=5),
            status="OPEN", estimated_value=120_000,
        ),
        Procurement(
            user_id=user.id, title="Later", description="d", region="Bavaria", issuing_authority="City",
            publish_date=MORNING, submission_deadline=MORNING + timedelta(days=30), status="OPEN",
        ),
        Procurement(
            user_id=user.id, title="Closed", description="d", region="Bavaria", issuing_authority="City",
            publish_date=MORNING, submission_deadline=MORNING + timedelta(days=3), status="CLOSED",
        ),
    ])

    company = Company(
        user_id=user.id, name="Acme", industry="Robotics", pressure_score=88, created_at=MORNING,
    )
    company.executives = [
        Executive(
            user_id=user.id, name="Dana", title="CMO", vulnerability_score=82,
            previous_vulnerability_score=64, updated_at=MORNING,
        ),
        Executive(
            user_id=user.id, name="Lee", title="Engineer", vulnerability_score=20, updated_at=MORNING,
        ),
    ]
    db_session.add(company)
    await db_session.flush()

    db_session.add_all([
        Alert(user_id=user.id, alert_type="FUNDING_ROUND", severity="high", title="t",
              message="Acme raised", created_at=MORNING),
        Alert(user_id=user.id, alert_type="MARKET_SIGNAL", severity="low", title="t",
              message="read already", is_read=True, created_at=MORNING),
    ])
    await db_session.commit()
    return user


@pytest.mark.asyncio
class TestBriefingRepository:

    async def test_reads_are_windowed_and_scoped(self, session_factory, seeded):
        repository = BriefingRepository(session_factory)
        since, until = datetime(2026, 3, 1), datetime(2026, 3, 2, 23, 59, 59)

        opportunities = await repository.new_opportunities(seeded.id, since, until)
        assert [o.title for o in opportunities] == ["AI Act"]

        activities = await repository.competitor_activities(seeded.id, since, until)
        assert [a.threat_level for a in activities] == ["HIGH"]

        procurements = await repository.upcoming_procurements(
            seeded.id, datetime(2026, 3, 2), datetime(2026, 3, 16)
        )
        assert [p.title for p in procurements] == ["Soon"]

        executives = await repository.vulnerable_executives(seeded.id, since, until)
        assert [e.name for e in executives] == ["Dana"]
        assert executives[0].company.name == "Acme"

        alerts = await repository.unread_alerts(seeded.id, since, until)
        assert [a.message for a in alerts] == ["Acme raised"]

    async def test_pressured_companies_load_only_vulnerable_executives(self, session_factory, seeded):
        companies = await BriefingRepository(session_factory).pressured_companies(seeded.id)
        assert [c.name for c in companies] == ["Acme"]
        assert [e.name for e in companies[0].executives] == ["Dana"]


@pytest.mark.asyncio
class TestBriefingService:

    async def test_generate_persists_and_regenerates(self, session_factory, seeded):
        clock = lambda: MORNING  # noqa: E731

        briefing = await generate_briefing(session_factory, seeded.id, DAY, clock=clock)

        assert briefing["stats"] == {
            "new_opportunities": 1,
            "competitor_activities": 1,
            "government_updates": 1,
            "executive_alerts": 1,
            "total_alerts": 1,
            "high_priority_items": 1,
        }
        assert briefing["upcoming_deadlines"][0]["days_until"] == 5
        assert briefing["executive_alerts"][0]["change_type"] == "increase"
        assert briefing["executive_alerts"][0]["change_amount"] == 18
        assert [i["title"] for i in briefing["action_items"]] == [
            "Research opportunity: AI Act",
            "Prepare bid: Soon",
            "Engage with Dana",
            "Address alert",
        ]

        assert await get_briefing(session_factory, seeded.id, DAY) == briefing

        again = await generate_briefing(session_factory, seeded.id, DAY, clock=clock)
        history = await list_briefings(session_factory, seeded.id)
        assert len(history) == 1
        assert history[0]["date"] == "2026-03-02"
        assert history[0]["action_items"] == len(again["action_items"])

    async def test_empty_day(self, session_factory, user):
        briefing = await generate_briefing(session_factory, user.id, date(2025, 1, 1))

        assert briefing["executive_summary"] == FALLBACK_SUMMARY
        assert briefing["action_items"] == []
        assert await get_briefing(session_factory, user.id, date(2025, 1, 2)) is None

    async def test_generate_for_all_users(self, session_factory, user, other_user):
        result = await generate_for_all_users(session_factory, DAY)

        assert result == {"generated": 2, "failed": 0}
        assert await get_briefing(session_factory, other_user.id, DAY) is not None

"""
Integration tests for the write paths: score recomputation and
threshold-crossing alerts against a real (SQLite) database.
"""
from datetime import timedelta

import pytest

from regintel.alerts.service import list_alerts, mark_all_read, mark_read, unread_count
from regintel.companies import service as companies
from regintel.core.utils import utcnow
from regintel.opportunities import service as opportunities
from regintel.procurement import service as procurement
from regintel.scoring.rescoring import rescore_user


def company_data(**overrides):
    data = {
        "name": "Acme Robotics",
        "industry": "Robotics",
        "last_funding_round": "Series C",
        "last_funding_amount": 60_000_000,
        "last_funding_date": utcnow() - timedelta(days=15),
        "gtm_gap_detected": True,
        "executive_turnover": True,
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
class TestCompanyScoring:

    async def test_create_scores_and_alerts_once(self, db_session, user):
        company = await companies.create_company(db_session, user.id, company_data())

        assert company.pressure_score == 95
        alerts = await list_alerts(db_session, user.id)
        assert [a.alert_type for a in alerts] == ["FUNDING_ROUND"]
        assert alerts[0].company_id == company.id
        assert "raised Series C 15 days ago." in alerts[0].message

        # Still high after an unrelated edit: no second alert
        await companies.update_company(db_session, user.id, company.id, {"analysis_notes": "Watch"})
        assert len(await list_alerts(db_session, user.id)) == 1

    async def test_low_pressure_company_does_not_alert(self, db_session, user):
        company = await companies.create_company(
            db_session, user.id, company_data(last_funding_date=None, executive_turnover=False)
        )
        assert company.pressure_score == 45
        assert await list_alerts(db_session, user.id) == []

    async def test_update_crossing_upwards_alerts(self, db_session, user):
        company = await companies.create_company(
            db_session, user.id, company_data(gtm_gap_detected=False, executive_turnover=False)
        )
        assert company.pressure_score == 50

        updated = await companies.update_company(
            db_session, user.id, company.id, {"gtm_gap_detected": True}
        )
        assert updated.pressure_score == 75
        assert len(await list_alerts(db_session, user.id)) == 1

    async def test_other_users_company_is_invisible(self, db_session, user, other_user):
        company = await companies.create_company(db_session, user.id, company_data())

        assert await companies.get_company(db_session, other_user.id, company.id) is None
        assert await companies.update_company(db_session, other_user.id, company.id, {"name": "X"}) is None
        assert await companies.delete_company(db_session, other_user.id, company.id) is False


@pytest.mark.asyncio
class TestExecutiveScoring:

    async def test_executive_write_recomputes_company_pressure(self, db_session, user):
        company = await companies.create_company(
            db_session, user.id, company_data(executive_turnover=False)
        )
        assert company.pressure_score == 75

        executive = await companies.create_executive(db_session, user.id, {
            "company_id": company.id,
            "name": "Dana Reyes",
            "title": "CMO",
            "risk_factors": ["board_pressure", "pipeline_pressure"],
            "desperation_signals": [],
        })

        # 20 title + 35 risk + 10 company gap + 10 recent funding
        assert executive.vulnerability_score == 75
        assert executive.previous_vulnerability_score is None
        assert company.pressure_score == 75 + 3

        alerts = await list_alerts(db_session, user.id, alert_type="EXECUTIVE_VULNERABILITY")
        assert len(alerts) == 1
        assert alerts[0].executive_id == executive.id

    async def test_score_change_keeps_previous_value(self, db_session, user):
        company = await companies.create_company(db_session, user.id, company_data())
        executive = await companies.create_executive(db_session, user.id, {
            "company_id": company.id, "name": "Sam Lee", "title": "VP Sales", "risk_factors": [],
        })
        first = executive.vulnerability_score

        updated = await companies.update_executive(
            db_session, user.id, executive.id, {"risk_factors": ["no_gtm_team"]}
        )
        assert updated.vulnerability_score == first + 15
        assert updated.previous_vulnerability_score == first

    async def test_unknown_company_returns_none(self, db_session, user):
        assert await companies.create_executive(db_session, user.id, {
            "company_id": 999, "name": "Nobody", "title": "CEO",
        }) is None

    async def test_deleting_executive_lowers_pressure(self, db_session, user):
        company = await companies.create_company(
            db_session, user.id, company_data(last_funding_date=None, executive_turnover=False)
        )
        executive = await companies.create_executive(db_session, user.id, {
            "company_id": company.id,
            "name": "Kim",
            "title": "Chief Revenue Officer",
            "risk_factors": ["board_pressure", "public_criticism"],
        })
        with_exec = (await companies.get_company(db_session, user.id, company.id)).pressure_score

        assert await companies.delete_executive(db_session, user.id, executive.id) is True
        refreshed = await companies.get_company(db_session, user.id, company.id)
        assert refreshed.pressure_score < with_exec
        assert refreshed.executives == []


@pytest.mark.asyncio
class TestOpportunities:

    async def test_create_computes_lead_time_and_score(self, db_session, user):
        opportunity = await opportunities.create_opportunity(db_session, user.id, {
            "title": "EU AI Act conformity",
            "description": "High-risk system audits",
            "regulation_type": "AI",
            "implementation_date": utcnow() + timedelta(days=620),
            "revenue_potential": "HIGH",
            "market_gap": "VERY_HIGH",
            "competition_level": "NONE",
            "status": "PURSUING",
        })
        assert opportunity.lead_time_months == 20
        assert opportunity.opportunity_score == 100

        lost = await opportunities.update_opportunity(
            db_session, user.id, opportunity.id, {"status": "LOST"}
        )
        # 155 halved -> 77.5 -> 78
        assert lost.opportunity_score == 78

    async def test_competitor_alert_on_high_and_escalation(self, db_session, user):
        opportunity = await opportunities.create_opportunity(db_session, user.id, {
            "title": "NIS2", "description": "Cyber", "regulation_type": "Cyber",
        })
        base = {
            "opportunity_id": opportunity.id,
            "competitor_name": "Rival GmbH",
            "activity_type": "partnership",
            "activity_date": utcnow(),
            "description": "Announced a reseller deal",
        }

        await opportunities.create_competitor_activity(db_session, user.id, {**base, "threat_level": "LOW"})
        assert await list_alerts(db_session, user.id) == []

        critical = await opportunities.create_competitor_activity(
            db_session, user.id, {**base, "threat_level": "CRITICAL"}
        )
        alerts = await list_alerts(db_session, user.id)
        assert [(a.alert_type, a.severity) for a in alerts] == [("COMPETITOR_ACTIVITY", "critical")]

        # Already high: moving CRITICAL -> HIGH does not re-alert
        await opportunities.update_competitor_activity(db_session, user.id, critical.id, {"threat_level": "HIGH"})
        assert len(await list_alerts(db_session, user.id)) == 1

    async def test_competitor_activity_scoped_through_opportunity(self, db_session, user, other_user):
        opportunity = await opportunities.create_opportunity(db_session, user.id, {
            "title": "DORA", "description": "Finance", "regulation_type": "Finance",
        })
        assert await opportunities.create_competitor_activity(db_session, other_user.id, {
            "opportunity_id": opportunity.id,
            "competitor_name": "Rival",
            "activity_type": "hiring",
            "activity_date": utcnow(),
            "description": "x",
        }) is None
        assert await opportunities.list_competitor_activities(db_session, other_user.id) == []

    async def test_research_task_cannot_move_to_foreign_opportunity(self, db_session, user, other_user):
        foreign = await opportunities.create_opportunity(db_session, other_user.id, {
            "title": "MiCA", "description": "Crypto", "regulation_type": "Finance",
        })
        task = await opportunities.create_research_task(db_session, user.id, {"title": "Scope licences"})

        assert await opportunities.update_research_task(
            db_session, user.id, task.id, {"opportunity_id": foreign.id}
        ) is None

        unchanged = await opportunities.get_research_task(db_session, user.id, task.id)
        assert unchanged.opportunity_id is None
        detail = await opportunities.get_opportunity(db_session, other_user.id, foreign.id, detail=True)
        assert detail.research_tasks == []

    async def test_research_task_completion_stamp(self, db_session, user):
        task = await opportunities.create_research_task(db_session, user.id, {
            "title": "Map notified bodies", "status": "pending",
        })
        assert task.completed_at is None

        done = await opportunities.update_research_task(db_session, user.id, task.id, {"status": "completed"})
        assert done.completed_at is not None

        reopened = await opportunities.update_research_task(db_session, user.id, task.id, {"status": "in_progress"})
        assert reopened.completed_at is None


@pytest.mark.asyncio
class TestProcurement:

    async def test_intake_alerts(self, db_session, user):
        await procurement.create_procurement(db_session, user.id, {
            "title": "Municipal cloud migration",
            "description": "Lot 1",
            "region": "Bavaria",
            "issuing_authority": "City of Munich",
            "publish_date": utcnow(),
            "submission_deadline": utcnow() + timedelta(days=5),
            "service_gap": True,
        })

        alerts = await list_alerts(db_session, user.id)
        by_type = {a.alert_type: a for a in alerts}
        assert set(by_type) == {"PROCUREMENT_MATCH", "MARKET_SIGNAL"}
        assert by_type["PROCUREMENT_MATCH"].severity == "high"
        assert by_type["MARKET_SIGNAL"].title.startswith("Service Gap Identified")

    async def test_far_or_past_deadlines_do_not_alert(self, db_session, user):
        for days in (45, -3):
            await procurement.create_procurement(db_session, user.id, {
                "title": f"Tender {days}",
                "description": "Lot",
                "region": "Hesse",
                "issuing_authority": "State",
                "publish_date": utcnow(),
                "submission_deadline": utcnow() + timedelta(days=days),
            })
        assert await list_alerts(db_session, user.id) == []

    async def test_contacts_link_to_procurements(self, db_session, user):
        contact = await procurement.create_contact(db_session, user.id, {
            "name": "Dr. Weber", "title": "Head of IT", "department": "Digital Office", "role": "Buyer",
            "influence": "KEY_DECISION_MAKER",
        })
        tender = await procurement.create_procurement(db_session, user.id, {
            "title": "Data platform",
            "description": "Lot",
            "region": "Berlin",
            "issuing_authority": "Senate",
            "publish_date": utcnow(),
            "contact_ids": [contact.id],
        })
        assert [c.id for c in tender.contacts] == [contact.id]

        contacts = await procurement.list_contacts(db_session, user.id)
        assert procurement.influence_distribution(contacts)["KEY_DECISION_MAKER"] == 1
        assert procurement.department_summary(contacts)[0]["key_decision_makers"] == 1


@pytest.mark.asyncio
class TestAlertsAndRescoring:

    async def test_read_state(self, db_session, user):
        await companies.create_company(db_session, user.id, company_data())
        await companies.create_company(db_session, user.id, company_data(name="Beta"))
        assert await unread_count(db_session, user.id) == 2

        first = (await list_alerts(db_session, user.id))[0]
        await mark_read(db_session, user.id, first.id)
        assert await unread_count(db_session, user.id) == 1

        assert await mark_all_read(db_session, user.id) == 1
        assert await unread_count(db_session, user.id) == 0

    async def test_rescore_decays_funding_recency(self, db_session, session_factory, user):
        company = await companies.create_company(
            db_session, user.id, company_data(gtm_gap_detected=False, executive_turnover=False)
        )
        assert company.pressure_score == 50

        later = utcnow() + timedelta(days=200)
        changed = await rescore_user(session_factory, user.id, now=later)

        assert changed["companies"] == 1
        assert changed["opportunities"] == 0
        async with session_factory() as session:
            refreshed = await companies.get_company(session, user.id, company.id)
        assert refreshed.pressure_score == 20

"""
API tests through the FastAPI TestClient: auth, validation, CRUD and the
briefing endpoints.
"""
from datetime import timedelta

from regintel.core.utils import utcnow

ADMIN_EMAIL = "admin@regintel.test"


def days_from_now(days):
    return (utcnow() + timedelta(days=days)).isoformat()


COMPANY = {
    "name": "Acme Robotics",
    "industry": "Robotics",
    "last_funding_round": "Series C",
    "last_funding_amount": 60_000_000,
    "gtm_gap_detected": True,
    "executive_turnover": True,
}


def create_company(client, **overrides):
    body = {**COMPANY, "last_funding_date": days_from_now(-15), **overrides}
    response = client.post("/api/companies", json=body)
    assert response.status_code == 200
    return response.json()["data"]


class TestAuthAndValidation:

    def test_health_is_public(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_missing_credentials(self, test_client):
        assert test_client.get("/api/companies").status_code == 401

    def test_wrong_password(self, test_client):
        response = test_client.get("/api/companies", auth=(ADMIN_EMAIL, "wrong"))
        assert response.status_code == 401

    def test_me(self, api_client):
        data = api_client.get("/api/auth/me").json()["data"]
        assert data["email"] == ADMIN_EMAIL
        assert "password_hash" not in data

    def test_invalid_body_is_400(self, api_client):
        response = api_client.post("/api/companies", json={"industry": "Robotics"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid input"

    def test_invalid_enum_query_is_400(self, api_client):
        assert api_client.get("/api/alerts", params={"severity": "urgent"}).status_code == 400

    def test_out_of_range_win_probability_is_400(self, api_client):
        response = api_client.post("/api/procurement", json={
            "title": "T", "description": "D", "region": "Berlin", "issuing_authority": "Senate",
            "publish_date": days_from_now(0), "win_probability": 120,
        })
        assert response.status_code == 400


class TestCompaniesAndExecutives:

    def test_company_lifecycle(self, api_client):
        company = create_company(api_client)
        assert company["pressure_score"] == 95

        listing = api_client.get("/api/companies").json()["data"]
        assert [c["name"] for c in listing["companies"]] == ["Acme Robotics"]

        detail = api_client.get(f"/api/companies/{company['id']}").json()["data"]
        assert detail["chaos_indicators"]["funding_pressure"] is True
        assert detail["chaos_indicators"]["recent_alerts"] == 1
        assert [a["alert_type"] for a in detail["alerts"]] == ["FUNDING_ROUND"]

        updated = api_client.patch(f"/api/companies/{company['id']}", json={"executive_turnover": False})
        assert updated.json()["data"]["pressure_score"] == 75

        assert api_client.delete(f"/api/companies/{company['id']}").status_code == 200
        assert api_client.get(f"/api/companies/{company['id']}").status_code == 404

    def test_null_for_required_field_is_400(self, api_client):
        company = create_company(api_client)

        response = api_client.patch(f"/api/companies/{company['id']}", json={"name": None})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid input"

        # Nullable columns can still be cleared
        cleared = api_client.patch(f"/api/companies/{company['id']}", json={"website": None})
        assert cleared.status_code == 200
        assert cleared.json()["data"]["name"] == "Acme Robotics"

    def test_null_research_task_status_is_400(self, api_client):
        task = api_client.post("/api/research-tasks", json={"title": "Map notified bodies"}).json()["data"]
        response = api_client.patch(f"/api/research-tasks/{task['id']}", json={"status": None})
        assert response.status_code == 400

    def test_unknown_company_is_404(self, api_client):
        assert api_client.get("/api/companies/4242").status_code == 404
        assert api_client.patch("/api/companies/4242", json={"name": "X"}).status_code == 404

    def test_executive_scored_on_create(self, api_client):
        company = create_company(api_client, executive_turnover=False)

        response = api_client.post("/api/executives", json={
            "company_id": company["id"],
            "name": "Dana Reyes",
            "title": "CMO",
            "risk_factors": ["board_pressure", "pipeline_pressure"],
        })
        assert response.status_code == 200
        executive = response.json()["data"]
        assert executive["vulnerability_score"] == 75

        detail = api_client.get(f"/api/executives/{executive['id']}").json()["data"]
        assert detail["company"]["pressure_score"] == 78

    def test_executive_for_unknown_company_is_404(self, api_client):
        response = api_client.post("/api/executives", json={"company_id": 999, "name": "N", "title": "CEO"})
        assert response.status_code == 404


class TestOpportunities:

    def test_create_score_and_notes(self, api_client):
        response = api_client.post("/api/opportunities", json={
            "title": "EU AI Act conformity",
            "description": "High-risk system audits",
            "regulation_type": "AI",
            "implementation_date": days_from_now(620),
            "revenue_potential": "HIGH",
            "market_gap": "VERY_HIGH",
            "competition_level": "NONE",
            "status": "PURSUING",
        })
        assert response.status_code == 200
        opportunity = response.json()["data"]
        assert opportunity["opportunity_score"] == 100
        assert opportunity["lead_time_months"] == 20

        note = api_client.post(f"/api/opportunities/{opportunity['id']}/notes", json={"content": "Call notified body"})
        assert note.status_code == 200

        detail = api_client.get(f"/api/opportunities/{opportunity['id']}").json()["data"]
        assert [n["content"] for n in detail["notes"]] == ["Call notified body"]

        listing = api_client.get("/api/opportunities", params={"status": "PURSUING"}).json()["data"]
        assert listing[0]["counts"]["notes"] == 1

    def test_note_on_unknown_opportunity_is_404(self, api_client):
        response = api_client.post("/api/opportunities/999/notes", json={"content": "x"})
        assert response.status_code == 404


class TestAlerts:

    def test_procurement_intake_and_read_state(self, api_client):
        response = api_client.post("/api/procurement", json={
            "title": "Municipal cloud migration",
            "description": "Lot 1",
            "region": "Bavaria",
            "issuing_authority": "City of Munich",
            "publish_date": days_from_now(0),
            "submission_deadline": days_from_now(5),
        })
        assert response.status_code == 200

        alerts = api_client.get("/api/alerts", params={"unread_only": True}).json()["data"]
        assert [a["alert_type"] for a in alerts] == ["PROCUREMENT_MATCH"]
        assert api_client.get("/api/alerts/unread-count").json()["data"] == {"unread": 1}

        read = api_client.patch(f"/api/alerts/{alerts[0]['id']}", json={"is_read": True})
        assert read.json()["data"]["is_read"] is True
        assert api_client.get("/api/alerts/unread-count").json()["data"] == {"unread": 0}

    def test_mark_all_read(self, api_client):
        create_company(api_client)
        create_company(api_client, name="Beta")

        assert api_client.post("/api/alerts/mark-all-read").json()["data"] == {"updated": 2}
        assert api_client.get("/api/alerts", params={"unread_only": True}).json()["data"] == []

    def test_unknown_alert_is_404(self, api_client):
        assert api_client.patch("/api/alerts/999", json={"is_read": True}).status_code == 404


class TestBriefingsAndDashboard:

    def test_generate_fetch_history_and_markdown(self, api_client):
        create_company(api_client)
        today = utcnow().date().isoformat()

        generated = api_client.post("/api/briefings/generate", json={"date": today})
        assert generated.status_code == 200
        briefing = generated.json()["data"]
        assert briefing["date"] == today
        assert briefing["stats"]["total_alerts"] == 1

        fetched = api_client.get("/api/briefings", params={"date": today}).json()["data"]
        assert fetched == briefing

        history = api_client.get("/api/briefings/history").json()["data"]
        assert [h["date"] for h in history] == [today]

        markdown = api_client.get(f"/api/briefings/{today}/markdown")
        assert markdown.status_code == 200
        assert markdown.headers["content-type"].startswith("text/markdown")
        assert markdown.text.startswith("# Daily Briefing")

    def test_missing_briefing(self, api_client):
        assert api_client.get("/api/briefings", params={"date": "2020-01-01"}).json()["data"] is None
        assert api_client.get("/api/briefings/2020-01-01/markdown").status_code == 404

    def test_dashboard_stats(self, api_client):
        create_company(api_client)
        api_client.post("/api/research-tasks", json={"title": "Map notified bodies"})

        stats = api_client.get("/api/dashboard/stats").json()["data"]
        assert stats["tracked_companies"] == 1
        assert stats["high_pressure_companies"] == 1
        assert stats["pending_research_tasks"] == 1
        assert stats["unread_alerts"] == 1
        assert stats["total_opportunities"] == 0

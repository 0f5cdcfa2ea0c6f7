from datetime import date, datetime, timezone

from onboarding_hub.services.reporting_service import (
    average_onboarding_days,
    engagement_stats,
    monthly_growth,
    risk_stats,
    step_stats,
    trailing_months,
)


class TestStatsFunctions:
    def test_engagement_stats(self):
        stats = engagement_stats(["sent", "sent", "completed", "draft", "archived"])
        assert stats.sent == 2
        assert stats.completed == 1
        assert stats.draft == 1
        assert stats.in_progress == 0
        assert stats.total == 5  # unknown values count toward the total only

    def test_step_stats_empty(self):
        stats = step_stats([])
        assert stats.total == 0
        assert stats.not_started == 0

    def test_risk_stats_by_severity(self):
        stats = risk_stats([
            ("open", "high"),
            ("open", "critical"),
            ("mitigated", "high"),
            ("closed", "low"),
        ])
        assert stats.open == 2
        assert stats.mitigated == 1
        assert stats.closed == 1
        assert stats.total == 4
        assert stats.by_severity.high == 2
        assert stats.by_severity.critical == 1
        assert stats.by_severity.medium == 0


class TestAverageOnboardingDays:
    def test_rounds_half_up(self):
        rows = [
            ("completed", "2024-01-01T00:00:00Z", "2024-01-06T00:00:00Z"),
            ("completed", "2024-01-01T00:00:00Z", "2024-01-09T00:00:00Z"),
        ]
        assert average_onboarding_days(rows) == 7

    def test_partial_days_round_up_per_step(self):
        rows = [("completed", "2024-01-01T00:00:00Z", "2024-01-03T12:00:00Z")]
        assert average_onboarding_days(rows) == 3

    def test_ignores_incomplete_and_undated(self):
        rows = [
            ("in_progress", "2024-01-01", "2024-02-01"),
            ("completed", None, "2024-02-01"),
            ("completed", "2024-01-01", None),
            ("completed", "2024-01-01", "2024-01-03"),
        ]
        assert average_onboarding_days(rows) == 2

    def test_nothing_qualifies(self):
        assert average_onboarding_days([]) == 0

    def test_skips_unparseable_dates(self):
        rows = [
            ("completed", "01/01/2024", "2024-01-08"),
            ("completed", "2024-01-01", "someday"),
            ("completed", "2024-01-01", "2024-01-08"),
        ]
        assert average_onboarding_days(rows) == 7


class TestGrowth:
    def test_trailing_months_cross_year(self):
        months = trailing_months(date(2024, 2, 10), 3)
        assert months == [(2023, 12), (2024, 1), (2024, 2)]

    def test_twelve_buckets_always(self):
        growth = monthly_growth([], [], today=date(2024, 6, 15))
        assert len(growth) == 12
        assert growth[0].month == "2023-07"
        assert growth[0].label == "Jul 2023"
        assert growth[-1].month == "2024-06"
        assert all(g.client_count == 0 and g.engagement_count == 0 for g in growth)

    def test_counts_by_month(self):
        growth = monthly_growth(
            ["2024-06-01T10:00:00Z", "2024-06-20T10:00:00Z", "2024-01-05T00:00:00Z", "2022-01-01T00:00:00Z"],
            ["2024-06-02T10:00:00Z"],
            today=date(2024, 6, 15),
        )
        by_month = {g.month: g for g in growth}
        assert by_month["2024-06"].client_count == 2
        assert by_month["2024-06"].engagement_count == 1
        assert by_month["2024-01"].client_count == 1
        assert sum(g.client_count for g in growth) == 3


class TestReportingAPI:
    def _create_client(self, client, name="Acme Corp"):
        return client.post("/api/v1/clients", json={"name": name}).json()["id"]

    def test_completed_step_feeds_average(self, client):
        cid = self._create_client(client, "Acme Co")
        r = client.post(
            f"/api/v1/clients/{cid}/documents",
            files={"file": ("sow.pdf", b"%PDF-1.4 statement of work", "application/pdf")},
        )
        assert r.status_code == 201

        r = client.post(f"/api/v1/clients/{cid}/onboarding-steps", json={
            "title": "Kickoff",
            "status": "not_started",
        })
        step_id = r.json()["id"]
        assert client.get("/api/v1/reporting/average-onboarding-time").json()["average_days"] == 0

        r = client.put(f"/api/v1/onboarding-steps/{step_id}", json={
            "status": "completed",
            "start_date": "2024-01-01",
            "end_date": "2024-01-08",
        })
        assert r.status_code == 200

        r = client.get("/api/v1/reporting/average-onboarding-time")
        assert r.status_code == 200
        assert r.json()["average_days"] == 7
        assert client.get("/api/v1/reporting").json()["average_onboarding_days"] == 7
        docs = client.get(f"/api/v1/clients/{cid}/documents").json()
        assert [d["file_name"] for d in docs] == ["sow.pdf"]

    def test_average_onboarding_time(self, client):
        cid = self._create_client(client)
        for start, end in [("2024-01-01", "2024-01-06"), ("2024-01-01", "2024-01-09")]:
            client.post(f"/api/v1/clients/{cid}/onboarding-steps", json={
                "title": f"Step {end}",
                "status": "completed",
                "start_date": start,
                "end_date": end,
            })
        client.post(f"/api/v1/clients/{cid}/onboarding-steps", json={
            "title": "Still going",
            "status": "in_progress",
            "start_date": "2024-01-01",
            "end_date": "2024-03-01",
        })

        r = client.get("/api/v1/reporting/average-onboarding-time")
        assert r.status_code == 200
        assert r.json()["average_days"] == 7

    def test_summary(self, client):
        cid = self._create_client(client)
        self._create_client(client, "Globex")
        client.post(f"/api/v1/clients/{cid}/risks", json={"title": "Budget", "severity": "high"})
        client.post(f"/api/v1/clients/{cid}/onboarding-steps", json={"title": "Kickoff"})
        client.post(f"/api/v1/clients/{cid}/engagements", json={
            "client_email": "ceo@acme.example.com",
            "welcome_message": "Welcome!",
        })

        r = client.get("/api/v1/reporting")
        assert r.status_code == 200
        data = r.json()
        assert data["total_clients"] == 2
        assert data["engagements"]["sent"] == 1
        assert data["onboarding_steps"]["not_started"] == 1
        assert data["risks"]["open"] == 1
        assert data["risks"]["by_severity"]["high"] == 1
        assert data["average_onboarding_days"] == 0
        assert len(data["growth"]) == 12

        this_month = datetime.now(timezone.utc).strftime("%Y-%m")
        assert data["growth"][-1]["month"] == this_month
        assert data["growth"][-1]["client_count"] == 2
        assert data["growth"][-1]["engagement_count"] == 1

    def test_per_client_stats(self, client):
        cid = self._create_client(client)
        other = self._create_client(client, "Globex")
        client.post(f"/api/v1/clients/{cid}/risks", json={"title": "A"})
        client.post(f"/api/v1/clients/{other}/risks", json={"title": "B"})
        client.post(f"/api/v1/clients/{other}/risks", json={"title": "C"})

        assert client.get("/api/v1/reporting/risks").json()["total"] == 3
        assert client.get("/api/v1/reporting/risks", params={"client_id": cid}).json()["total"] == 1
        assert client.get("/api/v1/reporting/engagements", params={"client_id": cid}).json()["total"] == 0
        assert client.get("/api/v1/reporting/onboarding-steps").json()["total"] == 0

    def test_growth_endpoint(self, client):
        r = client.get("/api/v1/reporting/growth")
        assert r.status_code == 200
        assert len(r.json()) == 12

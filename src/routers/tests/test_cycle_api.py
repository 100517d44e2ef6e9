"""HTTP tests for the health, cycle and moon endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from src.routers.tests.conftest import V1


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["engine_config"] == "1.0"

    def test_security_headers(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["Cache-Control"] == "no-store"


class TestProfileEndpoints:
    def test_default_profile(self, client: TestClient) -> None:
        body = client.get(f"{V1}/cycle/profile").json()
        assert body == {
            "anchor_date": None,
            "cycle_length": 28,
            "period_length": 5,
            "life_stage": "regular",
        }

    def test_update_profile(self, client: TestClient) -> None:
        response = client.put(
            f"{V1}/cycle/profile",
            json={"anchor_date": "2026-02-01", "cycle_length": 30, "life_stage": "perimenopause"},
        )
        assert response.status_code == 200
        assert response.json()["cycle_length"] == 30
        assert response.json()["life_stage"] == "perimenopause"

    def test_degenerate_profile_rejected(self, client: TestClient) -> None:
        response = client.put(f"{V1}/cycle/profile", json={"cycle_length": 15})
        assert response.status_code == 422
        assert "luteal" in response.json()["detail"]

    def test_schema_bounds(self, client: TestClient) -> None:
        response = client.put(f"{V1}/cycle/profile", json={"period_length": 40})
        assert response.status_code == 422

    def test_empty_update(self, client: TestClient) -> None:
        assert client.put(f"{V1}/cycle/profile", json={}).status_code == 400

    def test_reset(self, anchored: TestClient) -> None:
        assert anchored.delete(f"{V1}/cycle/profile").status_code == 204
        assert anchored.get(f"{V1}/cycle/profile").json()["anchor_date"] is None


class TestPhaseEndpoints:
    def test_no_anchor(self, client: TestClient) -> None:
        body = client.get(f"{V1}/cycle/phase").json()
        assert body["has_anchor"] is False
        assert body["snapshot"] is None

    def test_snapshot(self, anchored: TestClient) -> None:
        body = anchored.get(
            f"{V1}/cycle/phase", params={"now": "2026-02-15T08:00:00"}
        ).json()
        assert body["has_anchor"] is True
        assert body["snapshot"]["day_of_cycle"] == 15
        assert body["snapshot"]["phase"] == "ovulatory"
        assert body["snapshot"]["next_occurrence_date"] == "2026-03-01"
        assert body["snapshot"]["days_until_next_occurrence"] == 14
        assert body["info"]["name"] == "Ovulatory"

    def test_resolved_phase_lunar(self, client: TestClient) -> None:
        client.put(f"{V1}/cycle/profile", json={"life_stage": "menopause"})
        body = client.get(
            f"{V1}/cycle/resolved-phase", params={"now": "2026-03-04T12:00:00"}
        ).json()
        assert body == {"phase": "ovulatory", "cycle_day": None, "source": "lunar"}

    def test_resolved_phase_lunar_before_epoch(self, client: TestClient) -> None:
        client.put(f"{V1}/cycle/profile", json={"life_stage": "menopause"})
        response = client.get(
            f"{V1}/cycle/resolved-phase", params={"now": "1999-06-01T00:00:00"}
        )
        assert response.status_code == 422
        assert "epoch" in response.json()["detail"]

    def test_fertility(self, anchored: TestClient) -> None:
        body = anchored.get(f"{V1}/cycle/fertility", params={"now": "2026-02-15T08:00:00"}).json()
        assert body["ovulation_date"] == "2026-02-15"
        assert body["fertile_window_start"] == "2026-02-10"
        assert body["fertile_window_end"] == "2026-02-16"
        assert body["in_fertile_window"] is True
        assert body["is_ovulation_day"] is True
        assert body["in_period"] is False

    def test_fertility_without_anchor(self, client: TestClient) -> None:
        body = client.get(f"{V1}/cycle/fertility").json()
        assert body["ovulation_date"] is None
        assert body["in_fertile_window"] is False


class TestPeriodEndpoints:
    def test_log_start_moves_anchor(self, client: TestClient) -> None:
        response = client.post(f"{V1}/cycle/periods", json={"start_date": "2026-01-01"})
        assert response.status_code == 201
        assert response.json()["period_length"] == 5
        assert client.get(f"{V1}/cycle/profile").json()["anchor_date"] == "2026-01-01"

    def test_log_end_and_stats(self, client: TestClient) -> None:
        first = client.post(f"{V1}/cycle/periods", json={"start_date": "2026-01-01"}).json()
        client.post(f"{V1}/cycle/periods", json={"start_date": "2026-01-30"})
        response = client.patch(
            f"{V1}/cycle/periods/{first['period_id']}/end", json={"end_date": "2026-01-04"}
        )
        assert response.status_code == 200
        assert response.json()["period_length"] == 4

        stats = client.get(f"{V1}/cycle/stats").json()
        assert stats["total_cycles_tracked"] == 2
        assert stats["average_cycle_length"] == 29.0
        assert stats["is_irregular"] is False
        assert len(client.get(f"{V1}/cycle/periods").json()) == 2

    def test_unknown_period(self, client: TestClient) -> None:
        response = client.patch(f"{V1}/cycle/periods/missing/end", json={"end_date": "2026-01-04"})
        assert response.status_code == 404
        assert client.delete(f"{V1}/cycle/periods/missing").status_code == 404

    def test_end_before_start_keeps_period_reachable(self, client: TestClient) -> None:
        record = client.post(f"{V1}/cycle/periods", json={"start_date": "2026-02-10"}).json()
        body = client.patch(
            f"{V1}/cycle/periods/{record['period_id']}/end", json={"end_date": "2026-02-01"}
        ).json()
        assert body["period_length"] == 1
        assert body["end_date"] == "2026-02-10"
        fertility = client.get(
            f"{V1}/cycle/fertility", params={"now": "2026-02-10T09:00:00"}
        ).json()
        assert fertility["in_period"] is True

    def test_delete_period(self, client: TestClient) -> None:
        record = client.post(f"{V1}/cycle/periods", json={"start_date": "2026-01-01"}).json()
        assert client.delete(f"{V1}/cycle/periods/{record['period_id']}").status_code == 204
        assert client.get(f"{V1}/cycle/periods").json() == []


class TestMoonEndpoints:
    def test_moon_phase(self, client: TestClient) -> None:
        body = client.get(f"{V1}/moon/phase", params={"now": "2026-03-04T12:00:00"}).json()
        assert body["lunar_phase"] == "full_moon"
        assert body["corresponding_cycle_phase"] == "ovulatory"
        assert body["name"] == "Full Moon"

    def test_before_epoch(self, client: TestClient) -> None:
        response = client.get(f"{V1}/moon/phase", params={"now": "1999-01-01T00:00:00"})
        assert response.status_code == 422

    def test_correspondence(self, client: TestClient) -> None:
        body = client.get(f"{V1}/moon/correspondence").json()
        assert len(body) == 8
        assert body[0]["lunar_phase"] == "new_moon"
        assert body[0]["start_day"] == 0.0
        assert body[-1]["cycle_phase"] == "menstrual"

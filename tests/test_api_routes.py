import unittest
from datetime import date, timedelta
from unittest.mock import MagicMock

from factories import TODAY, add_device, add_location, add_log, add_user, make_session_factory
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from asset_tracker.api.dependencies import get_alert_service, get_analytics_service, get_repository
from asset_tracker.core.exceptions import DataAccessError
from asset_tracker.database.connection import get_database
from asset_tracker.main import app
from asset_tracker.models.system_alert import SystemAlert
from asset_tracker.models.user import User
from asset_tracker.models.utilization_log import UtilizationLog
from asset_tracker.services.alert_service import AlertService
from asset_tracker.services.analytics_service import AnalyticsService


def fixed_alert_service(repository=Depends(get_repository)):
    return AlertService(repository, today=lambda: TODAY)


def fixed_analytics_service(repository=Depends(get_repository)):
    return AnalyticsService(repository, today=lambda: TODAY)


class ApiTestCase(unittest.TestCase):
    """Routes wired to an in-memory database with a fixed calendar"""

    def setUp(self):
        Session = make_session_factory()

        def override_database():
            db = Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_database] = override_database
        app.dependency_overrides[get_alert_service] = fixed_alert_service
        app.dependency_overrides[get_analytics_service] = fixed_analytics_service
        self.client = TestClient(app)
        self.session = Session()

    def tearDown(self):
        app.dependency_overrides.clear()
        self.session.close()


class TestHealthRoutes(ApiTestCase):

    def test_health(self):
        response = self.client.get("/api/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_detailed_health_counts_rows(self):
        device = add_device(self.session)
        add_log(self.session, device, 4, TODAY)
        body = self.client.get("/api/v1/health/detailed").json()
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["tables"], {
            "devices": 1, "locations": 0, "utilization_logs": 1, "system_alerts": 0,
        })
        self.assertEqual(body["active_alerts"], 0)

    def test_detailed_health_reports_database_failure(self):
        broken = MagicMock()
        broken.query.side_effect = OperationalError("SELECT", {}, Exception("down"))
        app.dependency_overrides[get_database] = lambda: broken
        body = self.client.get("/api/v1/health/detailed").json()
        self.assertEqual(body["status"], "unhealthy")
        self.assertEqual(body["database"], "disconnected")

    def test_root(self):
        self.assertEqual(self.client.get("/").json()["health"], "/api/v1/health")


class TestDeviceRoutes(ApiTestCase):

    def device_payload(self, **overrides):
        payload = {
            "device_name": "Edge Router",
            "type": "router",
            "status": "Active",
            "serial_number": "SN-API-1",
            "model": "MX204",
            "purchase_date": "2024-05-01",
        }
        payload.update(overrides)
        return payload

    def test_create_and_list_with_location(self):
        location = add_location(self.session, name="North Exchange", city="Boulder")
        response = self.client.post("/api/v1/devices", json=self.device_payload(location_id=location.id))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["location_name"], "North Exchange")
        self.assertEqual(body["city"], "Boulder")
        self.assertEqual(body["purchase_date"], "2024-05-01")

        listing = self.client.get("/api/v1/devices").json()
        self.assertEqual([d["device_name"] for d in listing], ["Edge Router"])

    def test_duplicate_serial_rejected(self):
        self.client.post("/api/v1/devices", json=self.device_payload())
        response = self.client.post("/api/v1/devices", json=self.device_payload(device_name="Other"))
        self.assertEqual(response.status_code, 400)

    def test_invalid_enum_rejected(self):
        response = self.client.post("/api/v1/devices", json=self.device_payload(type="toaster"))
        self.assertEqual(response.status_code, 422)
        response = self.client.post("/api/v1/devices", json=self.device_payload(status="Broken"))
        self.assertEqual(response.status_code, 422)

    def test_unknown_location_rejected(self):
        response = self.client.post("/api/v1/devices", json=self.device_payload(location_id=999))
        self.assertEqual(response.status_code, 400)

    def test_update_and_filter_by_status(self):
        device = add_device(self.session, name="Core Switch", device_type="switch")
        response = self.client.put(f"/api/v1/devices/{device.id}", json={"status": "Maintenance"})
        self.assertEqual(response.json()["status"], "Maintenance")
        self.assertEqual(len(self.client.get("/api/v1/devices", params={"status": "Active"}).json()), 0)
        self.assertEqual(len(self.client.get("/api/v1/devices", params={"status": "Maintenance"}).json()), 1)

    def test_update_rejects_null_for_required_fields(self):
        device = add_device(self.session, purchase_date=date(2024, 5, 1))
        response = self.client.put(f"/api/v1/devices/{device.id}", json={"purchase_date": None})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.client.get(f"/api/v1/devices/{device.id}").json()["purchase_date"], "2024-05-01")

    def test_update_clears_location(self):
        location = add_location(self.session)
        device = add_device(self.session, location=location)
        response = self.client.put(f"/api/v1/devices/{device.id}", json={"location_id": None})
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["location_id"])

    def test_update_to_taken_serial_rejected(self):
        add_device(self.session, serial_number="SN-TAKEN")
        device = add_device(self.session, serial_number="SN-FREE")
        response = self.client.put(f"/api/v1/devices/{device.id}", json={"serial_number": "SN-TAKEN"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Device with this serial number already exists")
        same = self.client.put(f"/api/v1/devices/{device.id}", json={"serial_number": "SN-FREE"})
        self.assertEqual(same.status_code, 200)

    def test_missing_device(self):
        self.assertEqual(self.client.get("/api/v1/devices/42").status_code, 404)
        self.assertEqual(self.client.put("/api/v1/devices/42", json={}).status_code, 404)
        self.assertEqual(self.client.delete("/api/v1/devices/42").status_code, 404)

    def test_delete_removes_logs(self):
        device = add_device(self.session)
        add_log(self.session, device, 5, TODAY)
        response = self.client.delete(f"/api/v1/devices/{device.id}")
        self.assertEqual(response.json(), {"success": True})
        self.session.expire_all()
        self.assertEqual(self.session.query(UtilizationLog).count(), 0)


class TestLocationRoutes(ApiTestCase):

    def test_crud(self):
        created = self.client.post("/api/v1/locations", json={
            "location_name": "Central Office", "address": "100 Main St", "city": "Denver",
        }).json()
        self.assertEqual(created["country"], "USA")

        updated = self.client.put(f"/api/v1/locations/{created['id']}", json={"city": "Aurora"}).json()
        self.assertEqual(updated["city"], "Aurora")
        self.assertEqual(len(self.client.get("/api/v1/locations").json()), 1)

        self.assertEqual(self.client.delete(f"/api/v1/locations/{created['id']}").json(), {"success": True})
        self.assertEqual(self.client.delete(f"/api/v1/locations/{created['id']}").status_code, 404)

    def test_update_rejects_null_city(self):
        location = add_location(self.session, city="Denver")
        response = self.client.put(f"/api/v1/locations/{location.id}", json={"city": None})
        self.assertEqual(response.status_code, 422)

    def test_delete_keeps_devices(self):
        location = add_location(self.session)
        device = add_device(self.session, location=location)
        self.client.delete(f"/api/v1/locations/{location.id}")
        body = self.client.get(f"/api/v1/devices/{device.id}").json()
        self.assertIsNone(body["location_id"])


class TestUtilizationLogRoutes(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.device = add_device(self.session, name="Core Router")

    def test_create_for_unknown_device(self):
        response = self.client.post("/api/v1/utilization-logs", json={
            "device_id": 999, "hours_used": 4, "date": "2026-10-16",
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Device not found")

    def test_negative_hours_rejected(self):
        response = self.client.post("/api/v1/utilization-logs", json={
            "device_id": self.device.id, "hours_used": -1, "date": "2026-10-16",
        })
        self.assertEqual(response.status_code, 422)

    def test_creates_default_admin_when_no_users(self):
        response = self.client.post("/api/v1/utilization-logs", json={
            "device_id": self.device.id, "hours_used": 4, "date": "2026-10-16",
        })
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["logged_by_email"], "admin@telecom.demo")
        self.assertEqual(body["device_name"], "Core Router")
        self.assertEqual(body["device_type"], "router")

    def test_known_and_new_operators(self):
        existing = add_user(self.session, email="noc@telecom.demo", role="manager")
        first = self.client.post("/api/v1/utilization-logs", json={
            "device_id": self.device.id, "hours_used": 4, "date": "2026-10-16", "logged_by": "noc@telecom.demo",
        }).json()
        self.assertEqual(first["logged_by"], existing.id)

        self.client.post("/api/v1/utilization-logs", json={
            "device_id": self.device.id, "hours_used": 6, "date": "2026-10-17", "logged_by": "new@telecom.demo",
        })
        self.session.expire_all()
        new_user = self.session.query(User).filter(User.email == "new@telecom.demo").one()
        self.assertEqual(new_user.role, "technician")

    def test_update_list_delete(self):
        log = add_log(self.session, self.device, 3, TODAY)
        updated = self.client.put(f"/api/v1/utilization-logs/{log.id}", json={"hours_used": 7}).json()
        self.assertEqual(updated["hours_used"], 7)

        logs = self.client.get("/api/v1/utilization-logs", params={"device_id": self.device.id}).json()
        self.assertEqual([entry["hours_used"] for entry in logs], [7])

        response = self.client.delete(f"/api/v1/utilization-logs/{log.id}")
        self.assertEqual(response.json(), {"message": "Utilization log deleted successfully"})
        self.assertEqual(self.client.delete(f"/api/v1/utilization-logs/{log.id}").status_code, 404)
        self.assertEqual(self.client.put(f"/api/v1/utilization-logs/{log.id}", json={}).status_code, 404)

    def test_update_rejects_null_required_fields(self):
        log = add_log(self.session, self.device, 3, TODAY)
        for field in ("hours_used", "date", "device_id"):
            response = self.client.put(f"/api/v1/utilization-logs/{log.id}", json={field: None})
            self.assertEqual(response.status_code, 422, field)
        self.session.expire_all()
        self.assertEqual(self.session.get(UtilizationLog, log.id).hours_used, 3)

    def test_update_can_clear_notes(self):
        log = add_log(self.session, self.device, 3, TODAY)
        response = self.client.put(f"/api/v1/utilization-logs/{log.id}", json={"notes": None})
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["notes"])


class TestAlertRoutes(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.legacy = add_device(self.session, name="Legacy Router", purchase_date=date(2020, 1, 1))
        add_log(self.session, self.legacy, 1, TODAY - timedelta(days=1))
        self.busy = add_device(self.session, name="Busy Switch", device_type="switch",
                               purchase_date=date(2026, 9, 1))
        for offset in range(30):
            add_log(self.session, self.busy, 21, TODAY - timedelta(days=offset))

    def test_generate_alerts(self):
        response = self.client.post("/api/v1/device-alerts", params={"action": "generate-alerts"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            "message": "Generated 5 total alerts",
            "utilization_alerts": 2,
            "maintenance_alerts": 2,
            "end_of_life_alerts": 1,
            "total_alerts": 5,
        })

        alerts = self.client.get("/api/v1/alerts").json()
        self.assertEqual(len(alerts), 5)
        self.assertTrue(all(a["status"] == "Active" for a in alerts))
        self.assertEqual({a["device_type"] for a in alerts}, {"router", "switch"})

    def test_individual_checks(self):
        for action, count in [("check-utilization", 2), ("check-maintenance", 2), ("check-end-of-life", 1)]:
            response = self.client.post("/api/v1/device-alerts", params={"action": action})
            self.assertEqual(response.json()["alerts"], count, action)

    def test_invalid_action(self):
        response = self.client.post("/api/v1/device-alerts", params={"action": "reboot"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "Invalid action"})
        self.assertEqual(self.client.post("/api/v1/device-alerts").status_code, 400)

    def test_data_access_failure_is_internal_error(self):
        repository = MagicMock()
        repository.fetch_devices.side_effect = DataAccessError("connection refused")
        app.dependency_overrides[get_alert_service] = lambda: AlertService(repository, today=lambda: TODAY)

        response = self.client.post("/api/v1/device-alerts", params={"action": "check-maintenance"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": "Internal server error"})
        self.session.expire_all()
        self.assertEqual(self.session.query(SystemAlert).count(), 0)

    def test_manual_alert_and_resolve(self):
        created = self.client.post("/api/v1/alerts", json={
            "alert": "Backup power test",
            "description": "Generator test at North Exchange",
            "type": "system",
            "severity": "medium",
        }).json()
        self.assertIsNone(created["device_id"])
        self.assertEqual(created["status"], "Active")

        resolved = self.client.put(f"/api/v1/alerts/{created['id']}", json={"status": "Resolved"}).json()
        self.assertEqual(resolved["status"], "Resolved")
        self.assertEqual(self.client.get("/api/v1/alerts", params={"status": "Active"}).json(), [])

    def test_alert_validation(self):
        response = self.client.post("/api/v1/alerts", json={
            "alert": "x", "description": "y", "type": "system", "severity": "urgent",
        })
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.client.put("/api/v1/alerts/77", json={"status": "Resolved"}).status_code, 404)
        response = self.client.post("/api/v1/alerts", json={
            "alert": "x", "description": "y", "type": "system", "severity": "low", "device_id": 999,
        })
        self.assertEqual(response.status_code, 400)

    def test_update_rejects_null_status_but_detaches_device(self):
        alert = self.client.post("/api/v1/alerts", json={
            "alert": "x", "description": "y", "type": "system", "severity": "low", "device_id": self.legacy.id,
        }).json()
        response = self.client.put(f"/api/v1/alerts/{alert['id']}", json={"status": None})
        self.assertEqual(response.status_code, 422)
        detached = self.client.put(f"/api/v1/alerts/{alert['id']}", json={"device_id": None})
        self.assertEqual(detached.status_code, 200)
        self.assertIsNone(detached.json()["device_id"])


class TestAnalyticsRoutes(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.router = add_device(self.session, name="Router")
        self.switch = add_device(self.session, name="Switch", device_type="switch")
        add_log(self.session, self.router, 10, date(2026, 10, 15))
        add_log(self.session, self.switch, 14, date(2026, 10, 15))
        add_log(self.session, self.router, 12, date(2026, 10, 16))

    def get(self, action):
        response = self.client.get("/api/v1/device-utilization", params={"action": action})
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_trends(self):
        trends = self.get("utilization-trends")["trends"]
        self.assertEqual(trends[0]["date"], "2026-10-15")
        self.assertEqual(trends[0]["total_hours"], 24)
        self.assertEqual(trends[0]["average_hours"], 12.0)
        self.assertEqual(len(trends[0]["devices"]), 2)

    def test_device_efficiency(self):
        devices = {d["device_name"]: d for d in self.get("device-efficiency")["devices"]}
        self.assertEqual(devices["Router"]["average_daily_hours"], 11.0)
        self.assertEqual(devices["Router"]["efficiency_score"], 100.0)

    def test_peak_usage(self):
        peaks = {p["type"]: p for p in self.get("peak-usage")["peak_usage"]}
        self.assertEqual(peaks["router"]["peak_hours"], 12)
        self.assertEqual(peaks["router"]["peak_date"], "2026-10-16")
        self.assertEqual(peaks["switch"]["average_usage"], 14.0)

    def test_summary(self):
        summary = self.get("utilization-summary")["summary"]
        self.assertEqual(summary["total_hours"], 36)
        self.assertEqual(summary["total_days"], 2)
        self.assertEqual(summary["utilization_rate"], 37.5)

    def test_summary_without_data_is_zero(self):
        self.session.query(UtilizationLog).delete()
        self.session.commit()
        summary = self.get("utilization-summary")["summary"]
        self.assertEqual(summary["average_daily_usage"], 0.0)
        self.assertEqual(summary["utilization_rate"], 0.0)

    def test_invalid_action(self):
        response = self.client.get("/api/v1/device-utilization", params={"action": "generate-alerts"})
        self.assertEqual(response.status_code, 400)


class TestDashboardRoutes(ApiTestCase):

    def setUp(self):
        super().setUp()
        add_location(self.session)
        router = add_device(self.session, name="R1")
        add_device(self.session, name="R2", status="Maintenance")
        add_device(self.session, name="S1", device_type="switch", status="Decommissioned")
        add_log(self.session, router, 8, date(2026, 9, 30))
        add_log(self.session, router, 5, date(2026, 10, 1))
        add_log(self.session, router, 3, date(2026, 1, 1))
        self.session.add(SystemAlert(alert="a", description="d", type="system", severity="low"))
        self.session.commit()

    def test_stats(self):
        self.assertEqual(self.client.get("/api/v1/dashboard/stats").json(), {
            "total_devices": 3,
            "available_devices": 1,
            "in_use_devices": 0,
            "maintenance_devices": 1,
            "decommissioned_devices": 1,
            "active_alerts": 1,
            "locations": 1,
        })

    def test_device_types(self):
        self.assertEqual(self.client.get("/api/v1/dashboard/device-types").json(), [
            {"type": "router", "count": 2},
            {"type": "switch", "count": 1},
        ])

    def test_monthly_usage_trailing_months(self):
        self.assertEqual(self.client.get("/api/v1/dashboard/monthly-usage").json(), [
            {"month": "Sep", "year": 2026, "usage_hours": 8},
            {"month": "Oct", "year": 2026, "usage_hours": 5},
        ])


if __name__ == '__main__':
    unittest.main()

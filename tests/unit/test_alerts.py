"""
Unit tests for generate_alerts().

Covers:
- low battery severity and the charging exemption
- maintenance and trip conflict alerts
- peak pricing alert, from the configured tiers or a supplied price table
- sequential alert ids
"""

from datetime import datetime

import pytest

from ev_charging.exceptions import ConfigurationError
from ev_charging.services.alerts import generate_alerts

NOW = datetime(2024, 1, 15, 10, 0, 0)


class TestGenerateAlerts:
    def test_healthy_fleet_off_peak_has_no_alerts(self, make_vehicle):
        assert generate_alerts([make_vehicle(soc=70)], NOW) == []

    def test_low_battery_warning(self, make_vehicle):
        alerts = generate_alerts([make_vehicle(soc=15)], NOW)
        assert [(a.type, a.severity) for a in alerts] == [("low_battery", "warning")]
        assert alerts[0].vehicle_id == "EV-001"

    def test_very_low_battery_is_critical(self, make_vehicle):
        alerts = generate_alerts([make_vehicle(soc=5)], NOW)
        assert alerts[0].severity == "critical"

    def test_charging_vehicle_not_flagged(self, make_vehicle):
        assert generate_alerts([make_vehicle(soc=5, status="charging")], NOW) == []

    def test_maintenance_alert(self, make_vehicle):
        alerts = generate_alerts([make_vehicle(soc=70, status="maintenance")], NOW)
        assert [(a.type, a.severity) for a in alerts] == [("maintenance", "warning")]

    def test_trip_conflict(self, make_vehicle):
        alerts = generate_alerts([make_vehicle(soc=40, trip_in_hours=2)], NOW)
        assert [(a.type, a.severity) for a in alerts] == [("trip_conflict", "critical")]
        assert "2.0h" in alerts[0].message

    def test_distant_trip_is_not_a_conflict(self, make_vehicle):
        assert generate_alerts([make_vehicle(soc=40, trip_in_hours=6)], NOW) == []

    def test_peak_hour_alert(self):
        alerts = generate_alerts([], datetime(2024, 1, 15, 15, 30))
        assert [(a.type, a.severity) for a in alerts] == [("grid_peak", "info")]
        assert alerts[0].vehicle_id is None

    def test_ids_are_sequential(self, make_vehicle):
        fleet = [
            make_vehicle("EV-001", soc=15, trip_in_hours=1),
            make_vehicle("EV-002", soc=70, status="maintenance"),
        ]
        alerts = generate_alerts(fleet, NOW)
        assert [a.id for a in alerts] == ["ALERT-001", "ALERT-002", "ALERT-003"]
        assert [a.type for a in alerts] == ["low_battery", "trip_conflict", "maintenance"]

    def test_alerts_stamped_with_clock(self, make_vehicle):
        alerts = generate_alerts([make_vehicle(soc=15)], NOW)
        assert alerts[0].timestamp == NOW
        assert alerts[0].resolved is False


class TestPeakAlertPriceTable:
    def test_supplied_table_marks_current_hour_peak(self, pricing):
        pricing[10].period = "peak"
        alerts = generate_alerts([], NOW, pricing)
        assert [a.type for a in alerts] == ["grid_peak"]

    def test_supplied_table_overrides_configured_peak_hours(self, pricing):
        for entry in pricing:
            entry.period = "off_peak"
        assert generate_alerts([], datetime(2024, 1, 15, 15, 30), pricing) == []

    def test_malformed_table_rejected(self, pricing):
        with pytest.raises(ConfigurationError):
            generate_alerts([], NOW, pricing[:12])

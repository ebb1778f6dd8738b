"""Health Classifier / 래치 / 장비군 집계 테스트."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from analytics.health import (
    ALERT_HUMIDITY_HIGH,
    ALERT_HUMIDITY_LOW,
    ALERT_TEMPERATURE_HIGH,
    ALERT_TEMPERATURE_LOW,
    alert_threshold_for,
    alert_type_for_reason,
    classify,
    compliance_rate,
    status_icon,
    summarize_fleet,
)
from analytics.models import DeviceConfig, HealthCheckResult, LatchState, Reading


# ---------------------------------------------------------------------------
# 헬퍼
# ---------------------------------------------------------------------------

NOW = datetime(2026, 2, 23, 12, 0)


def _reading(temp: float, humidity: float = 50.0, minutes_ago: float = 0.0) -> Reading:
    return Reading(
        temperature=temp,
        humidity=humidity,
        timestamp=NOW - timedelta(minutes=minutes_ago),
    )


def _fridge(**overrides) -> DeviceConfig:
    params = {
        "device_type": "FRIDGE",
        "temp_min": 2.0,
        "temp_max": 8.0,
        "humidity_min": 30.0,
        "humidity_max": 70.0,
        "last_seen_at": NOW - timedelta(minutes=5),
    }
    params.update(overrides)
    return DeviceConfig(**params)


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassifyInRange:
    @pytest.mark.parametrize("temp", [3.5, 4.0, 5.5, 6.9])
    @pytest.mark.parametrize("humidity", [30.0, 50.0, 70.0])
    def test_healthy_with_no_reasons(self, temp, humidity):
        result = classify(_reading(temp, humidity), _fridge(), now=NOW)
        assert result.status == "HEALTHY"
        assert result.reasons == []
        assert result.recommendations == []
        assert result.severity == "low"

    def test_deterministic(self):
        recent = [_reading(4.0, minutes_ago=10), _reading(4.2, minutes_ago=5)]
        a = classify(_reading(4.1), _fridge(), recent, now=NOW)
        b = classify(_reading(4.1), _fridge(), recent, now=NOW)
        assert a == b


class TestClassifyTemperature:
    @pytest.mark.parametrize("humidity", [10.0, 50.0, 95.0])
    def test_exceeds_maximum_is_critical(self, humidity):
        result = classify(_reading(10.0, humidity), _fridge(), now=NOW)
        assert result.status == "NOT_HEALTHY"
        assert result.severity == "critical"
        assert result.reasons[0] == "Temperature 10°C exceeds maximum 8°C"
        assert "Verify compressor operation" in result.recommendations

    def test_below_minimum_is_critical(self):
        result = classify(_reading(0.5), _fridge(), now=NOW)
        assert result.status == "NOT_HEALTHY"
        assert result.reasons == ["Temperature 0.5°C below minimum 2°C"]
        assert result.recommendations == [
            "Check thermostat settings",
            "Verify temperature sensor",
        ]

    def test_freezer_exceeds_maximum(self):
        device = DeviceConfig(
            device_type="FREEZER",
            temp_min=-25,
            temp_max=-18,
            last_seen_at=NOW,
        )
        result = classify(_reading(-10.0), device, now=NOW)
        assert result.status == "NOT_HEALTHY"
        assert result.severity == "critical"
        assert "exceeds maximum -18°C" in result.reasons[0]

    def test_missing_thresholds_fall_back_to_type_defaults(self):
        device = DeviceConfig(device_type="FREEZER")
        result = classify(_reading(-10.0), device, now=NOW)
        assert result.reasons[0] == "Temperature -10°C exceeds maximum -18°C"

    def test_approaching_upper_limit(self):
        result = classify(_reading(7.5), _fridge(), now=NOW)
        assert result.status == "WARNING"
        assert result.severity == "medium"
        assert result.reasons == ["Temperature 7.5°C approaching upper limit"]

    def test_exactly_at_maximum_is_warning(self):
        result = classify(_reading(8.0), _fridge(), now=NOW)
        assert result.status == "WARNING"
        assert result.reasons == ["Temperature 8°C approaching upper limit"]

    def test_approaching_lower_limit(self):
        result = classify(_reading(2.5), _fridge(), now=NOW)
        assert result.status == "WARNING"
        assert result.reasons == ["Temperature 2.5°C approaching lower limit"]


class TestClassifyHumidity:
    def test_humidity_above_maximum(self):
        result = classify(_reading(5.0, 75.0), _fridge(), now=NOW)
        assert result.status == "WARNING"
        assert result.severity == "medium"
        assert result.reasons == ["Humidity 75% exceeds maximum 70%"]
        assert "Check door gasket" in result.recommendations

    def test_humidity_below_minimum(self):
        result = classify(_reading(5.0, 20.0), _fridge(), now=NOW)
        assert result.status == "WARNING"
        assert result.reasons == ["Humidity 20% below minimum 30%"]

    def test_humidity_does_not_downgrade_critical(self):
        result = classify(_reading(12.0, 90.0), _fridge(), now=NOW)
        assert result.severity == "critical"
        assert len(result.reasons) == 2


class TestClassifyOffline:
    def test_offline_after_31_minutes(self):
        device = _fridge(last_seen_at=NOW - timedelta(minutes=31))
        result = classify(_reading(5.0), device, now=NOW)
        assert result.status == "OFFLINE"
        assert result.severity == "high"
        assert result.reasons == ["No data received for 31 minutes"]

    def test_offline_bypasses_other_checks(self):
        device = _fridge(last_seen_at=NOW - timedelta(hours=2))
        result = classify(_reading(15.0, 95.0), device, now=NOW)
        assert result.status == "OFFLINE"
        assert len(result.reasons) == 1

    def test_exactly_30_minutes_is_online(self):
        device = _fridge(last_seen_at=NOW - timedelta(minutes=30))
        assert classify(_reading(5.0), device, now=NOW).status == "HEALTHY"

    def test_never_seen_is_not_offline(self):
        device = _fridge(last_seen_at=None)
        assert classify(_reading(5.0), device, now=NOW).status == "HEALTHY"


class TestClassifyRapidChange:
    def test_rapid_change_within_five_minutes(self):
        recent = [_reading(4.0, minutes_ago=4), _reading(10.0, minutes_ago=2)]
        result = classify(_reading(5.0), _fridge(), recent, now=NOW)
        assert result.status == "WARNING"
        assert result.severity == "high"
        assert result.reasons == ["Rapid temperature change detected: 6.0°C in 2 minutes"]
        assert "Check if door was left open" in result.recommendations

    def test_order_of_recent_readings_does_not_matter(self):
        recent = [_reading(10.0, minutes_ago=2), _reading(4.0, minutes_ago=4)]
        result = classify(_reading(5.0), _fridge(), recent, now=NOW)
        assert result.severity == "high"

    def test_changes_further_apart_are_ignored(self):
        recent = [_reading(4.0, minutes_ago=20), _reading(10.0, minutes_ago=10)]
        result = classify(_reading(5.0), _fridge(), recent, now=NOW)
        assert result.status == "HEALTHY"

    def test_small_changes_are_ignored(self):
        recent = [_reading(4.0, minutes_ago=4), _reading(8.9, minutes_ago=2)]
        result = classify(_reading(5.0), _fridge(), recent, now=NOW)
        assert result.reasons == []

    def test_rapid_change_downgrades_critical_to_high(self):
        recent = [_reading(4.0, minutes_ago=4), _reading(10.0, minutes_ago=2)]
        result = classify(_reading(12.0), _fridge(), recent, now=NOW)
        assert result.status == "WARNING"
        assert result.severity == "high"
        assert result.reasons == [
            "Temperature 12°C exceeds maximum 8°C",
            "Rapid temperature change detected: 6.0°C in 2 minutes",
        ]

    def test_only_first_rapid_change_is_reported(self):
        recent = [
            _reading(4.0, minutes_ago=8),
            _reading(12.0, minutes_ago=6),
            _reading(4.0, minutes_ago=4),
            _reading(12.0, minutes_ago=2),
        ]
        result = classify(_reading(5.0), _fridge(), recent, now=NOW)
        assert len([r for r in result.reasons if r.startswith("Rapid")]) == 1


# ---------------------------------------------------------------------------
# LatchState
# ---------------------------------------------------------------------------


def _result(status: str) -> HealthCheckResult:
    return HealthCheckResult(status=status)


class TestLatchState:
    def test_not_healthy_latches(self):
        latch = LatchState().apply(_result("NOT_HEALTHY"))
        assert latch == LatchState("NOT_HEALTHY", True)

    def test_latched_overrides_recovery(self):
        latch = LatchState("NOT_HEALTHY", True)
        for _ in range(5):
            latch = latch.apply(_result("HEALTHY"))
        assert latch.health_status == "NOT_HEALTHY"
        assert latch.needs_manual_reset is True

    def test_latched_overrides_warning(self):
        latch = LatchState("NOT_HEALTHY", True).apply(_result("WARNING"))
        assert latch.health_status == "NOT_HEALTHY"

    def test_reset_clears_latch(self):
        latch = LatchState("NOT_HEALTHY", True).reset()
        assert latch == LatchState("HEALTHY", False)
        assert latch.apply(_result("WARNING")).health_status == "WARNING"

    def test_flag_without_not_healthy_status_does_not_override(self):
        latch = LatchState("OFFLINE", True).apply(_result("HEALTHY"))
        assert latch.health_status == "HEALTHY"
        assert latch.needs_manual_reset is True

    def test_unlatched_follows_result(self):
        assert LatchState().apply(_result("WARNING")).health_status == "WARNING"


# ---------------------------------------------------------------------------
# 알림 매핑
# ---------------------------------------------------------------------------


class TestAlertMapping:
    @pytest.mark.parametrize(
        ("reason", "expected"),
        [
            ("Temperature 10°C exceeds maximum 8°C", ALERT_TEMPERATURE_HIGH),
            ("Temperature 0°C below minimum 2°C", ALERT_TEMPERATURE_LOW),
            ("Humidity 75% exceeds maximum 70%", ALERT_HUMIDITY_HIGH),
            ("Humidity 20% below minimum 30%", ALERT_HUMIDITY_LOW),
            ("Temperature 7.5°C approaching upper limit", ALERT_TEMPERATURE_HIGH),
        ],
    )
    def test_alert_type_for_reason(self, reason, expected):
        assert alert_type_for_reason(reason) == expected

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            ("HEALTHY", "✅"),
            ("WARNING", "⚠️"),
            ("NOT_HEALTHY", "❌"),
            ("OFFLINE", "📡"),
            ("UNKNOWN", "❓"),
        ],
    )
    def test_status_icon(self, status, expected):
        assert status_icon(status) == expected

    def test_alert_threshold_for(self):
        device = _fridge()
        assert alert_threshold_for(ALERT_TEMPERATURE_HIGH, device) == 8.0
        assert alert_threshold_for(ALERT_TEMPERATURE_LOW, device) == 2.0
        assert alert_threshold_for(ALERT_HUMIDITY_HIGH, device) == 70.0
        assert alert_threshold_for(ALERT_HUMIDITY_LOW, device) == 30.0


# ---------------------------------------------------------------------------
# 장비군 집계
# ---------------------------------------------------------------------------


class TestFleet:
    def test_empty_fleet_is_fully_compliant(self):
        assert compliance_rate([]) == 100

    def test_compliance_rate_rounds(self):
        assert compliance_rate(["HEALTHY", "WARNING", "HEALTHY"]) == 67

    def test_summarize_fleet(self):
        summary = summarize_fleet(
            ["HEALTHY", "HEALTHY", "WARNING", "NOT_HEALTHY", "OFFLINE"]
        )
        assert summary == {
            "total_devices": 5,
            "healthy_devices": 2,
            "warning_devices": 1,
            "unhealthy_devices": 1,
            "offline_devices": 1,
            "compliance_rate": 40,
        }

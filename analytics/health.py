"""측정값 단위 상태 판정 (Health Classifier).

평가 순서:
1. 오프라인 (마지막 수신 후 30분 초과) → 나머지 검사 생략
2. 온도 범위 이탈 → critical
3. 임계값 1°C 이내 접근 → medium
4. 습도 범위 이탈 → medium
5. 5분 이내 5°C 초과 급변 → high
6. 사유/심각도로 최종 상태 결정

래치(수동 리셋) 처리는 호출 측이 LatchState.apply()로 수행한다.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Iterable, Sequence

from analytics.config import (
    OFFLINE_TIMEOUT_MINUTES,
    RAPID_CHANGE_MAX_DELTA_C,
    RAPID_CHANGE_WINDOW_MINUTES,
    SEVERITY_LEVELS,
    STATUS_HEALTHY,
    STATUS_NOT_HEALTHY,
    STATUS_ICONS,
    STATUS_OFFLINE,
    STATUS_WARNING,
    UNKNOWN_STATUS_ICON,
    WARNING_BUFFER_C,
)
from analytics.models import DeviceConfig, HealthCheckResult, Reading
from analytics.stats import format_value

ALERT_TEMPERATURE_HIGH = "TEMPERATURE_HIGH"
ALERT_TEMPERATURE_LOW = "TEMPERATURE_LOW"
ALERT_HUMIDITY_HIGH = "HUMIDITY_HIGH"
ALERT_HUMIDITY_LOW = "HUMIDITY_LOW"


def _escalate(current: str, target: str) -> str:
    """심각도는 올라가기만 한다."""
    if SEVERITY_LEVELS.index(target) > SEVERITY_LEVELS.index(current):
        return target
    return current


def _minutes_between(later: datetime, earlier: datetime) -> float:
    return (later - earlier).total_seconds() / 60


def _check_offline(
    device: DeviceConfig,
    now: datetime,
) -> HealthCheckResult | None:
    if device.last_seen_at is None:
        return None

    minutes = _minutes_between(now, device.last_seen_at)
    if minutes <= OFFLINE_TIMEOUT_MINUTES:
        return None

    return HealthCheckResult(
        status=STATUS_OFFLINE,
        reasons=[f"No data received for {round(minutes)} minutes"],
        severity="high",
        recommendations=[
            "Check device connectivity",
            "Verify GSM signal",
            "Inspect power supply",
        ],
    )


def _find_rapid_change(
    recent_readings: Sequence[Reading],
) -> tuple[float, float] | None:
    """시간 역순으로 인접 쌍을 훑어 첫 급변 (변화량, 경과분)을 반환."""
    if len(recent_readings) < 2:
        return None

    ordered = sorted(recent_readings, key=lambda r: r.timestamp, reverse=True)
    for current, previous in zip(ordered, ordered[1:]):
        minutes = _minutes_between(current.timestamp, previous.timestamp)
        if minutes > RAPID_CHANGE_WINDOW_MINUTES:
            continue
        delta = abs(current.temperature - previous.temperature)
        if delta > RAPID_CHANGE_MAX_DELTA_C:
            return delta, minutes

    return None


def _derive_status(reasons: list[str], severity: str) -> str:
    if not reasons:
        return STATUS_HEALTHY
    if severity == "critical":
        return STATUS_NOT_HEALTHY
    if severity in ("high", "medium"):
        return STATUS_WARNING
    return STATUS_HEALTHY


def classify(
    reading: Reading,
    device: DeviceConfig,
    recent_readings: Sequence[Reading] = (),
    *,
    now: datetime,
) -> HealthCheckResult:
    """측정값 1건의 상태 판정.

    Args:
        reading: 새로 수신한 측정값.
        device: 장비 설정 스냅샷 (임계값, last_seen_at).
        recent_readings: 최근 측정값 (급변 검사용, 순서 무관).
        now: 판정 기준 시각 (오프라인 검사).

    Returns:
        HealthCheckResult. reasons/recommendations는 항상 list.
    """
    offline = _check_offline(device, now)
    if offline is not None:
        return offline

    temp_min, temp_max = device.temperature_limits()
    humidity_min, humidity_max = device.humidity_limits()
    temperature = reading.temperature
    humidity = reading.humidity
    t = format_value(temperature)

    reasons: list[str] = []
    recommendations: list[str] = []
    severity = "low"

    # 온도 범위 이탈
    if temperature > temp_max:
        reasons.append(f"Temperature {t}°C exceeds maximum {format_value(temp_max)}°C")
        severity = "critical"
        recommendations.extend(
            ["Check door seal", "Verify compressor operation", "Reduce ambient temperature"]
        )
    elif temperature < temp_min:
        reasons.append(f"Temperature {t}°C below minimum {format_value(temp_min)}°C")
        severity = "critical"
        recommendations.extend(["Check thermostat settings", "Verify temperature sensor"])

    # 경고 버퍼 (범위 내에서 경계 1°C 이내)
    if temp_max - WARNING_BUFFER_C <= temperature <= temp_max:
        reasons.append(f"Temperature {t}°C approaching upper limit")
        severity = _escalate(severity, "medium")
    elif temp_min <= temperature <= temp_min + WARNING_BUFFER_C:
        reasons.append(f"Temperature {t}°C approaching lower limit")
        severity = _escalate(severity, "medium")

    # 습도
    h = format_value(humidity)
    if humidity > humidity_max:
        reasons.append(f"Humidity {h}% exceeds maximum {format_value(humidity_max)}%")
        severity = _escalate(severity, "medium")
        recommendations.extend(["Check door gasket", "Reduce frequency of door opening"])
    elif humidity < humidity_min:
        reasons.append(f"Humidity {h}% below minimum {format_value(humidity_min)}%")
        severity = _escalate(severity, "medium")

    # 급변
    rapid = _find_rapid_change(recent_readings)
    if rapid is not None:
        delta, minutes = rapid
        reasons.append(
            f"Rapid temperature change detected: {delta:.1f}°C in {minutes:.0f} minutes"
        )
        severity = "high"
        recommendations.extend(
            ["Check if door was left open", "Inspect for power fluctuations"]
        )

    return HealthCheckResult(
        status=_derive_status(reasons, severity),
        reasons=reasons,
        severity=severity,
        recommendations=recommendations,
    )


def status_icon(status: str) -> str:
    """장비 디스플레이용 상태 아이콘."""
    return STATUS_ICONS.get(status, UNKNOWN_STATUS_ICON)


# ---------------------------------------------------------------------------
# 알림 유형 매핑
# ---------------------------------------------------------------------------


def alert_type_for_reason(reason: str) -> str:
    """판정 사유 문구 → 알림 유형."""
    if "Humidity" in reason and "exceeds" in reason:
        return ALERT_HUMIDITY_HIGH
    if "Humidity" in reason and "below" in reason:
        return ALERT_HUMIDITY_LOW
    if "below minimum" in reason:
        return ALERT_TEMPERATURE_LOW
    return ALERT_TEMPERATURE_HIGH


def alert_threshold_for(alert_type: str, device: DeviceConfig) -> float:
    """알림 유형에 대응하는 이탈 임계값."""
    temp_min, temp_max = device.temperature_limits()
    humidity_min, humidity_max = device.humidity_limits()
    return {
        ALERT_TEMPERATURE_HIGH: temp_max,
        ALERT_TEMPERATURE_LOW: temp_min,
        ALERT_HUMIDITY_HIGH: humidity_max,
        ALERT_HUMIDITY_LOW: humidity_min,
    }[alert_type]


# ---------------------------------------------------------------------------
# 장비군 집계
# ---------------------------------------------------------------------------


def compliance_rate(statuses: Iterable[str]) -> int:
    """HEALTHY 비율 (%, 반올림). 장비가 없으면 100."""
    statuses = list(statuses)
    if not statuses:
        return 100
    healthy = sum(1 for s in statuses if s == STATUS_HEALTHY)
    return int(healthy * 100 / len(statuses) + 0.5)


def summarize_fleet(statuses: Iterable[str]) -> dict[str, int]:
    """상태별 장비 수 + 준수율."""
    statuses = list(statuses)
    counts = Counter(statuses)
    return {
        "total_devices": len(statuses),
        "healthy_devices": counts.get(STATUS_HEALTHY, 0),
        "warning_devices": counts.get(STATUS_WARNING, 0),
        "unhealthy_devices": counts.get(STATUS_NOT_HEALTHY, 0),
        "offline_devices": counts.get(STATUS_OFFLINE, 0),
        "compliance_rate": compliance_rate(statuses),
    }

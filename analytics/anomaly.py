"""통계적 이상 감지 (Anomaly Detector).

과거 측정값을 베이스라인으로 현재 측정값의 이탈도를 평가한다.

[A] 온도 z-score: |z| > 2.5 → score = min(100, z / 2.5 × 50)
[B] 습도 z-score: 동일 규칙, [A]보다 score가 높을 때만 대체
[C] 변화율: 직전 측정이 10분 이내이고 0.5°C/min 초과 → score = min(100, rate × 30),
    앞선 후보보다 score가 높을 때만 대체

최고 score 유형 하나만 보고한다 (누적하지 않음).
"""

from __future__ import annotations

from typing import Sequence

from analytics.config import (
    ANOMALY_HUMIDITY,
    ANOMALY_MIN_HISTORY,
    ANOMALY_RAPID_CHANGE,
    ANOMALY_RATE_SCORE_FACTOR,
    ANOMALY_RATE_THRESHOLD_C_PER_MIN,
    ANOMALY_RATE_WINDOW_MINUTES,
    ANOMALY_SCORE_THRESHOLD,
    ANOMALY_TEMPERATURE,
    ANOMALY_Z_THRESHOLD,
)
from analytics.models import AnomalyResult, Reading
from analytics.stats import calculate_stats, format_value, z_score

# (유형, score, 설명)
_Candidate = tuple[str, float, str]


def _z_to_score(z: float) -> float:
    return min(100.0, (z / ANOMALY_Z_THRESHOLD) * 50)


def _temperature_candidate(
    current: Reading,
    history: Sequence[Reading],
) -> _Candidate | None:
    z = z_score(current.temperature, calculate_stats(r.temperature for r in history))
    if z <= ANOMALY_Z_THRESHOLD:
        return None
    return (
        ANOMALY_TEMPERATURE,
        _z_to_score(z),
        f"Temperature {format_value(current.temperature)}°C is {z:.1f} "
        "standard deviations from normal",
    )


def _humidity_candidate(
    current: Reading,
    history: Sequence[Reading],
) -> _Candidate | None:
    z = z_score(current.humidity, calculate_stats(r.humidity for r in history))
    if z <= ANOMALY_Z_THRESHOLD:
        return None
    return (
        ANOMALY_HUMIDITY,
        _z_to_score(z),
        f"Humidity {format_value(current.humidity)}% is {z:.1f} "
        "standard deviations from normal",
    )


def rate_of_change(current: Reading, previous: Reading) -> float | None:
    """°C/min. 경과 시간이 0 이하이거나 10분 초과면 None."""
    minutes = (current.timestamp - previous.timestamp).total_seconds() / 60
    if minutes <= 0 or minutes > ANOMALY_RATE_WINDOW_MINUTES:
        return None
    return abs(current.temperature - previous.temperature) / minutes


def _rapid_change_candidate(
    current: Reading,
    history: Sequence[Reading],
) -> _Candidate | None:
    last = max(history, key=lambda r: r.timestamp)
    rate = rate_of_change(current, last)
    if rate is None or rate <= ANOMALY_RATE_THRESHOLD_C_PER_MIN:
        return None
    return (
        ANOMALY_RAPID_CHANGE,
        min(100.0, rate * ANOMALY_RATE_SCORE_FACTOR),
        f"Temperature changing at {rate * 60:.1f}°C/hour",
    )


# 평가 순서 고정: 동점이면 앞선 후보 유지
_CANDIDATE_CHECKS = (
    _temperature_candidate,
    _humidity_candidate,
    _rapid_change_candidate,
)


def detect_anomalies(
    current: Reading,
    historical_readings: Sequence[Reading],
    device_type: str | None = None,
) -> AnomalyResult:
    """현재 측정값의 이상 여부 판정.

    Args:
        current: 평가 대상 측정값.
        historical_readings: 현재 측정값을 제외한 과거 측정값.
        device_type: 장비 유형 (현재 규칙에서는 사용하지 않음).

    Returns:
        AnomalyResult. 과거 측정값 10건 미만이면 score 0.
    """
    if len(historical_readings) < ANOMALY_MIN_HISTORY:
        return AnomalyResult(is_anomaly=False, score=0)

    best_score = 0.0
    best_type: str | None = None
    best_description: str | None = None

    for check in _CANDIDATE_CHECKS:
        candidate = check(current, historical_readings)
        if candidate is None:
            continue
        anomaly_type, score, description = candidate
        if score > best_score:
            best_score, best_type, best_description = score, anomaly_type, description

    return AnomalyResult(
        is_anomaly=best_score > ANOMALY_SCORE_THRESHOLD,
        score=int(best_score + 0.5),
        anomaly_type=best_type,
        description=best_description,
    )

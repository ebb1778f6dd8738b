"""장비 인사이트 생성 — 분석 엔진 외부 진입점.

Anomaly / Failure / Pattern / Baseline 결과를 조합하여
health_score(0~100), 알림, 인사이트, 요약을 산출한다.

health_score = 100
    - anomaly.score × 0.3            (이상 판정 시)
    - failure_probability × 40       (고장 예측 시)
    - (1 - pattern.confidence) × 10  (패턴 감지 시)
"""

from __future__ import annotations

import logging
from typing import Sequence

from analytics.anomaly import detect_anomalies
from analytics.baseline import learn_baseline
from analytics.config import (
    ANOMALY_PENALTY_WEIGHT,
    FAILURE_PENALTY_WEIGHT,
    HEALTH_SUMMARY_CRITICAL,
    HEALTH_SUMMARY_TIERS,
    INSIGHTS_MIN_READINGS,
    INSUFFICIENT_DATA_SCORE,
    PATTERN_PENALTY_WEIGHT,
)
from analytics.models import DeviceInsights, Reading
from analytics.patterns import detect_patterns
from analytics.prediction import predict_failure

logger = logging.getLogger(__name__)


def summarize_health(health_score: float) -> str:
    """health_score → 요약 문구."""
    for threshold, summary in HEALTH_SUMMARY_TIERS:
        if health_score >= threshold:
            return summary
    return HEALTH_SUMMARY_CRITICAL


def generate_insights(
    readings: Sequence[Reading],
    device_type: str,
    device_age_days: int,
) -> DeviceInsights:
    """측정 이력 전체에 대한 장비 인사이트.

    마지막(최신) 측정값을 현재값, 나머지를 이력으로 이상 감지를 수행한다.

    Args:
        readings: 측정 이력 (내부에서 시간 오름차순 정렬).
        device_type: 'FRIDGE' | 'FREEZER'.
        device_age_days: 설치 후 경과 일수.

    Returns:
        DeviceInsights. 10건 미만이면 health_score=50.
    """
    if len(readings) < INSIGHTS_MIN_READINGS:
        return DeviceInsights(
            summary="Insufficient data for AI analysis",
            health_score=INSUFFICIENT_DATA_SCORE,
            insights=["Need more readings for comprehensive analysis"],
            alerts=[],
        )

    ordered = sorted(readings, key=lambda r: r.timestamp)
    insights: list[str] = []
    alerts: list[str] = []
    health_score = 100.0

    anomaly = detect_anomalies(ordered[-1], ordered[:-1], device_type)
    if anomaly.is_anomaly:
        alerts.append(anomaly.description or "Anomaly detected")
        health_score -= anomaly.score * ANOMALY_PENALTY_WEIGHT

    prediction = predict_failure(ordered, device_type, device_age_days)
    if prediction.predicted_failure:
        alerts.append(f"Potential {prediction.failure_type} failure predicted")
        if prediction.time_to_failure_hours:
            alerts.append(
                f"Estimated time to failure: {prediction.time_to_failure_hours} hours"
            )
        health_score -= prediction.failure_probability * FAILURE_PENALTY_WEIGHT
    insights.extend(prediction.recommendations)

    pattern = detect_patterns(ordered)
    if pattern.pattern:
        insights.append(pattern.description or f"Pattern detected: {pattern.pattern}")
        health_score -= (1 - pattern.confidence) * PATTERN_PENALTY_WEIGHT

    baseline = learn_baseline(ordered)
    if baseline.peak_hours:
        hours = ", ".join(f"{h}:00" for h in baseline.peak_hours)
        insights.append(f"High activity typically occurs at: {hours}")

    summary = summarize_health(health_score)
    final_score = min(100, max(0, int(health_score + 0.5)))

    logger.debug(
        f"[insights] score={final_score}, anomaly={anomaly.anomaly_type}, "
        f"failure={prediction.failure_type}, pattern={pattern.pattern}"
    )

    return DeviceInsights(
        summary=summary,
        health_score=final_score,
        insights=insights,
        alerts=alerts,
    )

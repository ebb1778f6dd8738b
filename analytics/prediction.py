"""고장 예측 (Failure Predictor).

독립 신호 4종의 고장 확률 가산치를 합산한다:

- 컴프레서 패턴 감지: +0.4 (패턴별 예상 고장 시점)
- 최근 20건 분산 > 이전 20건 분산 × 2: +0.2
- 장비 연령: 5년 초과 +0.15, 3년 초과 +0.05
- 습도 평균 > 65% 이고 표준편차 > 10: +0.1 (도어 실링)

failure_type / time_to_failure는 먼저 설정한 신호가 우선한다.
"""

from __future__ import annotations

from typing import Sequence

from analytics.compressor import detect_compressor_issue
from analytics.config import (
    AGING_DAYS,
    COMPRESSOR_RECOMMENDATIONS,
    CONFIDENCE_FLOOR,
    CONFIDENCE_SATURATION_READINGS,
    DOOR_SEAL_HUMIDITY_MEAN,
    DOOR_SEAL_HUMIDITY_STD,
    DOOR_SEAL_TIME_TO_FAILURE_HOURS,
    END_OF_LIFE_DAYS,
    FAILURE_COMPRESSOR,
    FAILURE_DOOR_SEAL,
    PREDICTION_MIN_OLDER_READINGS,
    PREDICTION_MIN_READINGS,
    PREDICTION_VARIANCE_RATIO,
    PREDICTION_VARIANCE_WINDOW,
    PROB_AGING,
    PROB_COMPRESSOR,
    PROB_DOOR_SEAL,
    PROB_END_OF_LIFE,
    PROB_VARIANCE,
    TIME_TO_FAILURE_HOURS,
)
from analytics.models import PredictionResult, Reading
from analytics.stats import calculate_stats


def prediction_confidence(n_readings: int) -> float:
    """데이터 수 기반 신뢰도. 0.2에서 시작해 100건에서 1.0."""
    saturation = min(1.0, n_readings / CONFIDENCE_SATURATION_READINGS)
    return saturation * (1.0 - CONFIDENCE_FLOOR) + CONFIDENCE_FLOOR


def is_variance_escalating(readings: Sequence[Reading]) -> bool:
    """최근 구간 온도 분산이 이전 구간의 2배를 넘는지.

    이전 구간([-40:-20])이 10건 미만이면 False.
    """
    window = PREDICTION_VARIANCE_WINDOW
    recent = readings[-window:]
    older = readings[-2 * window:-window]
    if len(older) < PREDICTION_MIN_OLDER_READINGS:
        return False

    recent_var = calculate_stats(r.temperature for r in recent).variance
    older_var = calculate_stats(r.temperature for r in older).variance
    return recent_var > older_var * PREDICTION_VARIANCE_RATIO


def predict_failure(
    readings: Sequence[Reading],
    device_type: str,
    device_age_days: int,
) -> PredictionResult:
    """측정 이력으로 고장 가능성 예측.

    Args:
        readings: 측정 이력 (내부에서 시간 오름차순 정렬).
        device_type: 'FRIDGE' | 'FREEZER'.
        device_age_days: 설치 후 경과 일수.

    Returns:
        PredictionResult. 20건 미만이면 확률 0, 'Insufficient data' 권고.
    """
    if len(readings) < PREDICTION_MIN_READINGS:
        return PredictionResult(
            failure_probability=0.0,
            predicted_failure=False,
            failure_type=None,
            time_to_failure_hours=None,
            confidence=0.0,
            recommendations=["Insufficient data for prediction"],
        )

    ordered = sorted(readings, key=lambda r: r.timestamp)
    recommendations: list[str] = []
    probability = 0.0
    failure_type: str | None = None
    time_to_failure: int | None = None

    # 컴프레서
    compressor = detect_compressor_issue(ordered, device_type)
    if compressor.has_issue:
        probability += PROB_COMPRESSOR
        failure_type = FAILURE_COMPRESSOR
        time_to_failure = TIME_TO_FAILURE_HOURS[compressor.pattern]
        recommendations.extend(COMPRESSOR_RECOMMENDATIONS[compressor.pattern])

    # 분산 추세
    if is_variance_escalating(ordered):
        probability += PROB_VARIANCE
        recommendations.append(
            "Temperature stability degrading - inspect seals and sensors"
        )

    # 장비 연령
    if device_age_days > END_OF_LIFE_DAYS:
        probability += PROB_END_OF_LIFE
        recommendations.append("Device approaching end of expected lifespan")
    elif device_age_days > AGING_DAYS:
        probability += PROB_AGING

    # 습도 불안정 (도어 실링)
    humidity = calculate_stats(r.humidity for r in ordered)
    if humidity.mean > DOOR_SEAL_HUMIDITY_MEAN and humidity.std_dev > DOOR_SEAL_HUMIDITY_STD:
        probability += PROB_DOOR_SEAL
        if failure_type is None:
            failure_type = FAILURE_DOOR_SEAL
        if time_to_failure is None:
            time_to_failure = DOOR_SEAL_TIME_TO_FAILURE_HOURS
        recommendations.append(
            "Door seal may be degrading - high humidity fluctuations detected"
        )

    return PredictionResult(
        failure_probability=min(1.0, probability),
        predicted_failure=probability > 0.5,
        failure_type=failure_type,
        time_to_failure_hours=time_to_failure,
        confidence=prediction_confidence(len(ordered)),
        recommendations=recommendations,
    )

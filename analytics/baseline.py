"""장비별 정상 운전 베이스라인 학습."""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from analytics.config import (
    BASELINE_MIN_READINGS,
    BASELINE_SIGMA,
    DEFAULT_HUMIDITY_RANGE,
    DEFAULT_TEMP_RANGE,
    DEFAULT_VARIANCE,
    PEAK_HOUR_VARIANCE_RATIO,
)
from analytics.models import Baseline, Reading, ValueRange
from analytics.stats import SeriesStats, calculate_stats


def _sigma_range(stats: SeriesStats) -> ValueRange:
    spread = BASELINE_SIGMA * stats.std_dev
    return ValueRange(min=stats.mean - spread, max=stats.mean + spread)


def find_peak_hours(readings: Sequence[Reading]) -> list[int]:
    """시간대별 온도 분산이 평균의 1.5배를 넘는 시(hour) 목록.

    시간대는 timestamp가 가진 (장비 현지) 시각 기준.
    """
    by_hour: dict[int, list[float]] = defaultdict(list)
    for r in readings:
        by_hour[r.timestamp.hour].append(r.temperature)

    if not by_hour:
        return []

    hourly_variance = {
        hour: calculate_stats(temps).variance for hour, temps in by_hour.items()
    }
    avg_variance = sum(hourly_variance.values()) / len(hourly_variance)

    return sorted(
        hour
        for hour, variance in hourly_variance.items()
        if variance > avg_variance * PEAK_HOUR_VARIANCE_RATIO
    )


def learn_baseline(readings: Sequence[Reading]) -> Baseline:
    """측정 이력으로 정상 범위(mean ± 2σ)와 피크 시간대 학습.

    Args:
        readings: 측정 이력.

    Returns:
        Baseline. 50건 미만이면 기본값 (2~8°C, 30~70%, 분산 1, 피크 없음).
    """
    if len(readings) < BASELINE_MIN_READINGS:
        return Baseline(
            normal_temp_range=ValueRange(*DEFAULT_TEMP_RANGE),
            normal_humidity_range=ValueRange(*DEFAULT_HUMIDITY_RANGE),
            typical_variance=DEFAULT_VARIANCE,
            peak_hours=[],
        )

    temp_stats = calculate_stats(r.temperature for r in readings)
    humid_stats = calculate_stats(r.humidity for r in readings)

    return Baseline(
        normal_temp_range=_sigma_range(temp_stats),
        normal_humidity_range=_sigma_range(humid_stats),
        typical_variance=temp_stats.variance,
        peak_hours=find_peak_hours(readings),
    )

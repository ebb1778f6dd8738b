"""수치 시퀀스 기술통계."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np


@dataclass(frozen=True)
class SeriesStats:
    """mean/std/min/max/variance (모분산 기준)."""

    mean: float
    std_dev: float
    min: float
    max: float
    variance: float


_EMPTY = SeriesStats(mean=0.0, std_dev=0.0, min=0.0, max=0.0, variance=0.0)


def calculate_stats(values: Iterable[float]) -> SeriesStats:
    """시퀀스의 기술통계 산출.

    빈 시퀀스는 모든 값이 0인 통계를 반환한다.

    Args:
        values: 온도 또는 습도 값.

    Returns:
        SeriesStats. variance는 모분산(ddof=0).
    """
    arr = np.asarray(list(values), dtype=np.float64)
    if arr.size == 0:
        return _EMPTY

    mean = float(np.mean(arr))
    variance = float(np.mean((arr - mean) ** 2))

    return SeriesStats(
        mean=mean,
        std_dev=float(np.sqrt(variance)),
        min=float(np.min(arr)),
        max=float(np.max(arr)),
        variance=variance,
    )


def format_value(value: float) -> str:
    """메시지용 수치 표기. 정수값은 소수점 없이 (8.0 → '8')."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return str(value)


def z_score(value: float, stats: SeriesStats) -> float:
    """|value - mean| / std. std가 0이면 0."""
    if stats.std_dev <= 0:
        return 0.0
    return abs(value - stats.mean) / stats.std_dev

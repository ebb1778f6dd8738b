"""컴프레서 이상 패턴 감지.

온도 시계열의 형태를 3가지 고장 패턴으로 분류한다.
우선순위 순으로 평가하며 첫 번째로 일치하는 패턴을 반환한다:

- GRADUAL_RISE: 연속 상승 횟수 > 전체 측정 수의 80%
- EXCESSIVE_CYCLING: 국소 극값 수 > 전체 측정 수의 50%
- STRUGGLING_TO_COOL: 유형 최대 온도 1°C 이내 비율 > 70%
"""

from __future__ import annotations

from typing import Callable, Sequence

from analytics.config import (
    COMPRESSOR_MIN_READINGS,
    COMPRESSOR_NEAR_MAX_BAND_C,
    COMPRESSOR_NEAR_MAX_RATIO,
    COMPRESSOR_OSCILLATION_RATIO,
    COMPRESSOR_RISING_RATIO,
    PATTERN_EXCESSIVE_CYCLING,
    PATTERN_GRADUAL_RISE,
    PATTERN_STRUGGLING_TO_COOL,
)
from analytics.models import CompressorCheck, Reading
from master_data.device_type import get_temperature_limits


def count_rises(temps: Sequence[float]) -> int:
    """직전 값보다 높은 측정 수."""
    return sum(1 for prev, curr in zip(temps, temps[1:]) if curr > prev)


def count_oscillations(temps: Sequence[float]) -> int:
    """내부 점 중 국소 최대/최소 수."""
    count = 0
    for prev, curr, nxt in zip(temps, temps[1:], temps[2:]):
        if (curr > prev and curr > nxt) or (curr < prev and curr < nxt):
            count += 1
    return count


def _is_gradual_rise(temps: list[float], temp_max: float) -> bool:
    return count_rises(temps) > len(temps) * COMPRESSOR_RISING_RATIO


def _is_excessive_cycling(temps: list[float], temp_max: float) -> bool:
    return count_oscillations(temps) > len(temps) * COMPRESSOR_OSCILLATION_RATIO


def _is_struggling_to_cool(temps: list[float], temp_max: float) -> bool:
    near_max = sum(1 for t in temps if t >= temp_max - COMPRESSOR_NEAR_MAX_BAND_C)
    return near_max > len(temps) * COMPRESSOR_NEAR_MAX_RATIO


# (패턴, 판정 함수). 순서가 곧 우선순위
_PATTERN_CHECKS: list[tuple[str, Callable[[list[float], float], bool]]] = [
    (PATTERN_GRADUAL_RISE, _is_gradual_rise),
    (PATTERN_EXCESSIVE_CYCLING, _is_excessive_cycling),
    (PATTERN_STRUGGLING_TO_COOL, _is_struggling_to_cool),
]


def detect_compressor_issue(
    readings: Sequence[Reading],
    device_type: str,
) -> CompressorCheck:
    """컴프레서 고장 패턴 감지.

    Args:
        readings: 측정값 (순서 무관, 내부에서 시간 오름차순 정렬).
        device_type: 'FRIDGE' | 'FREEZER'. 유형 기본 최대 온도를 사용한다.

    Returns:
        CompressorCheck. 10건 미만이면 has_issue=False.
    """
    if len(readings) < COMPRESSOR_MIN_READINGS:
        return CompressorCheck(has_issue=False, pattern=None)

    _, temp_max = get_temperature_limits(device_type)
    temps = [r.temperature for r in sorted(readings, key=lambda r: r.timestamp)]

    for pattern, check in _PATTERN_CHECKS:
        if check(temps, temp_max):
            return CompressorCheck(has_issue=True, pattern=pattern)

    return CompressorCheck(has_issue=False, pattern=None)

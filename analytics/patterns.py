"""운전 패턴 인식 (Pattern Recognizer).

첫 번째로 일치하는 패턴을 반환한다:

- DOOR_LEFT_OPEN: 직전 5건 평균보다 3°C 넘게 튄 뒤 부분적으로만 회복
- POWER_INSTABILITY: 양옆보다 5°C 넘게 높은 순간 스파이크 2회 이상
- DEFROST_ISSUES: 습도 80% 초과 측정이 30% 초과
"""

from __future__ import annotations

from typing import Callable, Sequence

from analytics.config import (
    DEFROST_HUMIDITY,
    DEFROST_RATIO,
    DOOR_OPEN_RISE_C,
    DOOR_OPEN_WINDOW,
    PATTERN_CONFIDENCE,
    PATTERN_DEFROST_ISSUES,
    PATTERN_DOOR_LEFT_OPEN,
    PATTERN_MIN_READINGS,
    PATTERN_POWER_INSTABILITY,
    POWER_MIN_EVENTS,
    POWER_SPIKE_C,
)
from analytics.models import PatternResult, Reading
from analytics.stats import calculate_stats

_NO_PATTERN = PatternResult(pattern=None, confidence=0.0, description=None)


def _door_left_open(ordered: list[Reading]) -> str | None:
    temps = [r.temperature for r in ordered]
    w = DOOR_OPEN_WINDOW

    for i in range(w, len(temps) - w - 1):
        before_mean = calculate_stats(temps[i - w:i]).mean
        peak = temps[i]
        after_mean = calculate_stats(temps[i + 1:i + 1 + w]).mean

        if peak > before_mean + DOOR_OPEN_RISE_C and before_mean < after_mean < peak:
            return (
                "Pattern indicates door was opened and left ajar, "
                "causing temperature spike with slow recovery"
            )
    return None


def count_power_spikes(temps: Sequence[float]) -> int:
    """양옆 측정보다 POWER_SPIKE_C 넘게 높은 내부 점 수."""
    return sum(
        1
        for prev, curr, nxt in zip(temps, temps[1:], temps[2:])
        if curr > prev + POWER_SPIKE_C and curr > nxt + POWER_SPIKE_C
    )


def _power_instability(ordered: list[Reading]) -> str | None:
    spikes = count_power_spikes([r.temperature for r in ordered])
    if spikes < POWER_MIN_EVENTS:
        return None
    return f"Detected {spikes} potential power interruption events"


def _defrost_issues(ordered: list[Reading]) -> str | None:
    humid = sum(1 for r in ordered if r.humidity > DEFROST_HUMIDITY)
    if humid <= len(ordered) * DEFROST_RATIO:
        return None
    return "Frequent high humidity readings suggest defrost cycle problems"


# (패턴, 감지 함수). 순서가 곧 우선순위
_PATTERN_CHECKS: list[tuple[str, Callable[[list[Reading]], str | None]]] = [
    (PATTERN_DOOR_LEFT_OPEN, _door_left_open),
    (PATTERN_POWER_INSTABILITY, _power_instability),
    (PATTERN_DEFROST_ISSUES, _defrost_issues),
]


def detect_patterns(
    readings: Sequence[Reading],
    time_range_hours: float = 24,
) -> PatternResult:
    """운전 패턴 감지.

    Args:
        readings: 측정값 (내부에서 시간 오름차순 정렬).
        time_range_hours: 분석 대상 기간 (호출 측이 이 기간으로 잘라서 전달).

    Returns:
        PatternResult. 10건 미만이거나 일치 패턴이 없으면 pattern=None.
    """
    if len(readings) < PATTERN_MIN_READINGS:
        return _NO_PATTERN

    ordered = sorted(readings, key=lambda r: r.timestamp)

    for pattern, check in _PATTERN_CHECKS:
        description = check(ordered)
        if description is not None:
            return PatternResult(
                pattern=pattern,
                confidence=PATTERN_CONFIDENCE[pattern],
                description=description,
            )

    return _NO_PATTERN

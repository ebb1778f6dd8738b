"""분석 엔진 입출력 데이터 모델."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from analytics.config import STATUS_HEALTHY, STATUS_NOT_HEALTHY
from master_data.device_type import get_device_type


# ---------------------------------------------------------------------------
# 입력
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Reading:
    """장비 1회 측정값."""

    temperature: float
    humidity: float
    timestamp: datetime
    latitude: float | None = None
    longitude: float | None = None
    gsm_signal: float | None = None
    battery_level: float | None = None

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class DeviceConfig:
    """호출 시점의 장비 설정 스냅샷.

    temp_min/temp_max가 None이면 장비 유형 기본값을 사용한다.
    """

    device_type: str
    temp_min: float | None = None
    temp_max: float | None = None
    humidity_min: float | None = None
    humidity_max: float | None = None
    last_seen_at: datetime | None = None
    last_latitude: float | None = None
    last_longitude: float | None = None
    health_status: str = STATUS_HEALTHY
    needs_manual_reset: bool = False
    install_date: datetime | None = None

    def temperature_limits(self) -> tuple[float, float]:
        """(temp_min, temp_max). 빈 값은 유형 기본값으로 채운다."""
        defaults = get_device_type(self.device_type)
        temp_min = self.temp_min if self.temp_min is not None else defaults["temp_min"]
        temp_max = self.temp_max if self.temp_max is not None else defaults["temp_max"]
        return temp_min, temp_max

    def humidity_limits(self) -> tuple[float, float]:
        """(humidity_min, humidity_max). 빈 값은 유형 기본값으로 채운다."""
        defaults = get_device_type(self.device_type)
        h_min = self.humidity_min if self.humidity_min is not None else defaults["humidity_min"]
        h_max = self.humidity_max if self.humidity_max is not None else defaults["humidity_max"]
        return h_min, h_max

    def age_days(self, now: datetime) -> int:
        """설치일로부터 경과 일수. 설치일 미상이면 0."""
        if self.install_date is None:
            return 0
        return max(0, (now - self.install_date).days)


# ---------------------------------------------------------------------------
# 결과
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HealthCheckResult:
    """측정값 1건에 대한 상태 판정."""

    status: str  # HEALTHY | WARNING | NOT_HEALTHY | OFFLINE
    reasons: list[str] = field(default_factory=list)
    severity: str = "low"  # low | medium | high | critical
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LatchState:
    """수동 리셋 래치 (Armed → Latched → Cleared).

    한 번 NOT_HEALTHY가 판정되면 운영자가 reset()하기 전까지
    일시적인 정상 판정으로 해제되지 않는다.
    """

    health_status: str = STATUS_HEALTHY
    needs_manual_reset: bool = False

    def apply(self, result: HealthCheckResult) -> LatchState:
        """새 판정을 반영한 다음 래치 상태."""
        if result.status == STATUS_NOT_HEALTHY:
            return LatchState(STATUS_NOT_HEALTHY, True)
        if self.needs_manual_reset and self.health_status == STATUS_NOT_HEALTHY:
            return self
        return replace(self, health_status=result.status)

    def reset(self) -> LatchState:
        """운영자 수동 리셋."""
        return LatchState(STATUS_HEALTHY, False)


@dataclass(frozen=True)
class CompressorCheck:
    has_issue: bool
    pattern: str | None = None


@dataclass(frozen=True)
class AnomalyResult:
    """z-score / 변화율 기반 이상 감지 결과."""

    is_anomaly: bool
    score: int  # 0~100
    anomaly_type: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class PredictionResult:
    """고장 예측 결과."""

    failure_probability: float  # 0~1
    predicted_failure: bool
    failure_type: str | None
    time_to_failure_hours: int | None
    confidence: float  # 0~1
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PatternResult:
    pattern: str | None
    confidence: float
    description: str | None = None


@dataclass(frozen=True)
class ValueRange:
    min: float
    max: float


@dataclass(frozen=True)
class Baseline:
    """장비별 학습 베이스라인."""

    normal_temp_range: ValueRange
    normal_humidity_range: ValueRange
    typical_variance: float
    peak_hours: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class DeviceInsights:
    """Insight Generator 최종 출력."""

    summary: str
    health_score: int
    insights: list[str] = field(default_factory=list)
    alerts: list[str] = field(default_factory=list)

"""콜드체인 분석 엔진 설정값."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# 상태/유형 식별자
# ---------------------------------------------------------------------------

STATUS_HEALTHY = "HEALTHY"
STATUS_WARNING = "WARNING"
STATUS_NOT_HEALTHY = "NOT_HEALTHY"
STATUS_OFFLINE = "OFFLINE"

# 장비 디스플레이용 상태 아이콘
STATUS_ICONS: dict[str, str] = {
    STATUS_HEALTHY: "✅",
    STATUS_WARNING: "⚠️",
    STATUS_NOT_HEALTHY: "❌",
    STATUS_OFFLINE: "📡",
}
UNKNOWN_STATUS_ICON = "❓"

DEVICE_FRIDGE = "FRIDGE"
DEVICE_FREEZER = "FREEZER"

# 심각도 순서 (낮음 → 높음)
SEVERITY_LEVELS: list[str] = ["low", "medium", "high", "critical"]

# ---------------------------------------------------------------------------
# Health Classifier
# ---------------------------------------------------------------------------

# 임계값 경고 버퍼 (°C)
WARNING_BUFFER_C: float = 1.0

# 마지막 수신 후 이 시간이 지나면 오프라인
OFFLINE_TIMEOUT_MINUTES: float = 30.0

# 5분 이내 연속 측정값 간 허용 온도 변화 (°C)
RAPID_CHANGE_WINDOW_MINUTES: float = 5.0
RAPID_CHANGE_MAX_DELTA_C: float = 5.0

# 분류기 컨텍스트로 사용하는 최근 측정값 수
CLASSIFIER_HISTORY_WINDOW: int = 50

# ---------------------------------------------------------------------------
# Movement Detector
# ---------------------------------------------------------------------------

EARTH_RADIUS_M: float = 6_371_000.0
MOVEMENT_THRESHOLD_M: float = 100.0

# ---------------------------------------------------------------------------
# Compressor Pattern Detector
# ---------------------------------------------------------------------------

PATTERN_GRADUAL_RISE = "GRADUAL_RISE"
PATTERN_EXCESSIVE_CYCLING = "EXCESSIVE_CYCLING"
PATTERN_STRUGGLING_TO_COOL = "STRUGGLING_TO_COOL"

COMPRESSOR_MIN_READINGS: int = 10
COMPRESSOR_RISING_RATIO: float = 0.8
COMPRESSOR_OSCILLATION_RATIO: float = 0.5
COMPRESSOR_NEAR_MAX_RATIO: float = 0.7
COMPRESSOR_NEAR_MAX_BAND_C: float = 1.0

# ---------------------------------------------------------------------------
# Anomaly Detector
# ---------------------------------------------------------------------------

ANOMALY_TEMPERATURE = "TEMPERATURE_ANOMALY"
ANOMALY_HUMIDITY = "HUMIDITY_ANOMALY"
ANOMALY_RAPID_CHANGE = "RAPID_CHANGE"

ANOMALY_MIN_HISTORY: int = 10
ANOMALY_Z_THRESHOLD: float = 2.5
ANOMALY_RATE_WINDOW_MINUTES: float = 10.0
ANOMALY_RATE_THRESHOLD_C_PER_MIN: float = 0.5
# rate(°C/min) × 30 → score
ANOMALY_RATE_SCORE_FACTOR: float = 30.0
# score > 50 이면 이상 판정
ANOMALY_SCORE_THRESHOLD: float = 50.0

# ---------------------------------------------------------------------------
# Failure Predictor
# ---------------------------------------------------------------------------

FAILURE_COMPRESSOR = "COMPRESSOR"
FAILURE_DOOR_SEAL = "DOOR_SEAL"

PREDICTION_MIN_READINGS: int = 20
PREDICTION_VARIANCE_WINDOW: int = 20
PREDICTION_MIN_OLDER_READINGS: int = 10
PREDICTION_VARIANCE_RATIO: float = 2.0

# 신호별 고장 확률 가산치
PROB_COMPRESSOR: float = 0.4
PROB_VARIANCE: float = 0.2
PROB_END_OF_LIFE: float = 0.15
PROB_AGING: float = 0.05
PROB_DOOR_SEAL: float = 0.1

END_OF_LIFE_DAYS: int = 1825  # 5년
AGING_DAYS: int = 1095  # 3년

DOOR_SEAL_HUMIDITY_MEAN: float = 65.0
DOOR_SEAL_HUMIDITY_STD: float = 10.0

# 컴프레서 패턴별 예상 고장 시점 (시간)
TIME_TO_FAILURE_HOURS: dict[str, int] = {
    PATTERN_GRADUAL_RISE: 48,
    PATTERN_EXCESSIVE_CYCLING: 72,
    PATTERN_STRUGGLING_TO_COOL: 24,
}
DOOR_SEAL_TIME_TO_FAILURE_HOURS: int = 168

COMPRESSOR_RECOMMENDATIONS: dict[str, list[str]] = {
    PATTERN_GRADUAL_RISE: ["Schedule compressor inspection immediately"],
    PATTERN_EXCESSIVE_CYCLING: ["Check refrigerant levels", "Inspect thermostat"],
    PATTERN_STRUGGLING_TO_COOL: [
        "Emergency maintenance required",
        "Prepare backup cold storage",
    ],
}

# 데이터 수 기반 신뢰도: min(1, n/100) × 0.8 + 0.2
CONFIDENCE_SATURATION_READINGS: int = 100
CONFIDENCE_FLOOR: float = 0.2

# ---------------------------------------------------------------------------
# Pattern Recognizer
# ---------------------------------------------------------------------------

PATTERN_DOOR_LEFT_OPEN = "DOOR_LEFT_OPEN"
PATTERN_POWER_INSTABILITY = "POWER_INSTABILITY"
PATTERN_DEFROST_ISSUES = "DEFROST_ISSUES"

PATTERN_MIN_READINGS: int = 10
DOOR_OPEN_WINDOW: int = 5
DOOR_OPEN_RISE_C: float = 3.0
POWER_SPIKE_C: float = 5.0
POWER_MIN_EVENTS: int = 2
DEFROST_HUMIDITY: float = 80.0
DEFROST_RATIO: float = 0.3

PATTERN_CONFIDENCE: dict[str, float] = {
    PATTERN_DOOR_LEFT_OPEN: 0.8,
    PATTERN_POWER_INSTABILITY: 0.7,
    PATTERN_DEFROST_ISSUES: 0.6,
}

# ---------------------------------------------------------------------------
# Baseline Learner
# ---------------------------------------------------------------------------

BASELINE_MIN_READINGS: int = 50
BASELINE_SIGMA: float = 2.0
PEAK_HOUR_VARIANCE_RATIO: float = 1.5

# 데이터 부족 시 기본 베이스라인
DEFAULT_TEMP_RANGE: tuple[float, float] = (2.0, 8.0)
DEFAULT_HUMIDITY_RANGE: tuple[float, float] = (30.0, 70.0)
DEFAULT_VARIANCE: float = 1.0

# ---------------------------------------------------------------------------
# Insight Generator
# ---------------------------------------------------------------------------

INSIGHTS_MIN_READINGS: int = 10
INSUFFICIENT_DATA_SCORE: int = 50

# 감점 가중치
ANOMALY_PENALTY_WEIGHT: float = 0.3
FAILURE_PENALTY_WEIGHT: float = 40.0
PATTERN_PENALTY_WEIGHT: float = 10.0

# health_score → 요약 문구 (score 이상이면 해당 문구)
HEALTH_SUMMARY_TIERS: list[tuple[float, str]] = [
    (90, "Device operating optimally with no concerns"),
    (70, "Device mostly healthy with minor observations"),
    (50, "Device requires attention - some issues detected"),
]
HEALTH_SUMMARY_CRITICAL = "Critical issues detected - immediate action required"

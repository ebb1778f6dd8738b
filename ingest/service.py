"""측정값 수집 서비스 — 조회 → 판정 → 래치 → 저장.

장비 행을 잠근 트랜잭션 안에서 수행하므로 같은 장비의 측정값은
한 번에 하나씩 처리된다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from analytics.config import STATUS_NOT_HEALTHY
from analytics.geo import has_moved
from analytics.health import alert_threshold_for, alert_type_for_reason, classify, status_icon
from analytics.insights import generate_insights
from analytics.models import DeviceInsights, LatchState, Reading
from ingest.config import IngestConfig
from ingest.store import DeviceStore

logger = logging.getLogger(__name__)


class DeviceNotFoundError(LookupError):
    """등록되지 않은 장비."""


@dataclass(frozen=True)
class IngestResult:
    """측정값 1건 처리 결과 (장비 응답용)."""

    status: str
    icon: str
    message: str
    reasons: list[str] = field(default_factory=list)
    needs_manual_reset: bool = False
    moved: bool = False
    alerts_created: list[str] = field(default_factory=list)
    insights: DeviceInsights | None = None


def process_reading(
    store: DeviceStore,
    device_id: str,
    reading: Reading,
    *,
    now: datetime,
    config: IngestConfig | None = None,
) -> IngestResult:
    """측정값 1건 수집 처리.

    Args:
        store: DeviceStore 인스턴스.
        device_id: 장비 ID.
        reading: 인증/파싱이 끝난 측정값.
        now: 서버 수신 시각.
        config: 수집 설정. None이면 환경변수에서 로드.

    Returns:
        IngestResult (래치 반영된 최종 상태).

    Raises:
        DeviceNotFoundError: 등록되지 않은 장비.
    """
    if config is None:
        config = IngestConfig.from_env()

    alerts_created: list[str] = []
    insights: DeviceInsights | None = None

    with store.session(device_id) as session:
        device = session.load_device()
        if device is None:
            raise DeviceNotFoundError(device_id)

        recent = session.recent_readings(config.history_window)
        result = classify(reading, device, recent, now=now)

        latch = LatchState(device.health_status, device.needs_manual_reset).apply(result)
        if latch.health_status != result.status:
            logger.info(
                f"[ingest] {device_id} 래치 유지: 판정={result.status} → {latch.health_status}"
            )

        session.save_reading(reading, latch.health_status, now)
        session.update_state(
            health_status=latch.health_status,
            needs_manual_reset=latch.needs_manual_reset,
            reading=reading,
            seen_at=now,
        )

        moved = reading.has_position and has_moved(
            device.last_latitude,
            device.last_longitude,
            reading.latitude,
            reading.longitude,
            config.movement_threshold_m,
        )
        if moved:
            created = session.create_alert(
                "GPS_MOVED",
                "HIGH",
                "Device Location Changed",
                f"Location changed from ({device.last_latitude}, {device.last_longitude}) "
                f"to ({reading.latitude}, {reading.longitude})",
            )
            if created:
                alerts_created.append("GPS_MOVED")

        if result.status == STATUS_NOT_HEALTHY:
            for reason in result.reasons:
                alert_type = alert_type_for_reason(reason)
                created = session.create_alert(
                    alert_type,
                    "CRITICAL",
                    "Temperature/Humidity Alert",
                    reason,
                    reading.humidity if alert_type.startswith("HUMIDITY") else reading.temperature,
                    alert_threshold_for(alert_type, device),
                )
                if created:
                    alerts_created.append(alert_type)

        total = session.count_readings()
        if total >= config.insights_min_readings and total % config.insights_every == 0:
            history = session.history_readings(min(total, config.insights_window))
            insights = generate_insights(
                history, device.device_type, device.age_days(now)
            )
            logger.info(
                f"[ingest] {device_id} 인사이트: score={insights.health_score}, "
                f"alerts={len(insights.alerts)}"
            )

    logger.info(
        f"[ingest] {device_id} 처리 완료: status={latch.health_status}, "
        f"reasons={len(result.reasons)}, alerts={alerts_created}"
    )

    return IngestResult(
        status=latch.health_status,
        icon=status_icon(latch.health_status),
        message=result.reasons[0] if result.reasons else "OK",
        reasons=result.reasons,
        needs_manual_reset=latch.needs_manual_reset,
        moved=moved,
        alerts_created=alerts_created,
        insights=insights,
    )


def reset_device(store: DeviceStore, device_id: str) -> LatchState:
    """운영자 수동 리셋 — 래치 해제.

    Raises:
        DeviceNotFoundError: 등록되지 않은 장비.
    """
    if not store.reset_latch(device_id):
        raise DeviceNotFoundError(device_id)
    return LatchState().reset()

"""PostgreSQL 기반 장비 상태 저장소.

devices / device_readings / alerts 테이블을 읽고 쓴다.
측정값 1건의 조회-판정-저장은 session() 트랜잭션 안에서
장비 행을 잠근 상태로 수행한다 (장비당 동시 갱신 1건).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

import psycopg
from psycopg.rows import dict_row

from analytics.models import DeviceConfig, Reading

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schema.sql"

_DEVICE_COLUMNS = """
    device_type, temp_min, temp_max, humidity_min, humidity_max,
    last_seen_at, last_latitude, last_longitude,
    health_status, needs_manual_reset, install_date
"""


def _row_to_device(row: dict) -> DeviceConfig:
    return DeviceConfig(
        device_type=row["device_type"],
        temp_min=row["temp_min"],
        temp_max=row["temp_max"],
        humidity_min=row["humidity_min"],
        humidity_max=row["humidity_max"],
        last_seen_at=row["last_seen_at"],
        last_latitude=row["last_latitude"],
        last_longitude=row["last_longitude"],
        health_status=row["health_status"],
        needs_manual_reset=row["needs_manual_reset"],
        install_date=row["install_date"],
    )


def _row_to_reading(row: dict) -> Reading:
    return Reading(
        temperature=row["temperature"],
        humidity=row["humidity"],
        timestamp=row["timestamp"],
        latitude=row.get("latitude"),
        longitude=row.get("longitude"),
        gsm_signal=row.get("gsm_signal"),
        battery_level=row.get("battery_level"),
    )


class DeviceSession:
    """장비 1대에 대한 트랜잭션 범위 작업.

    DeviceStore.session()으로만 생성한다.
    """

    def __init__(self, conn: psycopg.Connection, device_id: str) -> None:
        self.conn = conn
        self.device_id = device_id

    def load_device(self) -> DeviceConfig | None:
        """장비 설정 조회 + 행 잠금. 없으면 None."""
        query = f"SELECT {_DEVICE_COLUMNS} FROM devices WHERE device_id = %s FOR UPDATE"
        row = self.conn.execute(query, (self.device_id,)).fetchone()
        return _row_to_device(row) if row else None

    def recent_readings(self, limit: int) -> list[Reading]:
        """서버 수신 시각 기준 최근 측정값 (시간 역순)."""
        query = """
            SELECT temperature, humidity, server_timestamp AS timestamp
            FROM device_readings
            WHERE device_id = %s
            ORDER BY server_timestamp DESC
            LIMIT %s
        """
        rows = self.conn.execute(query, (self.device_id, limit)).fetchall()
        return [_row_to_reading(r) for r in rows]

    def history_readings(self, limit: int) -> list[Reading]:
        """인사이트용 최근 측정 이력 (장비 시각 기준 오름차순)."""
        query = """
            SELECT temperature, humidity, latitude, longitude,
                   gsm_signal, battery_level, device_timestamp AS timestamp
            FROM (
                SELECT * FROM device_readings
                WHERE device_id = %s
                ORDER BY device_timestamp DESC
                LIMIT %s
            ) recent
            ORDER BY device_timestamp ASC
        """
        rows = self.conn.execute(query, (self.device_id, limit)).fetchall()
        return [_row_to_reading(r) for r in rows]

    def count_readings(self) -> int:
        row = self.conn.execute(
            "SELECT count(*) AS n FROM device_readings WHERE device_id = %s",
            (self.device_id,),
        ).fetchone()
        return int(row["n"])

    def save_reading(self, reading: Reading, health_status: str, received_at: datetime) -> int:
        """측정값 저장. reading_id 반환."""
        query = """
            INSERT INTO device_readings (
                device_id, temperature, humidity, latitude, longitude,
                gsm_signal, battery_level, health_status,
                device_timestamp, server_timestamp
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING reading_id
        """
        params = (
            self.device_id,
            reading.temperature,
            reading.humidity,
            reading.latitude,
            reading.longitude,
            reading.gsm_signal,
            reading.battery_level,
            health_status,
            reading.timestamp,
            received_at,
        )
        row = self.conn.execute(query, params).fetchone()
        return int(row["reading_id"])

    def update_state(
        self,
        *,
        health_status: str,
        needs_manual_reset: bool,
        reading: Reading,
        seen_at: datetime,
    ) -> None:
        """판정 결과와 마지막 측정값으로 장비 상태 갱신."""
        query = """
            UPDATE devices SET
                health_status = %s,
                needs_manual_reset = %s,
                is_online = TRUE,
                last_seen_at = %s,
                last_temp_value = %s,
                last_humidity_value = %s,
                last_latitude = COALESCE(%s, last_latitude),
                last_longitude = COALESCE(%s, last_longitude)
            WHERE device_id = %s
        """
        self.conn.execute(
            query,
            (
                health_status,
                needs_manual_reset,
                seen_at,
                reading.temperature,
                reading.humidity,
                reading.latitude,
                reading.longitude,
                self.device_id,
            ),
        )

    def create_alert(
        self,
        alert_type: str,
        severity: str,
        title: str,
        message: str,
        trigger_value: float | None = None,
        threshold_value: float | None = None,
    ) -> bool:
        """알림 생성. 같은 유형의 ACTIVE 알림이 있으면 생성하지 않고 False."""
        existing = self.conn.execute(
            """
            SELECT alert_id FROM alerts
            WHERE device_id = %s AND alert_type = %s AND status = 'ACTIVE'
            LIMIT 1
            """,
            (self.device_id, alert_type),
        ).fetchone()
        if existing:
            return False

        self.conn.execute(
            """
            INSERT INTO alerts (
                device_id, alert_type, severity, title, message,
                trigger_value, threshold_value
            ) VALUES (%s, %s, %s, %s, %s, %s, %s)
            """,
            (self.device_id, alert_type, severity, title, message,
             trigger_value, threshold_value),
        )
        logger.info(f"[DeviceStore] 알림 생성: {self.device_id} {alert_type} ({severity})")
        return True


class DeviceStore:
    """PostgreSQL Device Store.

    Args:
        dsn: PostgreSQL 연결 문자열.
    """

    def __init__(self, dsn: str) -> None:
        self.dsn = dsn

    def initialize(self) -> None:
        """테이블 생성 (존재하지 않으면)."""
        schema_sql = _SCHEMA_PATH.read_text(encoding="utf-8")
        with psycopg.connect(self.dsn) as conn:
            conn.execute(schema_sql)
            conn.commit()
        logger.info("[DeviceStore] 테이블 초기화 완료")

    @contextmanager
    def session(self, device_id: str) -> Iterator[DeviceSession]:
        """장비 단위 트랜잭션. 정상 종료 시 commit, 예외 시 rollback."""
        with psycopg.connect(self.dsn, row_factory=dict_row) as conn:
            with conn.transaction():
                yield DeviceSession(conn, device_id)

    def reset_latch(self, device_id: str) -> bool:
        """운영자 수동 리셋. 장비가 없으면 False."""
        with psycopg.connect(self.dsn) as conn:
            cur = conn.execute(
                """
                UPDATE devices
                SET health_status = 'HEALTHY', needs_manual_reset = FALSE
                WHERE device_id = %s
                """,
                (device_id,),
            )
            conn.commit()

        updated = cur.rowcount > 0
        logger.info(f"[DeviceStore] 래치 리셋: {device_id} → {updated}")
        return updated

    def load_readings(self, device_id: str, limit: int = 500) -> list[Reading]:
        """리포트용 측정 이력 (장비 시각 기준 오름차순)."""
        query = """
            SELECT temperature, humidity, latitude, longitude,
                   gsm_signal, battery_level, device_timestamp AS timestamp
            FROM (
                SELECT * FROM device_readings
                WHERE device_id = %s
                ORDER BY device_timestamp DESC
                LIMIT %s
            ) recent
            ORDER BY device_timestamp ASC
        """
        with psycopg.connect(self.dsn, row_factory=dict_row) as conn:
            rows = conn.execute(query, (device_id, limit)).fetchall()

        logger.info(f"[DeviceStore] 이력 조회: {device_id} → {len(rows)}건")
        return [_row_to_reading(r) for r in rows]

"""장비 텔레메트리 페이로드 / 내보낸 측정 이력 로딩."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from analytics.models import DeviceConfig, Reading

_REQUIRED_KEYS = ("device_id", "temp", "humidity")


def _parse_timestamp(value: str | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    # ISO 8601, 'Z' 접미사 허용. 오프셋이 없으면 UTC로 간주
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_float(value) -> float | None:
    return None if value is None else float(value)


def parse_device_payload(
    payload: dict,
    *,
    received_at: datetime | None = None,
) -> tuple[str, Reading]:
    """장비가 전송한 페이로드 → (device_id, Reading).

    Payload keys:
        device_id, timestamp, temp, humidity, lat, lon, gsm_signal, battery_level

    Args:
        payload: 장비 JSON 페이로드.
        received_at: timestamp가 없을 때 사용할 수신 시각.

    Raises:
        ValueError: 필수 필드 누락 또는 timestamp/수신 시각 모두 없음.
    """
    missing = [k for k in _REQUIRED_KEYS if payload.get(k) is None]
    if missing:
        raise ValueError(
            f"Missing required fields: {', '.join(_REQUIRED_KEYS)} (missing: {', '.join(missing)})"
        )

    timestamp = _parse_timestamp(payload.get("timestamp")) or received_at
    if timestamp is None:
        raise ValueError(f"No timestamp for reading from {payload['device_id']}")

    reading = Reading(
        temperature=float(payload["temp"]),
        humidity=float(payload["humidity"]),
        timestamp=timestamp,
        latitude=_optional_float(payload.get("lat")),
        longitude=_optional_float(payload.get("lon")),
        gsm_signal=_optional_float(payload.get("gsm_signal")),
        battery_level=_optional_float(payload.get("battery_level")),
    )
    return str(payload["device_id"]), reading


def parse_device_config(data: dict) -> DeviceConfig:
    """장비 설정 dict → DeviceConfig.

    Raises:
        KeyError: device_type 누락.
    """
    return DeviceConfig(
        device_type=data["device_type"],
        temp_min=_optional_float(data.get("temp_min")),
        temp_max=_optional_float(data.get("temp_max")),
        humidity_min=_optional_float(data.get("humidity_min")),
        humidity_max=_optional_float(data.get("humidity_max")),
        last_seen_at=_parse_timestamp(data.get("last_seen_at")),
        last_latitude=_optional_float(data.get("last_latitude")),
        last_longitude=_optional_float(data.get("last_longitude")),
        health_status=data.get("health_status", "HEALTHY"),
        needs_manual_reset=bool(data.get("needs_manual_reset", False)),
        install_date=_parse_timestamp(data.get("install_date")),
    )


def load_device_export(path: str | Path) -> tuple[str, DeviceConfig, list[Reading]]:
    """내보낸 장비 파일 로드.

    파일 형식::

        {
          "device_id": "HT-DZ-00034",
          "device": {"device_type": "FRIDGE", "install_date": "...", ...},
          "readings": [{"timestamp": "...", "temp": 4.1, "humidity": 52}, ...]
        }

    Returns:
        (device_id, DeviceConfig, 시간 오름차순 측정값 리스트).

    Raises:
        FileNotFoundError: 파일 없음.
        ValueError: 측정값 페이로드 오류.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    device_id = str(data["device_id"])
    device = parse_device_config(data["device"])
    readings = [
        parse_device_payload({"device_id": device_id, **item})[1]
        for item in data.get("readings", [])
    ]
    readings.sort(key=lambda r: r.timestamp)
    return device_id, device, readings

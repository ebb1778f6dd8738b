"""장비 유형(Device Type) 기준정보.

장비 설정에 임계값이 비어 있을 때 사용하는 유형별 기본 운전 범위.
"""

from __future__ import annotations

DEVICE_TYPES: dict[str, dict] = {
    "FRIDGE": {
        "device_type": "FRIDGE",
        "description": "냉장 보관 (백신, 의약품, 신선식품)",
        "temp_min": 2.0,
        "temp_max": 8.0,
        "humidity_min": 30.0,
        "humidity_max": 70.0,
    },
    "FREEZER": {
        "device_type": "FREEZER",
        "description": "냉동 보관",
        "temp_min": -25.0,
        "temp_max": -18.0,
        "humidity_min": 30.0,
        "humidity_max": 70.0,
    },
}


def get_device_type(device_type: str) -> dict:
    """장비 유형 기준정보 조회.

    Args:
        device_type: 장비 유형 (예: 'FRIDGE', 'FREEZER').

    Returns:
        유형별 기본 임계값 dict.

    Raises:
        KeyError: 존재하지 않는 device_type.
    """
    return DEVICE_TYPES[device_type]


def get_temperature_limits(device_type: str) -> tuple[float, float]:
    """유형별 기본 (temp_min, temp_max) 반환."""
    spec = DEVICE_TYPES[device_type]
    return spec["temp_min"], spec["temp_max"]

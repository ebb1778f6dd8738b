"""장비 분석 리포트 생성기.

상태 판정과 인사이트, 개별 분석 결과를 JSON 직렬화 가능한 dict로 조립한다.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Sequence

from analytics.anomaly import detect_anomalies
from analytics.baseline import learn_baseline
from analytics.config import CLASSIFIER_HISTORY_WINDOW
from analytics.health import classify
from analytics.insights import generate_insights
from analytics.models import DeviceConfig, Reading
from analytics.patterns import detect_patterns
from analytics.prediction import predict_failure


def build_device_report(
    *,
    device_id: str,
    device: DeviceConfig,
    readings: Sequence[Reading],
    now: datetime,
) -> dict:
    """장비 1대에 대한 분석 리포트 조립.

    Args:
        device_id: 장비 ID.
        device: 장비 설정 스냅샷.
        readings: 측정 이력 (시간 오름차순).
        now: 리포트 기준 시각.

    Returns:
        리포트 dict. 측정값이 없으면 health_check는 None.
    """
    ordered = sorted(readings, key=lambda r: r.timestamp)
    age_days = device.age_days(now)

    health_check = None
    anomaly = None
    if ordered:
        latest = ordered[-1]
        history = ordered[:-1]
        health_check = asdict(classify(
            latest,
            device,
            history[-CLASSIFIER_HISTORY_WINDOW:],
            now=now,
        ))
        anomaly = asdict(detect_anomalies(latest, history, device.device_type))

    return {
        "device_id": device_id,
        "device_type": device.device_type,
        "generated_at": now.isoformat(),
        "reading_count": len(ordered),
        "device_age_days": age_days,
        "health_check": health_check,
        "insights": asdict(generate_insights(ordered, device.device_type, age_days)),
        "anomaly": anomaly,
        "prediction": _round_dict(
            asdict(predict_failure(ordered, device.device_type, age_days))
        ),
        "pattern": asdict(detect_patterns(ordered)),
        "baseline": _round_dict(asdict(learn_baseline(ordered))),
    }


def save_report(report: dict, output_path: str | Path) -> Path:
    """리포트를 JSON 파일로 저장.

    Args:
        report: build_device_report() 결과.
        output_path: 출력 파일 경로.

    Returns:
        저장된 파일 Path.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False, default=str)
    return output_path


# ---------------------------------------------------------------------------
# 내부 유틸
# ---------------------------------------------------------------------------


def _round_dict(d: dict, ndigits: int = 4) -> dict:
    """중첩 dict의 float 값을 반올림."""
    result = {}
    for key, value in d.items():
        if isinstance(value, dict):
            result[key] = _round_dict(value, ndigits)
        elif isinstance(value, float):
            result[key] = round(value, ndigits)
        else:
            result[key] = value
    return result

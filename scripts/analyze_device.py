"""내보낸 장비 측정 이력으로 분석 리포트 생성.

Usage:
    python scripts/analyze_device.py data/exports/HT-DZ-00034.json
    python scripts/analyze_device.py data/exports/*.json --output-dir data/reports
    python scripts/analyze_device.py data/exports/*.json --now 2026-02-23T12:00:00
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from analytics.health import summarize_fleet
from analytics.loader import load_device_export
from analytics.report import build_device_report, save_report

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path(__file__).resolve().parent.parent / "data" / "reports"


def _parse_now(value: str) -> datetime:
    """--now 인자 파싱. 오프셋이 없으면 UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def analyze_file(path: Path, output_dir: Path, now: datetime) -> dict:
    """장비 파일 1개 분석 → 리포트 저장. 리포트 dict 반환."""
    device_id, device, readings = load_device_export(path)
    logger.info(f"  [{device_id}] 측정값 {len(readings)}건 로드 ({device.device_type})")

    report = build_device_report(
        device_id=device_id,
        device=device,
        readings=readings,
        now=now,
    )

    health = report["health_check"]
    insights = report["insights"]
    logger.info(
        f"  [{device_id}] status={health['status'] if health else 'N/A'}, "
        f"health_score={insights['health_score']}, "
        f"alerts={len(insights['alerts'])}"
    )

    output_path = save_report(report, output_dir / f"{device_id}_report.json")
    logger.info(f"  [{device_id}] 저장 완료: {output_path}")
    return report


def main() -> None:
    parser = argparse.ArgumentParser(description="장비 측정 이력 분석 리포트 생성")
    parser.add_argument(
        "inputs",
        type=Path,
        nargs="+",
        help="장비 내보내기 JSON 파일",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"출력 디렉토리 (기본: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--now",
        type=_parse_now,
        default=None,
        help="리포트 기준 시각 (ISO 8601, 기본: 현재 UTC)",
    )
    args = parser.parse_args()

    now = args.now or datetime.now(timezone.utc)
    logger.info(f"=== 장비 분석 시작 ({len(args.inputs)}건) ===")

    statuses: list[str] = []
    failed = 0
    for path in args.inputs:
        try:
            report = analyze_file(path, args.output_dir, now)
        except Exception:
            failed += 1
            logger.exception(f"  [{path.name}] 분석 실패")
            continue
        if report["health_check"]:
            statuses.append(report["health_check"]["status"])

    fleet = summarize_fleet(statuses)
    logger.info(
        f"=== 완료: 장비 {fleet['total_devices']}대, "
        f"준수율 {fleet['compliance_rate']}%, 실패 {failed}건 ==="
    )

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()

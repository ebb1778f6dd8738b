"""수집 서비스 설정.

환경변수(.env 포함)에서 PostgreSQL 접속 정보와 수집 정책을 로드한다.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from analytics.config import CLASSIFIER_HISTORY_WINDOW, MOVEMENT_THRESHOLD_M

load_dotenv()

# ---------------------------------------------------------------------------
# 설정
# ---------------------------------------------------------------------------

DEFAULT_INSIGHTS_EVERY = 10
DEFAULT_INSIGHTS_MIN_READINGS = 20
DEFAULT_INSIGHTS_WINDOW = 500


@dataclass
class IngestConfig:
    """수집 서비스 설정."""

    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "coldchain"
    postgres_user: str = "coldchain"
    postgres_password: str = ""

    # 분류기 컨텍스트로 조회할 최근 측정값 수
    history_window: int = CLASSIFIER_HISTORY_WINDOW

    # N건마다 인사이트 재산출 (최소 insights_min_readings건 이상일 때)
    insights_every: int = DEFAULT_INSIGHTS_EVERY
    insights_min_readings: int = DEFAULT_INSIGHTS_MIN_READINGS
    # 인사이트 산출에 읽는 최대 측정값 수 (장비 행 잠금 중 조회)
    insights_window: int = DEFAULT_INSIGHTS_WINDOW

    movement_threshold_m: float = MOVEMENT_THRESHOLD_M

    @classmethod
    def from_env(cls) -> "IngestConfig":
        """환경변수에서 설정 로드."""
        return cls(
            postgres_host=os.getenv("POSTGRES_HOST", "localhost"),
            postgres_port=int(os.getenv("POSTGRES_PORT", "5432")),
            postgres_db=os.getenv("POSTGRES_DB", "coldchain"),
            postgres_user=os.getenv("POSTGRES_USER", "coldchain"),
            postgres_password=os.getenv("POSTGRES_PASSWORD", ""),
            history_window=int(
                os.getenv("COLDCHAIN_HISTORY_WINDOW", str(CLASSIFIER_HISTORY_WINDOW))
            ),
            insights_every=int(
                os.getenv("COLDCHAIN_INSIGHTS_EVERY", str(DEFAULT_INSIGHTS_EVERY))
            ),
            insights_min_readings=int(
                os.getenv("COLDCHAIN_INSIGHTS_MIN_READINGS", str(DEFAULT_INSIGHTS_MIN_READINGS))
            ),
            insights_window=int(
                os.getenv("COLDCHAIN_INSIGHTS_WINDOW", str(DEFAULT_INSIGHTS_WINDOW))
            ),
            movement_threshold_m=float(
                os.getenv("COLDCHAIN_MOVEMENT_THRESHOLD_M", str(MOVEMENT_THRESHOLD_M))
            ),
        )

    @property
    def postgres_dsn(self) -> str:
        """PostgreSQL 연결 문자열."""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

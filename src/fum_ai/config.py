"""환경변수 기반 설정"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """서비스 설정"""
    coingecko_api_key: str | None = None
    http_timeout: float = 30
    history_days: int = 365
    token_cache_size: int = 512
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """.env 및 환경변수에서 설정 로드"""
        load_dotenv()

        return cls(
            coingecko_api_key=os.getenv("COINGECKO_API_KEY") or None,
            http_timeout=float(os.getenv("FUM_HTTP_TIMEOUT", "30")),
            history_days=int(os.getenv("FUM_HISTORY_DAYS", "365")),
            token_cache_size=int(os.getenv("FUM_TOKEN_CACHE_SIZE", "512")),
            log_level=os.getenv("FUM_LOG_LEVEL", "INFO").upper(),
        )

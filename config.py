# config.py
import os
from pathlib import Path

from dotenv import load_dotenv  # pip install python-dotenv

# .env 는 코드 옆에 두며, 이미 설정된 환경변수를 덮어쓰지 않는다
load_dotenv(dotenv_path=Path(__file__).with_name(".env"), encoding="utf-8")

# =========================
# 서비스 기본
# =========================
ENV = os.getenv("ENV", "development")
SERVICE_HOST = os.getenv("SERVICE_HOST", "0.0.0.0")
SERVICE_PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# 운영 환경에서만 사용 (쉼표 구분)
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "https://yourdomain.com")

# =========================
# 명반 계산 캐시 (프로세스 내 LRU)
# =========================
CHART_CACHE_SIZE = int(os.getenv("CHART_CACHE_SIZE", "256"))


def is_production() -> bool:
    return ENV == "production"


def get_cors_origins() -> list[str]:
    """환경에 따른 CORS 설정"""
    if is_production():
        return [origin.strip() for origin in ALLOWED_ORIGINS.split(",") if origin.strip()]
    return ["*"]

# api_server.py
import logging
from datetime import date
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

import config
from bazi_engine import FourPillarsResult, chart_cache_key, compute_four_pillars, generate_text_report, score_daily_fortune
from lunar_provider import (
    LunarCalendarProvider,
    LunarPythonCalendar,
    build_birth_profile,
    build_lunar_profile,
    compute_daily_pillar,
)
from ziwei_engine import ZiWeiChart, compute_ziwei_chart

# --- 로깅 기본 설정 ---
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("chart_api")

app = FastAPI(title="Chart API", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_default_provider = LunarPythonCalendar()


def get_calendar_provider() -> LunarCalendarProvider:
    return _default_provider


# -------------------------
# 요청 스키마
# -------------------------
class BirthRequest(BaseModel):
    birth_year: int = Field(alias="birthYear")
    birth_month: int = Field(alias="birthMonth")
    birth_day: int = Field(alias="birthDay")
    birth_hour: int = Field(alias="birthHour")
    gender: str
    birth_location: str | None = Field(None, alias="birthLocation")
    timezone: str | None = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "birthYear": 1990, "birthMonth": 5, "birthDay": 15,
                "birthHour": 10, "gender": "male",
                "birthLocation": "Seoul", "timezone": "Asia/Seoul",
            }
        },
    )


class BaziRequest(BirthRequest):
    include_text_report: bool = Field(True, alias="includeTextReport")


class DailyRequest(BirthRequest):
    target_date: date | None = Field(None, alias="date")


def _is_whitespace_only(value: str | None) -> bool:
    return isinstance(value, str) and len(value) > 0 and not value.strip()


def validate_birth_input(req: BirthRequest) -> None:
    """날짜/시간/성별 입력값 검증 (엔진은 검증하지 않는다)"""
    if any(_is_whitespace_only(v) for v in (req.gender, req.birth_location, req.timezone)):
        raise ValueError("whitespace-only input is not allowed")
    if not (1 <= req.birth_year <= 9999):
        raise ValueError("birthYear must be within 1-9999")
    if not (1 <= req.birth_month <= 12):
        raise ValueError("birthMonth must be within 1-12")
    if not (0 <= req.birth_hour <= 23):
        raise ValueError("birthHour must be within 0-23")
    if not req.gender.strip():
        raise ValueError("gender is required")
    try:
        date(req.birth_year, req.birth_month, req.birth_day)
    except ValueError:
        raise ValueError("birthDay is not valid for the given month")


def _checked(req: BirthRequest) -> BirthRequest:
    try:
        validate_birth_input(req)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid input: {e}")
    return req


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": "Invalid input", "errors": jsonable_encoder(exc.errors())})


# -------------------------
# 계산 (입력 지문 기준 LRU 캐시)
# -------------------------
def _split_cache_key(key: str) -> tuple[int, int, int, int, str]:
    y, m, d, h, gender = key.split("-", 4)
    return int(y), int(m), int(d), int(h), gender


@lru_cache(maxsize=config.CHART_CACHE_SIZE)
def _four_pillars_cached(provider: LunarCalendarProvider, key: str) -> FourPillarsResult:
    y, m, d, h, gender = _split_cache_key(key)
    profile, da_yun = build_birth_profile(provider, y, m, d, h, gender)
    return compute_four_pillars(profile, da_yun)


@lru_cache(maxsize=config.CHART_CACHE_SIZE)
def _ziwei_cached(provider: LunarCalendarProvider, key: str) -> ZiWeiChart:
    y, m, d, h, _gender = _split_cache_key(key)
    return compute_ziwei_chart(build_lunar_profile(provider, y, m, d, h))


def _cache_key(req: BirthRequest) -> str:
    return chart_cache_key(req.birth_year, req.birth_month, req.birth_day, req.birth_hour, req.gender)


def _input_echo(req: BirthRequest) -> dict:
    return {
        "birth_year": req.birth_year,
        "birth_month": req.birth_month,
        "birth_day": req.birth_day,
        "birth_hour": req.birth_hour,
        "gender": req.gender.strip().lower(),
        "birth_location": req.birth_location.strip() if req.birth_location else None,
        "timezone": req.timezone.strip() if req.timezone else None,
    }


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/api/bazi/calculate")
def calc_bazi(req: BaziRequest, provider: LunarCalendarProvider = Depends(get_calendar_provider)):
    _checked(req)
    try:
        result = _four_pillars_cached(provider, _cache_key(req))
    except Exception:
        logger.exception("bazi calculation failed for %s", _cache_key(req))
        raise HTTPException(status_code=500, detail="Calculation error")

    payload = result.to_dict()
    out = {"ok": True, "input": _input_echo(req), "payload": payload}
    if req.include_text_report:
        out["text_report"] = generate_text_report(payload)
    return out


@app.post("/api/ziwei/calculate")
def calc_ziwei(req: BirthRequest, provider: LunarCalendarProvider = Depends(get_calendar_provider)):
    _checked(req)
    try:
        chart = _ziwei_cached(provider, _cache_key(req))
    except Exception:
        logger.exception("ziwei calculation failed for %s", _cache_key(req))
        raise HTTPException(status_code=500, detail="Calculation error")
    return {"ok": True, "input": _input_echo(req), "chart": chart.to_dict()}


@app.post("/api/bazi/daily")
def daily_fortune(req: DailyRequest, provider: LunarCalendarProvider = Depends(get_calendar_provider)):
    _checked(req)
    target = req.target_date or date.today()
    try:
        result = _four_pillars_cached(provider, _cache_key(req))
        daily = compute_daily_pillar(provider, target)
    except Exception:
        logger.exception("daily fortune failed for %s on %s", _cache_key(req), target)
        raise HTTPException(status_code=500, detail="Calculation error")
    return {
        "ok": True,
        "daily": {"date": target.isoformat(), "stem": daily.stem, "branch": daily.branch},
        "fortune": score_daily_fortune(result, daily),
    }


# 운영 환경에서는 debug 엔드포인트 비활성화
if not config.is_production():
    @app.get("/debug/config")
    def debug_config():
        return {
            "env": config.ENV,
            "log_level": config.LOG_LEVEL,
            "chart_cache_size": config.CHART_CACHE_SIZE,
            "bazi_cache": _four_pillars_cached.cache_info()._asdict(),
            "ziwei_cache": _ziwei_cached.cache_info()._asdict(),
        }


# -------------------------
# Entrypoint
# -------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api_server:app", host=config.SERVICE_HOST, port=config.SERVICE_PORT, reload=True)

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest 공통 설정

- 고정값 만세력 provider (FixtureCalendar)
- 대표 입력 (1990-05-15 10시 남성: 甲午 / 辛巳 / 乙丑 / 壬巳)
- FastAPI TestClient
"""

import os
import sys

import pytest

# 프로젝트 루트를 import 경로에 추가
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from bazi_engine import BirthProfile, DaYunEntry, FourPillars, Pillar
from lunar_provider import ResolvedBirth
from ziwei_engine import LunarProfile

SAMPLE_PILLARS = FourPillars.from_chars("甲午", "辛巳", "乙丑", "壬巳")

# 순행 대운 (index 0 = 기운 전)
SAMPLE_GAN_ZHI = ["", "壬午", "癸未", "甲申", "乙酉", "丙戌", "丁亥", "戊子", "己丑", "庚寅"]


def make_da_yun(count: int = 10) -> tuple[DaYunEntry, ...]:
    out = []
    for i, gz in enumerate(SAMPLE_GAN_ZHI[:count]):
        start = 1 if i == 0 else 8 + (i - 1) * 10
        end = 7 if i == 0 else start + 9
        out.append(DaYunEntry(start_age=start, end_age=end, gan_zhi=gz,
                              start_year=1990 + start, end_year=1990 + end))
    return tuple(out)


class FixtureCalendar:
    """입력과 무관하게 고정 결과를 돌려주는 provider. daily 로 특정 날짜의 일주만 바꿀 수 있다."""

    def __init__(self, resolved: ResolvedBirth, da_yun=(), daily=None):
        self.resolved = resolved
        self._da_yun = tuple(da_yun)
        self.daily = daily or {}
        self.resolve_calls = 0

    def resolve(self, year, month, day, hour):
        self.resolve_calls += 1
        day_pillar = self.daily.get((year, month, day))
        if day_pillar is None:
            return self.resolved
        fp = self.resolved.pillars
        return ResolvedBirth(
            lunar_year=self.resolved.lunar_year,
            lunar_month=self.resolved.lunar_month,
            lunar_day=self.resolved.lunar_day,
            is_leap_month=self.resolved.is_leap_month,
            pillars=FourPillars(fp.year, fp.month, day_pillar, fp.hour),
        )

    def da_yun(self, year, month, day, hour, gender):
        return self._da_yun


@pytest.fixture
def sample_pillars():
    return SAMPLE_PILLARS


@pytest.fixture
def sample_profile():
    return BirthProfile(pillars=SAMPLE_PILLARS, gender="male")


@pytest.fixture
def sample_da_yun():
    return make_da_yun()


@pytest.fixture
def sample_lunar_profile():
    return LunarProfile(
        lunar_year=1990, lunar_month=4, lunar_day=21, is_leap_month=False,
        pillars=SAMPLE_PILLARS, birth_hour=10,
    )


@pytest.fixture
def fixture_calendar():
    resolved = ResolvedBirth(lunar_year=1990, lunar_month=4, lunar_day=21,
                             is_leap_month=False, pillars=SAMPLE_PILLARS)
    return FixtureCalendar(resolved, make_da_yun(), daily={(2024, 1, 1): Pillar("辛", "未")})


@pytest.fixture
def client(fixture_calendar):
    """FixtureCalendar 를 주입한 TestClient (테스트마다 캐시 초기화)"""
    from fastapi.testclient import TestClient

    import api_server

    api_server._four_pillars_cached.cache_clear()
    api_server._ziwei_cached.cache_clear()
    api_server.app.dependency_overrides[api_server.get_calendar_provider] = lambda: fixture_calendar
    try:
        yield TestClient(api_server.app)
    finally:
        api_server.app.dependency_overrides.clear()
        api_server._four_pillars_cached.cache_clear()
        api_server._ziwei_cached.cache_clear()

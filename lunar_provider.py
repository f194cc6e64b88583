# lunar_provider.py
# 만세력 어댑터: 양력 → 음력 + 네 기둥 글자 + 대운 (lunar-python 위임)
# 엔진은 이 Protocol 만 알고, 테스트에서는 고정값 provider 로 바꿔 끼운다.

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from lunar_python import Solar  # pip install lunar-python

from bazi_engine import BirthProfile, DaYunEntry, FourPillars, Pillar, is_male
from ziwei_engine import LunarProfile


@dataclass(frozen=True)
class ResolvedBirth:
    lunar_year: int
    lunar_month: int
    lunar_day: int
    is_leap_month: bool
    pillars: FourPillars


class LunarCalendarProvider(Protocol):
    def resolve(self, year: int, month: int, day: int, hour: int) -> ResolvedBirth:
        ...

    def da_yun(self, year: int, month: int, day: int, hour: int, gender: str) -> tuple[DaYunEntry, ...]:
        ...


class LunarPythonCalendar:
    """lunar_python 의 Solar/Lunar/EightChar 를 이용한 기본 구현."""

    DA_YUN_COUNT = 10

    def _eight_char(self, year: int, month: int, day: int, hour: int):
        lunar = Solar.fromYmdHms(year, month, day, hour, 0, 0).getLunar()
        return lunar, lunar.getEightChar()

    def resolve(self, year: int, month: int, day: int, hour: int) -> ResolvedBirth:
        lunar, ec = self._eight_char(year, month, day, hour)
        raw_month = lunar.getMonth()  # 윤달은 음수로 옴
        pillars = FourPillars(
            year=Pillar(ec.getYearGan(), ec.getYearZhi()),
            month=Pillar(ec.getMonthGan(), ec.getMonthZhi()),
            day=Pillar(ec.getDayGan(), ec.getDayZhi()),
            hour=Pillar(ec.getTimeGan(), ec.getTimeZhi()),
        )
        return ResolvedBirth(
            lunar_year=lunar.getYear(),
            lunar_month=abs(raw_month),
            lunar_day=lunar.getDay(),
            is_leap_month=raw_month < 0,
            pillars=pillars,
        )

    def da_yun(self, year: int, month: int, day: int, hour: int, gender: str) -> tuple[DaYunEntry, ...]:
        _lunar, ec = self._eight_char(year, month, day, hour)
        yun = ec.getYun(1 if is_male(gender) else 0)
        return tuple(
            DaYunEntry(
                start_age=dy.getStartAge(),
                end_age=dy.getEndAge(),
                gan_zhi=dy.getGanZhi(),
                start_year=dy.getStartYear(),
                end_year=dy.getEndYear(),
            )
            for dy in yun.getDaYun(self.DA_YUN_COUNT)
        )


# -------------------------
# 엔진 입력 조립
# -------------------------
def build_birth_profile(provider: LunarCalendarProvider, year: int, month: int, day: int, hour: int,
                        gender: str) -> tuple[BirthProfile, tuple[DaYunEntry, ...]]:
    resolved = provider.resolve(year, month, day, hour)
    da_yun = provider.da_yun(year, month, day, hour, gender)
    return BirthProfile(pillars=resolved.pillars, gender=gender), da_yun


def build_lunar_profile(provider: LunarCalendarProvider, year: int, month: int, day: int, hour: int) -> LunarProfile:
    resolved = provider.resolve(year, month, day, hour)
    return LunarProfile(
        lunar_year=resolved.lunar_year,
        lunar_month=resolved.lunar_month,
        lunar_day=resolved.lunar_day,
        is_leap_month=resolved.is_leap_month,
        pillars=resolved.pillars,
        birth_hour=hour,
    )


def compute_daily_pillar(provider: LunarCalendarProvider, day: date) -> Pillar:
    return provider.resolve(day.year, day.month, day.day, 0).pillars.day

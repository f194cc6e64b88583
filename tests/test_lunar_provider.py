#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""lunar-python 기반 provider 통합 테스트"""

from datetime import date

import pytest

pytest.importorskip("lunar_python")

from bazi_engine import compute_four_pillars
from chart_tables import BRANCHES_BY_CHAR, STEMS_BY_CHAR
from lunar_provider import LunarPythonCalendar, build_birth_profile, build_lunar_profile, compute_daily_pillar
from ziwei_engine import compute_ziwei_chart


@pytest.fixture(scope="module")
def calendar():
    return LunarPythonCalendar()


class TestResolve:
    def test_known_day_pillar(self, calendar):
        resolved = calendar.resolve(1987, 1, 7, 9)
        assert resolved.pillars.day.gan_zhi == "丙辰"
        assert resolved.pillars.year.gan_zhi == "丙寅"
        assert (resolved.lunar_year, resolved.lunar_month) == (1986, 12)
        assert resolved.is_leap_month is False

    def test_leap_month_is_positive(self, calendar):
        # 2020 윤4월
        resolved = calendar.resolve(2020, 6, 1, 12)
        assert resolved.lunar_month == 4
        assert resolved.is_leap_month is True

    def test_all_characters_known(self, calendar):
        fp = calendar.resolve(1990, 5, 15, 10).pillars
        for _key, p in fp.items():
            assert p.stem in STEMS_BY_CHAR
            assert p.branch in BRANCHES_BY_CHAR


class TestDaYun:
    @pytest.mark.parametrize("gender", ["male", "female"])
    def test_at_least_nine_entries(self, calendar, gender):
        da_yun = calendar.da_yun(1990, 5, 15, 10, gender)
        assert len(da_yun) >= 9
        for entry in da_yun[1:]:
            assert len(entry.gan_zhi) == 2

    def test_gender_reverses_direction(self, calendar):
        male = calendar.da_yun(1990, 5, 15, 10, "male")
        female = calendar.da_yun(1990, 5, 15, 10, "female")
        assert male[1].gan_zhi != female[1].gan_zhi


def test_engines_run_on_real_calendar(calendar):
    profile, da_yun = build_birth_profile(calendar, 1990, 5, 15, 10, "male")
    result = compute_four_pillars(profile, da_yun)
    assert len(result.luck_cycles) == 8
    assert result.element_tally.total == 8

    chart = compute_ziwei_chart(build_lunar_profile(calendar, 1990, 5, 15, 10))
    assert len(chart.palaces) == 12
    assert len(chart.transformations) == 4


def test_daily_pillar(calendar):
    day = compute_daily_pillar(calendar, date(1987, 1, 7))
    assert day.gan_zhi == "丙辰"

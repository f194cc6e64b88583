#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""오행 관계 + 십성 판정 단위 테스트"""

import itertools

import pytest

from bazi_engine import Relation, TenGod, classify_ten_god, element_relation
from chart_tables import ELEMENT_CYCLE, Element, HEAVENLY_STEMS


class TestElementRelation:
    @pytest.mark.parametrize("me, other, expected", [
        (Element.WOOD, Element.WOOD, Relation.SAME),
        (Element.WOOD, Element.FIRE, Relation.GENERATES),
        (Element.WATER, Element.WOOD, Relation.GENERATES),
        (Element.WOOD, Element.WATER, Relation.GENERATED_BY),
        (Element.WOOD, Element.EARTH, Relation.CONTROLS),
        (Element.METAL, Element.WOOD, Relation.CONTROLS),
        (Element.WOOD, Element.METAL, Relation.CONTROLLED_BY),
        (Element.FIRE, Element.WATER, Relation.CONTROLLED_BY),
    ])
    def test_known_pairs(self, me, other, expected):
        assert element_relation(me, other) is expected

    def test_every_pair_resolves(self):
        for a, b in itertools.product(ELEMENT_CYCLE, repeat=2):
            assert isinstance(element_relation(a, b), Relation)

    def test_relation_is_mirrored(self):
        mirror = {
            Relation.SAME: Relation.SAME,
            Relation.GENERATES: Relation.GENERATED_BY,
            Relation.GENERATED_BY: Relation.GENERATES,
            Relation.CONTROLS: Relation.CONTROLLED_BY,
            Relation.CONTROLLED_BY: Relation.CONTROLS,
        }
        for a, b in itertools.product(ELEMENT_CYCLE, repeat=2):
            assert element_relation(b, a) is mirror[element_relation(a, b)]


class TestTenGod:
    def test_jia_friend_rob_eating(self):
        assert classify_ten_god("甲", "甲") is TenGod.FRIEND
        assert classify_ten_god("甲", "乙") is TenGod.ROB_WEALTH
        assert classify_ten_god("甲", "丙") is TenGod.EATING_GOD

    @pytest.mark.parametrize("target, expected", [
        ("丁", TenGod.HURTING_OFFICER),
        ("戊", TenGod.INDIRECT_WEALTH),
        ("己", TenGod.DIRECT_WEALTH),
        ("庚", TenGod.SEVEN_KILLINGS),
        ("辛", TenGod.DIRECT_OFFICER),
        ("壬", TenGod.INDIRECT_RESOURCE),
        ("癸", TenGod.DIRECT_RESOURCE),
    ])
    def test_jia_full_row(self, target, expected):
        assert classify_ten_god("甲", target) is expected

    def test_yin_day_master(self):
        # 乙(음목) 기준: 丙(양화)=상관, 丁(음화)=식신
        assert classify_ten_god("乙", "丙") is TenGod.HURTING_OFFICER
        assert classify_ten_god("乙", "丁") is TenGod.EATING_GOD
        assert classify_ten_god("乙", "辛") is TenGod.SEVEN_KILLINGS

    @pytest.mark.parametrize("dm, target", [("X", "甲"), ("甲", "子"), (None, "甲"), ("甲", None)])
    def test_unrecognized(self, dm, target):
        assert classify_ten_god(dm, target) is TenGod.UNRECOGNIZED

    def test_each_day_master_sees_all_ten(self):
        for dm in HEAVENLY_STEMS:
            seen = {classify_ten_god(dm.char, other.char) for other in HEAVENLY_STEMS}
            assert len(seen) == 10
            assert TenGod.UNRECOGNIZED not in seen

    def test_labels(self):
        assert TenGod.FRIEND.label == "Friend (Bi Jian)"
        assert TenGod.DIRECT_OFFICER.cn == "正官"

# ziwei_engine.py
# 자미두수 명반: 명궁/신궁 + 자미/천부 + 주성 14 + 보좌성 8 + 사화
# 음력 월/일 + 시(0~23) + 연간만으로 계산하는 단일 패스, 입력 검증은 호출 측 책임.

import logging
from dataclasses import dataclass

from bazi_engine import FourPillars, render_pillar
from chart_tables import (
    MAJOR_STARS,
    MINOR_STARS,
    MINOR_STAR_OFFSETS,
    SIHUA_BY_STEM,
    TIANFU_GROUP_OFFSETS,
    ZIWEI_BRANCH_ORDER,
    ZIWEI_GROUP_OFFSETS,
    ZIWEI_MONTH_BRANCH_ORDER,
    ZIWEI_PALACES,
    NamedEntry,
    Sihua,
    Symbol,
    branch_info,
)

logger = logging.getLogger(__name__)

PALACE_COUNT = 12


@dataclass(frozen=True)
class LunarProfile:
    lunar_year: int
    lunar_month: int
    lunar_day: int
    is_leap_month: bool
    pillars: FourPillars
    birth_hour: int

    @property
    def year_stem(self) -> str:
        return self.pillars.year.stem


@dataclass(frozen=True)
class StarPlacement:
    key: str
    name: str
    cn: str
    transforms: tuple[Sihua, ...] = ()

    def to_dict(self) -> dict:
        out = {"key": self.key, "name": self.name, "cn": self.cn}
        if self.transforms:
            out["transforms"] = [t.value for t in self.transforms]
        return out


@dataclass(frozen=True)
class Transformation:
    type: Sihua
    star_key: str
    star_name: str
    star_cn: str

    def to_dict(self) -> dict:
        return {"type": self.type.value, "star_key": self.star_key, "star_name": self.star_name, "star_cn": self.star_cn}


@dataclass(frozen=True)
class PalaceSlot:
    index: int
    branch: Symbol
    palace: NamedEntry
    major_stars: tuple[StarPlacement, ...]
    minor_stars: tuple[StarPlacement, ...]
    transformations: tuple[Transformation, ...]

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "branch": {
                "key": self.branch.char,
                "name": self.branch.name,
                "element": self.branch.element.value,
                "polarity": self.branch.polarity.value,
            },
            "palace": {"key": self.palace.key, "name": self.palace.name, "cn": self.palace.cn},
            "stars": {
                "major": [s.to_dict() for s in self.major_stars],
                "minor": [s.to_dict() for s in self.minor_stars],
            },
            "transformations": [t.to_dict() for t in self.transformations],
        }


@dataclass(frozen=True)
class ZiWeiChart:
    profile: LunarProfile
    ming_index: int
    shen_index: int
    ziwei_index: int
    tianfu_index: int
    palaces: tuple[PalaceSlot, ...]
    transformations: tuple[Transformation, ...]

    def palace_by_key(self, key: str) -> PalaceSlot:
        for slot in self.palaces:
            if slot.palace.key == key:
                return slot
        raise KeyError(key)

    def to_dict(self) -> dict:
        p = self.profile
        lunar = {
            "year": p.lunar_year,
            "month": p.lunar_month,
            "day": p.lunar_day,
            "is_leap": p.is_leap_month,
        }
        for key, pillar in p.pillars.items():
            lunar[f"{key}_stem"] = pillar.stem
            lunar[f"{key}_branch"] = pillar.branch
        ming, shen = self.palaces[self.ming_index], self.palaces[self.shen_index]
        return {
            "lunar": lunar,
            "pillars": {key: render_pillar(pil) for key, pil in p.pillars.items()},
            "ming_palace": {"index": self.ming_index, "branch": ming.branch.char, "palace": ming.palace.key},
            "shen_palace": {"index": self.shen_index, "branch": shen.branch.char, "palace": shen.palace.key},
            "four_transformations": [t.to_dict() for t in self.transformations],
            "palaces": [slot.to_dict() for slot in self.palaces],
        }


# -------------------------
# 1단계: 인덱스
# -------------------------
def month_branch_index(lunar_month: int) -> int:
    branch = ZIWEI_MONTH_BRANCH_ORDER[(lunar_month - 1) % 12]
    return ZIWEI_BRANCH_ORDER.index(branch)


def time_branch_index(birth_hour: int) -> int:
    # 자시: 23:00~00:59 → 0
    return ((birth_hour + 1) // 2) % 12


def ming_shen_indices(month_idx: int, time_idx: int) -> tuple[int, int]:
    return (month_idx - time_idx) % PALACE_COUNT, (month_idx + time_idx) % PALACE_COUNT


def anchor_indices(month_idx: int, lunar_day: int) -> tuple[int, int]:
    ziwei = (month_idx + lunar_day - 1) % PALACE_COUNT
    return ziwei, (ziwei + 6) % PALACE_COUNT


def _sihua_by_star(year_stem: str) -> dict[str, list[Sihua]]:
    table = SIHUA_BY_STEM.get(year_stem)
    if table is None:
        logger.debug("year stem %r has no sihua row", year_stem)
        return {}
    by_star: dict[str, list[Sihua]] = {}
    for kind in Sihua:
        by_star.setdefault(table[kind], []).append(kind)
    return by_star


# -------------------------
# 명반 전체
# -------------------------
def compute_ziwei_chart(profile: LunarProfile) -> ZiWeiChart:
    m_idx = month_branch_index(profile.lunar_month)
    t_idx = time_branch_index(profile.birth_hour)
    ming, shen = ming_shen_indices(m_idx, t_idx)
    ziwei, tianfu = anchor_indices(m_idx, profile.lunar_day)

    # 궁 배치: 명궁부터 순행
    palace_at = {}
    for offset, palace in enumerate(ZIWEI_PALACES):
        palace_at[(ming + offset) % PALACE_COUNT] = palace

    major = [[] for _ in range(PALACE_COUNT)]
    minor = [[] for _ in range(PALACE_COUNT)]
    slot_transforms = [[] for _ in range(PALACE_COUNT)]
    placed = set()
    sihua = _sihua_by_star(profile.year_stem)

    def place(index: int, star: NamedEntry, bucket: list) -> None:
        tags = tuple(sihua.get(star.key, ()))
        bucket[index].append(StarPlacement(star.key, star.name, star.cn, tags))
        placed.add(star.key)
        for tag in tags:
            slot_transforms[index].append(Transformation(tag, star.key, star.name, star.cn))

    for key, offset in ZIWEI_GROUP_OFFSETS:
        place((ziwei + offset) % PALACE_COUNT, MAJOR_STARS[key], major)
    for key, offset in TIANFU_GROUP_OFFSETS:
        place((tianfu + offset) % PALACE_COUNT, MAJOR_STARS[key], major)

    minor_base = (profile.lunar_day + t_idx) % PALACE_COUNT
    for key, offset in MINOR_STAR_OFFSETS:
        place((minor_base + offset) % PALACE_COUNT, MINOR_STARS[key], minor)

    chart_transforms = []
    table = SIHUA_BY_STEM.get(profile.year_stem, {})
    for kind in Sihua:
        star_key = table.get(kind)
        if star_key not in placed:
            continue
        star = MAJOR_STARS.get(star_key) or MINOR_STARS[star_key]
        chart_transforms.append(Transformation(kind, star.key, star.name, star.cn))

    slots = tuple(
        PalaceSlot(
            index=i,
            branch=branch_info(ZIWEI_BRANCH_ORDER[i]),
            palace=palace_at[i],
            major_stars=tuple(major[i]),
            minor_stars=tuple(minor[i]),
            transformations=tuple(slot_transforms[i]),
        )
        for i in range(PALACE_COUNT)
    )
    return ZiWeiChart(
        profile=profile,
        ming_index=ming,
        shen_index=shen,
        ziwei_index=ziwei,
        tianfu_index=tianfu,
        palaces=slots,
        transformations=tuple(chart_transforms),
    )

# bazi_engine.py
# 사주 엔진: 오행 관계 + 십성 + 오행 집계 + 십성 세기 + 대운 + 일진 점수 + 요약 문장
# 입력(천간/지지 글자)은 외부 만세력에서 받은 값을 그대로 사용한다.

import logging
import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

from chart_tables import (
    BRANCH_CLASHES,
    ELEMENT_CYCLE,
    HIDDEN_STEM_BY_BRANCH,
    Element,
    Symbol,
    branch_info,
    element_of,
    stem_info,
)

logger = logging.getLogger(__name__)

# -------------------------
# 공통 데이터 구조
# -------------------------
@dataclass(frozen=True)
class Pillar:
    stem: str
    branch: str

    @property
    def gan_zhi(self) -> str:
        return f"{self.stem}{self.branch}"


@dataclass(frozen=True)
class FourPillars:
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar

    def items(self):
        return (("year", self.year), ("month", self.month), ("day", self.day), ("hour", self.hour))

    def characters(self) -> tuple[str, ...]:
        out = []
        for _key, p in self.items():
            out.extend((p.stem, p.branch))
        return tuple(out)

    @classmethod
    def from_chars(cls, year: str, month: str, day: str, hour: str) -> "FourPillars":
        """"甲午", "辛巳", ... 처럼 2글자 간지 4개로 생성."""
        return cls(*(Pillar(gz[0], gz[1]) for gz in (year, month, day, hour)))


@dataclass(frozen=True)
class BirthProfile:
    pillars: FourPillars
    gender: str


@dataclass(frozen=True)
class DaYunEntry:
    start_age: int
    end_age: int
    gan_zhi: str
    start_year: int | None = None
    end_year: int | None = None


@dataclass(frozen=True)
class LuckCycle:
    age_range: str
    stem: str
    branch: str
    start_year: int | None
    end_year: int | None

    def to_dict(self) -> dict:
        s, b = stem_info(self.stem), branch_info(self.branch)
        return {
            "range": self.age_range,
            "stem": self.stem,
            "branch": self.branch,
            "stem_name": s.name if s else self.stem,
            "branch_name": b.name if b else self.branch,
            "start_year": self.start_year,
            "end_year": self.end_year,
        }


def is_male(gender: str) -> bool:
    return gender.strip().lower().startswith("m")


# -------------------------
# 1단계: 오행 생극 관계
# -------------------------
class Relation(Enum):
    SAME = "Same"
    GENERATES = "Generates"
    GENERATED_BY = "GeneratedBy"
    CONTROLS = "Controls"
    CONTROLLED_BY = "ControlledBy"


def element_relation(me: Element, other: Element) -> Relation:
    """me 입장에서 본 other 와의 관계 (상생 순환 인덱스 산술)."""
    a = ELEMENT_CYCLE.index(me)
    b = ELEMENT_CYCLE.index(other)
    if a == b:
        return Relation.SAME
    if (a + 1) % 5 == b:
        return Relation.GENERATES
    if (b + 1) % 5 == a:
        return Relation.GENERATED_BY
    if (a + 2) % 5 == b:
        return Relation.CONTROLS
    if (b + 2) % 5 == a:
        return Relation.CONTROLLED_BY
    raise RuntimeError(f"no element relation between {me} and {other}")


# -------------------------
# 2단계: 십성(十神)
# -------------------------
class TenGod(Enum):
    FRIEND = "Friend"
    ROB_WEALTH = "RobWealth"
    EATING_GOD = "EatingGod"
    HURTING_OFFICER = "HurtingOfficer"
    INDIRECT_WEALTH = "IndirectWealth"
    DIRECT_WEALTH = "DirectWealth"
    SEVEN_KILLINGS = "SevenKillings"
    DIRECT_OFFICER = "DirectOfficer"
    INDIRECT_RESOURCE = "IndirectResource"
    DIRECT_RESOURCE = "DirectResource"
    UNRECOGNIZED = "Unrecognized"

    @property
    def label(self) -> str:
        return TEN_GOD_LABELS[self][0]

    @property
    def cn(self) -> str:
        return TEN_GOD_LABELS[self][1]


TEN_GOD_LABELS = MappingProxyType({
    TenGod.FRIEND: ("Friend (Bi Jian)", "比肩"),
    TenGod.ROB_WEALTH: ("Rob Wealth (Jie Cai)", "劫财"),
    TenGod.EATING_GOD: ("Eating God (Shi Shen)", "食神"),
    TenGod.HURTING_OFFICER: ("Hurting Officer (Shang Guan)", "伤官"),
    TenGod.INDIRECT_WEALTH: ("Indirect Wealth (Pian Cai)", "偏财"),
    TenGod.DIRECT_WEALTH: ("Direct Wealth (Zheng Cai)", "正财"),
    TenGod.SEVEN_KILLINGS: ("Seven Killings (Qi Sha)", "七杀"),
    TenGod.DIRECT_OFFICER: ("Direct Officer (Zheng Guan)", "正官"),
    TenGod.INDIRECT_RESOURCE: ("Indirect Resource (Pian Yin)", "偏印"),
    TenGod.DIRECT_RESOURCE: ("Direct Resource (Zheng Yin)", "正印"),
    TenGod.UNRECOGNIZED: ("Unrecognized", "?"),
})

# 집계 대상 10개 (UNRECOGNIZED 제외), 표시 순서 고정
TEN_GOD_CATEGORIES = tuple(tg for tg in TenGod if tg is not TenGod.UNRECOGNIZED)

# (관계) → (같은 음양, 다른 음양)
_TEN_GOD_TABLE = MappingProxyType({
    Relation.SAME: (TenGod.FRIEND, TenGod.ROB_WEALTH),
    Relation.GENERATES: (TenGod.EATING_GOD, TenGod.HURTING_OFFICER),
    Relation.GENERATED_BY: (TenGod.INDIRECT_RESOURCE, TenGod.DIRECT_RESOURCE),
    Relation.CONTROLS: (TenGod.INDIRECT_WEALTH, TenGod.DIRECT_WEALTH),
    Relation.CONTROLLED_BY: (TenGod.SEVEN_KILLINGS, TenGod.DIRECT_OFFICER),
})


def classify_ten_god(day_stem: str | None, target_stem: str | None) -> TenGod:
    dm = stem_info(day_stem)
    tg = stem_info(target_stem)
    if dm is None or tg is None:
        return TenGod.UNRECOGNIZED
    same_polarity = dm.polarity == tg.polarity
    same, different = _TEN_GOD_TABLE[element_relation(dm.element, tg.element)]
    return same if same_polarity else different


# -------------------------
# 3단계: 오행 집계
# -------------------------
@dataclass(frozen=True)
class ElementTally:
    counts: Mapping[Element, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def percentages(self) -> dict[Element, int]:
        total = self.total
        if not total:
            return {e: 0 for e in ELEMENT_CYCLE}
        # 반올림은 half-up (12.5 → 13)
        return {e: math.floor(self.counts[e] * 100 / total + 0.5) for e in ELEMENT_CYCLE}

    def to_dict(self) -> dict:
        return {
            "counts": {e.value: self.counts[e] for e in ELEMENT_CYCLE},
            "percent": {e.value: v for e, v in self.percentages.items()},
            "total": self.total,
        }


def compute_element_tally(pillars: FourPillars) -> ElementTally:
    counts = {e: 0 for e in ELEMENT_CYCLE}
    for ch in pillars.characters():
        el = element_of(ch)
        if el is None:
            logger.debug("unknown stem/branch character %r skipped in element tally", ch)
            continue
        counts[el] += 1
    return ElementTally(MappingProxyType(counts))


# -------------------------
# 4단계: 십성 세기 (7자리 × 10)
# -------------------------
TEN_GOD_WEIGHT = 10

# 일간 자신은 기준이므로 제외, 일지는 포함
TEN_GOD_SCAN_POSITIONS = (
    ("year", "stem"), ("year", "branch"),
    ("month", "stem"), ("month", "branch"),
    ("day", "branch"),
    ("hour", "stem"), ("hour", "branch"),
)


def stem_equivalent(char: str | None) -> str | None:
    """천간이면 그대로, 지지면 본기 지장간."""
    if stem_info(char):
        return char
    return HIDDEN_STEM_BY_BRANCH.get(char) if char else None


def compute_ten_god_strengths(pillars: FourPillars) -> Mapping[TenGod, int]:
    day_master = pillars.day.stem
    strengths = {tg: 0 for tg in TEN_GOD_CATEGORIES}
    for pillar_key, part in TEN_GOD_SCAN_POSITIONS:
        char = getattr(getattr(pillars, pillar_key), part)
        tg = classify_ten_god(day_master, stem_equivalent(char))
        if tg is TenGod.UNRECOGNIZED:
            logger.debug("ten god unrecognized at %s.%s (%r vs day master %r)", pillar_key, part, char, day_master)
            continue
        strengths[tg] += TEN_GOD_WEIGHT
    return MappingProxyType(strengths)


# -------------------------
# 5단계: 대운(大運)
# -------------------------
LUCK_CYCLE_COUNT = 8


def build_luck_cycles(da_yun: Sequence[DaYunEntry]) -> tuple[LuckCycle, ...]:
    # index 0 은 기운 전(幼年) 구간이라 제외
    cycles = []
    for dy in list(da_yun)[1:LUCK_CYCLE_COUNT + 1]:
        gz = dy.gan_zhi or ""
        cycles.append(LuckCycle(
            age_range=f"{dy.start_age}-{dy.end_age}",
            stem=gz[0:1],
            branch=gz[1:2],
            start_year=dy.start_year,
            end_year=dy.end_year,
        ))
    return tuple(cycles)


# -------------------------
# 네 기둥 종합
# -------------------------
def _symbol_dict(info: Symbol | None, char: str) -> dict:
    if info is None:
        return {"char": char, "name": char, "element": "Unknown", "polarity": None}
    return {"char": info.char, "name": info.name, "element": info.element.value, "polarity": info.polarity.value}


def render_pillar(pillar: Pillar) -> dict:
    s, b = stem_info(pillar.stem), branch_info(pillar.branch)
    return {
        "stem": pillar.stem,
        "branch": pillar.branch,
        "stem_name": s.name if s else pillar.stem,
        "branch_name": b.name if b else pillar.branch,
        "stem_element": s.element.value if s else "Unknown",
        "branch_element": b.element.value if b else "Unknown",
    }


@dataclass(frozen=True)
class FourPillarsResult:
    pillars: FourPillars
    gender: str
    element_tally: ElementTally
    ten_god_strengths: Mapping[TenGod, int]
    luck_cycles: tuple[LuckCycle, ...]

    @property
    def day_master(self) -> Symbol | None:
        return stem_info(self.pillars.day.stem)

    def to_dict(self) -> dict:
        return {
            "gender": self.gender,
            "pillars": {key: render_pillar(p) for key, p in self.pillars.items()},
            "day_master": _symbol_dict(self.day_master, self.pillars.day.stem),
            "five_elements": self.element_tally.to_dict(),
            "ten_gods": [
                {"key": tg.value, "name": tg.label, "cn": tg.cn, "strength": self.ten_god_strengths[tg]}
                for tg in TEN_GOD_CATEGORIES
            ],
            "luck_cycles": [c.to_dict() for c in self.luck_cycles],
        }


def compute_four_pillars(profile: BirthProfile, da_yun: Sequence[DaYunEntry] = ()) -> FourPillarsResult:
    fp = profile.pillars
    return FourPillarsResult(
        pillars=fp,
        gender=profile.gender,
        element_tally=compute_element_tally(fp),
        ten_god_strengths=compute_ten_god_strengths(fp),
        luck_cycles=build_luck_cycles(da_yun),
    )


# -------------------------
# 일진(日辰) 점수
# -------------------------
DAILY_BASE_SCORE = 60

# 일진 천간 오행이 일간 오행에 작용하는 관계별 가감
_DAILY_RELATION_RULES = MappingProxyType({
    Relation.GENERATES: (15, "Today supports you securely. Good for planning."),
    Relation.SAME: (10, "Social energy is high. Connect with friends."),
    Relation.CONTROLS: (-10, "Pressure might be high. Stay disciplined."),
    Relation.CONTROLLED_BY: (5, "Opportunity for gain, but requires effort."),
    Relation.GENERATED_BY: (5, "Good day for creative expression."),
})
CLASH_PENALTY = 20


def score_daily_fortune(result: FourPillarsResult, daily: Pillar) -> dict:
    dm = stem_info(result.pillars.day.stem)
    day_stem = stem_info(daily.stem)
    if dm is None or day_stem is None:
        return {"score": 50, "advice": "Stay balanced.", "element": day_stem.element.value if day_stem else None}

    score = DAILY_BASE_SCORE
    advice = []
    delta, text = _DAILY_RELATION_RULES[element_relation(day_stem.element, dm.element)]
    score += delta
    advice.append(text)

    if BRANCH_CLASHES.get(result.pillars.day.branch) == daily.branch:
        score -= CLASH_PENALTY
        advice.append("Watch out for conflicts in personal life.")

    return {
        "score": max(0, min(100, score)),
        "advice": " ".join(advice),
        "element": day_stem.element.value,
    }


# -------------------------
# 캐시 키
# -------------------------
def chart_cache_key(year: int, month: int, day: int, hour: int, gender: str) -> str:
    return f"{year}-{month}-{day}-{hour}-{gender.strip().lower()}"


# -------------------------
# 요약 문장 생성기
# -------------------------
def _safe_get(d, *path, default=None):
    cur = d
    try:
        for key in path:
            cur = cur[key]
        return cur
    except (KeyError, IndexError, TypeError):
        return default


def _sort_desc_counts(counts: dict):
    return sorted(counts.items(), key=lambda x: (-x[1], x[0]))


def summarize_pillars(payload: dict) -> str:
    p = payload.get("pillars", {})
    parts = []
    for key in ("year", "month", "day", "hour"):
        pil = p.get(key, {})
        parts.append(f"{key} {pil.get('stem', '?')}{pil.get('branch', '?')}")
    dm = payload.get("day_master", {})
    return f"Four pillars: {', '.join(parts)}. Day master {dm.get('char', '?')} ({dm.get('element', '?')}, {dm.get('polarity', '?')})."


def summarize_elements(payload: dict) -> str:
    counts = _safe_get(payload, "five_elements", "counts", default={})
    if not counts or not sum(counts.values()):
        return "Element balance could not be computed."
    percent = _safe_get(payload, "five_elements", "percent", default={})
    parts = [f"{k} {v} ({percent.get(k, 0)}%)" for k, v in _sort_desc_counts(counts)]
    strongest = max(counts, key=counts.get)
    weakest = min(counts, key=counts.get)
    return f"Elements: {' / '.join(parts)}. Strongest is {strongest}, weakest is {weakest}."


TEN_GOD_BRIEF = {
    "Friend": "self-reliance, peers",
    "RobWealth": "competition, loyalty",
    "EatingGod": "output, expression, health",
    "HurtingOfficer": "creativity, rebellion",
    "IndirectWealth": "flexible income, activity",
    "DirectWealth": "steady income, pragmatism",
    "SevenKillings": "pressure, challenge",
    "DirectOfficer": "rules, responsibility, career",
    "IndirectResource": "intuition, ideas",
    "DirectResource": "learning, protection",
}


def summarize_ten_gods(payload: dict) -> str:
    rows = payload.get("ten_gods") or []
    counts = {r["key"]: r["strength"] for r in rows}
    top = [k for k, v in _sort_desc_counts(counts) if v > 0][:3]
    if not top:
        return "Ten God distribution could not be computed."
    bullet = " / ".join(f"{TEN_GOD_LABELS[TenGod(k)][0]}({counts[k]})" for k in top)
    gloss = " · ".join(TEN_GOD_BRIEF.get(k, k) for k in top)
    return f"Leading Ten Gods: {bullet}. Keywords: {gloss}."


def summarize_luck(payload: dict) -> str:
    cycles = (payload.get("luck_cycles") or [])[:4]
    if not cycles:
        return "Luck cycles: no data."
    lst = ", ".join(f"age {c['range']} {c['stem']}{c['branch']}" for c in cycles)
    return f"Luck cycles: {lst} …"


def generate_text_report(payload: dict) -> str:
    parts = [
        summarize_pillars(payload),
        summarize_elements(payload),
        summarize_ten_gods(payload),
        summarize_luck(payload),
        "This summary follows the general rules of traditional Four Pillars reading; use it as a reference, not as the sole basis for important decisions.",
    ]
    return "\n".join(parts)

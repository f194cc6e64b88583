# chart_tables.py
# 천간/지지 + 오행 + 지장간 + 자미두수 고정 표 (read-only, import 시 1회 구성)

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class Element(Enum):
    WOOD = "Wood"
    FIRE = "Fire"
    EARTH = "Earth"
    METAL = "Metal"
    WATER = "Water"


# 상생 순환 순서 (목→화→토→금→수)
ELEMENT_CYCLE = (Element.WOOD, Element.FIRE, Element.EARTH, Element.METAL, Element.WATER)


class Polarity(Enum):
    YANG = "+"
    YIN = "-"


@dataclass(frozen=True)
class Symbol:
    char: str
    name: str
    element: Element
    polarity: Polarity
    index: int


# -------------------------
# 천간(10) / 지지(12)
# -------------------------
HEAVENLY_STEMS = (
    Symbol("甲", "Jia",  Element.WOOD,  Polarity.YANG, 0),
    Symbol("乙", "Yi",   Element.WOOD,  Polarity.YIN,  1),
    Symbol("丙", "Bing", Element.FIRE,  Polarity.YANG, 2),
    Symbol("丁", "Ding", Element.FIRE,  Polarity.YIN,  3),
    Symbol("戊", "Wu",   Element.EARTH, Polarity.YANG, 4),
    Symbol("己", "Ji",   Element.EARTH, Polarity.YIN,  5),
    Symbol("庚", "Geng", Element.METAL, Polarity.YANG, 6),
    Symbol("辛", "Xin",  Element.METAL, Polarity.YIN,  7),
    Symbol("壬", "Ren",  Element.WATER, Polarity.YANG, 8),
    Symbol("癸", "Gui",  Element.WATER, Polarity.YIN,  9),
)

EARTHLY_BRANCHES = (
    Symbol("子", "Zi",   Element.WATER, Polarity.YANG, 0),
    Symbol("丑", "Chou", Element.EARTH, Polarity.YIN,  1),
    Symbol("寅", "Yin",  Element.WOOD,  Polarity.YANG, 2),
    Symbol("卯", "Mao",  Element.WOOD,  Polarity.YIN,  3),
    Symbol("辰", "Chen", Element.EARTH, Polarity.YANG, 4),
    Symbol("巳", "Si",   Element.FIRE,  Polarity.YIN,  5),
    Symbol("午", "Wu",   Element.FIRE,  Polarity.YANG, 6),
    Symbol("未", "Wei",  Element.EARTH, Polarity.YIN,  7),
    Symbol("申", "Shen", Element.METAL, Polarity.YANG, 8),
    Symbol("酉", "You",  Element.METAL, Polarity.YIN,  9),
    Symbol("戌", "Xu",   Element.EARTH, Polarity.YANG, 10),
    Symbol("亥", "Hai",  Element.WATER, Polarity.YIN,  11),
)

STEMS_BY_CHAR = MappingProxyType({s.char: s for s in HEAVENLY_STEMS})
BRANCHES_BY_CHAR = MappingProxyType({b.char: b for b in EARTHLY_BRANCHES})

# 지지 본기(本氣): 천간이 없는 자리에서 십성 판정에 쓰는 대표 지장간
HIDDEN_STEM_BY_BRANCH = MappingProxyType({
    "子": "癸", "丑": "己", "寅": "甲", "卯": "乙",
    "辰": "戊", "巳": "丙", "午": "丁", "未": "己",
    "申": "庚", "酉": "辛", "戌": "戊", "亥": "壬",
})


def stem_info(char: str | None) -> Symbol | None:
    if not char:
        return None
    return STEMS_BY_CHAR.get(char)


def branch_info(char: str | None) -> Symbol | None:
    if not char:
        return None
    return BRANCHES_BY_CHAR.get(char)


def element_of(char: str | None) -> Element | None:
    """천간이든 지지든 글자 하나의 오행. 모르는 글자는 None."""
    info = stem_info(char) or branch_info(char)
    return info.element if info else None


def sexagenary_pair(idx60: int) -> tuple[str, str]:
    return HEAVENLY_STEMS[idx60 % 10].char, EARTHLY_BRANCHES[idx60 % 12].char


# 충(沖): 子午 丑未 寅申 卯酉 辰戌 巳亥
BRANCH_CLASHES = MappingProxyType({
    "子": "午", "午": "子",
    "丑": "未", "未": "丑",
    "寅": "申", "申": "寅",
    "卯": "酉", "酉": "卯",
    "辰": "戌", "戌": "辰",
    "巳": "亥", "亥": "巳",
})


# -------------------------
# 자미두수 고정 표
# -------------------------
@dataclass(frozen=True)
class NamedEntry:
    key: str
    name: str
    cn: str


class Sihua(Enum):
    LU = "lu"
    QUAN = "quan"
    KE = "ke"
    JI = "ji"


ZIWEI_BRANCH_ORDER = tuple(b.char for b in EARTHLY_BRANCHES)
# 음력 1월 = 寅
ZIWEI_MONTH_BRANCH_ORDER = ("寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥", "子", "丑")

ZIWEI_PALACES = (
    NamedEntry("ming", "Ming", "命宫"),
    NamedEntry("brothers", "Brothers", "兄弟"),
    NamedEntry("spouse", "Spouse", "夫妻"),
    NamedEntry("children", "Children", "子女"),
    NamedEntry("wealth", "Wealth", "财帛"),
    NamedEntry("health", "Health", "疾厄"),
    NamedEntry("travel", "Travel", "迁移"),
    NamedEntry("friends", "Friends", "仆役"),
    NamedEntry("career", "Career", "官禄"),
    NamedEntry("property", "Property", "田宅"),
    NamedEntry("mental", "Mental", "福德"),
    NamedEntry("parents", "Parents", "父母"),
)

MAJOR_STARS = MappingProxyType({e.key: e for e in (
    NamedEntry("ziwei", "Zi Wei", "紫微"),
    NamedEntry("tianji", "Tian Ji", "天机"),
    NamedEntry("taiyang", "Tai Yang", "太阳"),
    NamedEntry("wuqu", "Wu Qu", "武曲"),
    NamedEntry("tiantong", "Tian Tong", "天同"),
    NamedEntry("lianzhen", "Lian Zhen", "廉贞"),
    NamedEntry("tianfu", "Tian Fu", "天府"),
    NamedEntry("taiyin", "Tai Yin", "太阴"),
    NamedEntry("tanlang", "Tan Lang", "贪狼"),
    NamedEntry("jumen", "Ju Men", "巨门"),
    NamedEntry("tianxiang", "Tian Xiang", "天相"),
    NamedEntry("tianliang", "Tian Liang", "天梁"),
    NamedEntry("qisha", "Qi Sha", "七杀"),
    NamedEntry("pojun", "Po Jun", "破军"),
)})

MINOR_STARS = MappingProxyType({e.key: e for e in (
    NamedEntry("wenchang", "Wen Chang", "文昌"),
    NamedEntry("wenqu", "Wen Qu", "文曲"),
    NamedEntry("zuofu", "Zuo Fu", "左辅"),
    NamedEntry("youbi", "You Bi", "右弼"),
    NamedEntry("huoxing", "Huo Xing", "火星"),
    NamedEntry("lingxing", "Ling Xing", "铃星"),
    NamedEntry("tiankui", "Tian Kui", "天魁"),
    NamedEntry("tianyue", "Tian Yue", "天钺"),
)})

# (별 key, 기준 인덱스로부터의 offset): 순서/값 변경 금지
ZIWEI_GROUP_OFFSETS = (
    ("ziwei", 0), ("tianji", 1), ("taiyang", 3),
    ("wuqu", 4), ("tiantong", 5), ("lianzhen", 6),
)
TIANFU_GROUP_OFFSETS = (
    ("tianfu", 0), ("taiyin", 1), ("tanlang", 2), ("jumen", 3),
    ("tianxiang", 4), ("tianliang", 5), ("qisha", 6), ("pojun", 7),
)
MINOR_STAR_OFFSETS = (
    ("wenchang", 0), ("wenqu", 4), ("zuofu", 6), ("youbi", 10),
    ("huoxing", 2), ("lingxing", 8), ("tiankui", 1), ("tianyue", 7),
)


def _sihua_row(lu: str, quan: str, ke: str, ji: str):
    return MappingProxyType({Sihua.LU: lu, Sihua.QUAN: quan, Sihua.KE: ke, Sihua.JI: ji})


# 연간 → 사화(四化) 대상 별
SIHUA_BY_STEM = MappingProxyType({
    "甲": _sihua_row("lianzhen", "pojun", "wuqu", "taiyang"),
    "乙": _sihua_row("tianji", "tianliang", "ziwei", "taiyin"),
    "丙": _sihua_row("tiantong", "tianji", "wenchang", "lianzhen"),
    "丁": _sihua_row("taiyin", "tiantong", "tianji", "jumen"),
    "戊": _sihua_row("tanlang", "taiyin", "youbi", "tianji"),
    "己": _sihua_row("wuqu", "tanlang", "tianliang", "wenqu"),
    "庚": _sihua_row("taiyang", "wuqu", "taiyin", "tiantong"),
    "辛": _sihua_row("jumen", "taiyang", "wenqu", "wenchang"),
    "壬": _sihua_row("tianliang", "ziwei", "tianji", "pojun"),
    "癸": _sihua_row("pojun", "jumen", "taiyin", "tanlang"),
})

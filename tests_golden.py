# tests_golden.py
# 간단 골든테스트: 신뢰하는 몇 가지 입력에 대해 만세력(lunar-python) → 엔진 경로로
# 연/월/일/시주와 명궁/신궁 결과가 기대값과 정확히 일치하는지 검사합니다.

import sys

from bazi_engine import compute_four_pillars, generate_text_report
from lunar_provider import LunarPythonCalendar, build_birth_profile, build_lunar_profile
from ziwei_engine import compute_ziwei_chart

if sys.platform == "win32":
    # Windows 콘솔에서 한자 출력
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

CALENDAR = LunarPythonCalendar()


def fourpillars_tuple(payload: dict) -> tuple[str, str, str, str]:
    p = payload["pillars"]
    return tuple(p[k]["stem"] + p[k]["branch"] for k in ("year", "month", "day", "hour"))


def check_case(name: str, year: int, month: int, day: int, hour: int, gender: str,
               expected: tuple[str, str, str, str] | None = None, show_report: bool = False) -> bool:
    try:
        profile, da_yun = build_birth_profile(CALENDAR, year, month, day, hour, gender)
        payload = compute_four_pillars(profile, da_yun).to_dict()
        chart = compute_ziwei_chart(build_lunar_profile(CALENDAR, year, month, day, hour))
        got = fourpillars_tuple(payload)
        ming = chart.palaces[chart.ming_index]
        extra = f"ming={ming.branch.char}({chart.ming_index}) shen={chart.shen_index}"
        if show_report:
            print(generate_text_report(payload))
        if expected is None:
            print(f"[{name}] => {got} {extra}  (expected not set)")
            return True
        ok = (got == expected)
        status = "PASS" if ok else "FAIL"
        print(f"[{name}] {status}  got={got}, expected={expected}  {extra}")
        return ok
    except Exception as e:
        print(f"[{name}] ERROR  {e}")
        return False


def main():
    print("=== chart engine golden test ===\n")
    all_ok = True

    all_ok &= check_case(
        "1987-01-07 09h M", 1987, 1, 7, 9, "male",
        expected=("丙寅", "辛丑", "丙辰", "癸巳"),
    )
    all_ok &= check_case(
        "1984-03-08 09h M", 1984, 3, 8, 9, "male",
        expected=("甲子", "丁卯", "辛丑", "癸巳"),
    )
    all_ok &= check_case(
        "2008-09-08 16h F", 2008, 9, 8, 16, "female",
        expected=("戊子", "辛酉", "辛亥", "丙申"),
    )

    # 결과/요약 출력만 확인 (정답 고정 안 함)
    all_ok &= check_case("Label-Only-Check", 1990, 5, 15, 10, "male", expected=None, show_report=True)

    print("\n=== SUMMARY ===")
    if all_ok:
        print("ALL PASS")
    else:
        print("SOME FAIL - compare the failing case against the calendar library output.")
    return all_ok


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)

# records.py
# 공부 기록 정규화 엔진
# - 시트(Apps Script)가 돌려주는 레코드는 키 이름/대소문자/한영 표기가 제각각
# - 여기서는 "필드 찾기/날짜 해석/정렬/월별 집계/표시 매핑" 로직만 제공
# - Streamlit UI는 main.py에서 처리

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

EPOCH = datetime(1970, 1, 1)
MOOD_MISSING = "미입력"

TYPE_KEYS = ("type", "Type", "과목")
CONTENT_KEYS = ("content", "Content", "공부내용", "공부 내용")
REACTION_KEYS = ("reaction", "Reaction", "난이도")
MOOD_KEYS = ("mood", "Mood", "집중도")
DATE_KEYS = ("date", "Date", "날짜")
TIMESTAMP_KEYS = ("Timestamp", "timestamp")
SORT_DATE_KEYS = ("date", "Date")

# 과목 맵 (폼 select 값 -> 표시 텍스트)
SUBJECT_LABELS = {
    "math": "3D그래픽스",
    "english": "웹앱디자인",
    "science": "책디자인",
    "etc": "기타",
}
SUBJECT_ICONS = {
    "math": "📘",
    "english": "📗",
    "science": "📕",
    "etc": "📝",
}

# 집중도(기분) 이모지
MOOD_EMOJIS = {
    "높음": "😄",
    "보통": "😐",
    "낮음": "😔",
    "전혀 안 됨": "😡",
}

_LOCALE_FORMATS = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y.%m.%d",
)


# ---------------------------------------------------------
# 1. 필드 찾기 (키 불일치/대소문자 대응)
# ---------------------------------------------------------
def _present(v: Any) -> bool:
    return v is not None and not (isinstance(v, str) and v == "")


def get_field(record: Mapping[str, Any], *candidates: str) -> Any:
    """후보 키 순서대로 값 조회.
    1차: 정확히 일치하는 키
    2차: 대소문자 무시 매칭 (후보 순서 우선)
    값이 None/빈 문자열이면 없는 것으로 본다. 못 찾으면 None.
    """
    for key in candidates:
        if key in record and _present(record[key]):
            return record[key]

    lower_map: Dict[str, List[str]] = {}
    for k in record.keys():
        lower_map.setdefault(str(k).lower(), []).append(k)
    for key in candidates:
        for found in lower_map.get(key.lower(), []):
            if _present(record[found]):
                return record[found]
    return None


# ---------------------------------------------------------
# 2. 날짜 해석 (Timestamp / Date / 로케일 문자열 모두 처리)
# ---------------------------------------------------------
def _to_local_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def _parse_direct(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        try:
            return _to_local_naive(value)
        except (ValueError, OverflowError, OSError):
            return None
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # 숫자는 epoch 밀리초
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            return None

    s = str(value).strip()
    if not s:
        return None
    iso = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s
    try:
        return _to_local_naive(datetime.fromisoformat(iso))
    except (ValueError, OverflowError, OSError):
        pass
    for fmt in _LOCALE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def parse_date(value: Any) -> Optional[datetime]:
    """raw 값을 로컬 시각(naive datetime)으로 해석. 실패 시 None (예외 없음)"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    d = _parse_direct(value)
    if d is not None:
        return d

    # YYYY-MM-DD 같은 포맷 재시도: 숫자 덩어리 앞 3개 = 연/월/일
    runs = re.findall(r"\d+", str(value))[:3]
    if len(runs) < 3 or any(len(p) > 9 for p in runs):
        return None
    try:
        return datetime(int(runs[0]), int(runs[1]), int(runs[2]))
    except (ValueError, OverflowError):
        return None


def get_date_for_sort(record: Mapping[str, Any]) -> datetime:
    """정렬 기준 시각. Timestamp 값이 있으면 그 값만, 없으면 date/Date 값을 해석.
    고른 값이 해석되지 않으면 EPOCH (다른 필드로 넘어가지 않음)
    """
    raw = get_field(record, *TIMESTAMP_KEYS)
    if raw is None:
        raw = get_field(record, *SORT_DATE_KEYS)
    d = parse_date(raw)
    return d if d is not None else EPOCH


# ---------------------------------------------------------
# 3. 정규화 레코드
# ---------------------------------------------------------
@dataclass(frozen=True)
class NormalizedRecord:
    subject_code: Optional[str]
    content: Optional[str]
    reaction: Optional[str]
    mood: Optional[str]
    date_value: Any
    sort_date: datetime


def _as_text(v: Any) -> Optional[str]:
    return None if v is None else str(v)


def normalize_record(record: Mapping[str, Any]) -> NormalizedRecord:
    date_value = get_field(record, *DATE_KEYS)
    if date_value is None:
        date_value = get_field(record, *TIMESTAMP_KEYS)
    return NormalizedRecord(
        subject_code=_as_text(get_field(record, *TYPE_KEYS)),
        content=_as_text(get_field(record, *CONTENT_KEYS)),
        reaction=_as_text(get_field(record, *REACTION_KEYS)),
        mood=_as_text(get_field(record, *MOOD_KEYS)),
        date_value=date_value,
        sort_date=get_date_for_sort(record),
    )


def sort_records(records: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """최신순 정렬 (안정 정렬: 같은 시각이면 원래 순서 유지)"""
    return sorted(records, key=get_date_for_sort, reverse=True)


def monthly_mood_counts(records: Iterable[Mapping[str, Any]], now: Optional[datetime] = None) -> Dict[str, int]:
    """이번 달 집중도 분포. 처음 나온 라벨 순서를 유지한다."""
    now = now or datetime.now()
    counts: Dict[str, int] = {}
    for r in records:
        d = get_date_for_sort(r)
        if d.year != now.year or d.month != now.month:
            continue
        mood = _as_text(get_field(r, *MOOD_KEYS)) or MOOD_MISSING
        counts[mood] = counts.get(mood, 0) + 1
    return counts


# ---------------------------------------------------------
# 4. 표시 매핑
# ---------------------------------------------------------
def subject_display(code: Optional[str], *, with_icon: bool = True, missing: str = "-") -> str:
    """과목 코드 -> 표시 텍스트 (앱: 아이콘 포함 / 엑셀: 텍스트만)"""
    if code is None:
        return missing
    key = str(code).lower()
    label = SUBJECT_LABELS.get(key)
    if label is None:
        return str(code)
    return f"{SUBJECT_ICONS[key]} {label}" if with_icon else label


def mood_display(mood: Optional[str]) -> str:
    if not mood:
        return ""
    icon = MOOD_EMOJIS.get(mood)
    return f"{icon} {mood}" if icon else mood


def fmt_ko_date(d: datetime) -> str:
    """ko-KR 짧은 날짜 표기: 2024. 3. 5."""
    return f"{d.year}. {d.month}. {d.day}."


def date_display(value: Any, missing: str = "-") -> str:
    d = parse_date(value)
    if d is not None:
        return fmt_ko_date(d)
    return str(value) if _present(value) else missing

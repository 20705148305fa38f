# session.py
# 화면 상태 컨테이너 + 두 가지 흐름(기록 불러오기 / 기록 저장)
# - main.py가 StudyLogState 1개를 st.session_state에 보관하고 렌더 함수에 넘긴다
# - 네트워크/파싱 실패는 여기서 흡수하고 사용자 메시지로 바꾼다

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import charts
import records as rec
import remote
from errors import StudyLogError
from utils import get_logger

logger = get_logger(__name__)

LOAD_ERROR_MSG = "데이터를 불러오는 데 실패했습니다. GAS 웹 앱 URL과 접근 권한을 확인하세요."
SUBMIT_ERROR_MSG = "기록 저장에 실패했습니다. 인터넷 연결과 GAS 설정을 확인하세요."
SUBMIT_OK_MSG = "성공적으로 기록되었습니다!"


@dataclass
class StudyLogState:
    records: List[Dict[str, Any]] = field(default_factory=list)
    load_attempted: bool = False
    load_error: Optional[str] = None
    # 현재 차트 (0개 또는 1개). 불러오기마다 통째로 교체
    chart_spec: Optional[dict] = None
    mood_counts: Dict[str, int] = field(default_factory=dict)
    submitting: bool = False
    # 제출 버튼 클릭 후 다음 실행에서 보낼 본문
    pending_payload: Optional[Dict[str, Any]] = None
    # 폼 위젯 key 접미사. 저장 성공 시 증가 -> 폼 초기화
    form_nonce: int = 0
    # rerun 뒤에 1회 보여줄 메시지 (level, text)
    flash: Optional[Tuple[str, str]] = None


def load_records(state: StudyLogState, url: str, *, timeout: Optional[float] = None,
                 now: Optional[datetime] = None) -> bool:
    """서버에서 기록 로드 -> 최신순 정렬 -> 캐시 교체 -> 차트 재구성.
    실패 시 캐시는 그대로 두고 load_error만 채운다. 예외를 밖으로 던지지 않는다.
    """
    state.load_attempted = True
    try:
        data = remote.fetch_records(url, timeout=timeout)
        ordered = rec.sort_records(list(data))
        counts = rec.monthly_mood_counts(ordered, now=now)
        spec = charts.build_mood_chart_spec(counts)
    except (StudyLogError, TypeError, AttributeError):
        logger.exception("Error loading records")
        state.load_error = LOAD_ERROR_MSG
        return False

    # 성공했을 때만 통째로 교체
    state.records = ordered
    state.load_error = None
    state.mood_counts = counts
    state.chart_spec = spec
    logger.info("기록 %d건 로드", len(state.records))
    return True


def build_payload(*, subject: str, study_date: date | str, content: str, mood: str, reaction: str) -> Dict[str, str]:
    """폼 값 -> POST 본문 {type, date, content, mood, reaction}"""
    if isinstance(study_date, (date, datetime)):
        date_str = study_date.strftime("%Y-%m-%d")
    else:
        date_str = str(study_date or "")
    return {
        "type": subject,
        "date": date_str,
        "content": content or "",
        "mood": mood,
        "reaction": reaction or "",
    }


def submit_record(state: StudyLogState, url: str, payload: Dict[str, Any], *,
                  timeout: Optional[float] = None) -> bool:
    """기록 1건 저장. 요청 동안 submitting=True (버튼 비활성화)"""
    state.submitting = True
    try:
        remote.submit_record(url, payload, timeout=timeout)
    except StudyLogError:
        logger.exception("Error submitting record")
        return False
    finally:
        state.submitting = False

    state.form_nonce += 1
    return True

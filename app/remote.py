"""
Google Apps Script 웹 앱 클라이언트

- GET  : 전체 기록 (JSON 배열이어야 함)
- POST : 기록 1건 전송. 응답은 읽지 않는다(전송 완료 = 성공으로 간주).
  같은 내용을 사용자가 다시 보내면 시트에 중복 행이 생길 수 있다.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import requests

from errors import ConfigurationError, RemoteError
from utils import PLACEHOLDER_URL, get_logger

logger = get_logger(__name__)


def _check_url(url: Optional[str]) -> str:
    u = (url or "").strip()
    if not u or u == PLACEHOLDER_URL:
        raise ConfigurationError("Google Apps Script 웹 앱 URL이 설정되지 않았습니다.")
    return u


def fetch_records(url: str, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
    """시트의 전체 기록 조회"""
    u = _check_url(url)
    try:
        r = requests.get(u, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise RemoteError(f"요청 실패: {e}") from e

    if not r.ok:
        raise RemoteError(f"HTTP error! status: {r.status_code}")

    try:
        data = r.json()
    except ValueError as e:
        raise RemoteError("JSON 응답을 해석할 수 없습니다.") from e

    if not isinstance(data, list):
        logger.error("Apps Script 응답이 배열이 아님: %s", type(data).__name__)
        raise ConfigurationError("Google Apps Script 설정을 확인하세요.")
    bad = [type(x).__name__ for x in data if not isinstance(x, dict)]
    if bad:
        logger.error("Apps Script 응답 배열에 객체가 아닌 항목: %s", ", ".join(sorted(set(bad))))
        raise ConfigurationError("Google Apps Script 설정을 확인하세요.")
    return data


def submit_record(url: str, payload: Dict[str, Any], timeout: Optional[float] = None) -> None:
    """기록 1건 전송 (fire-and-forget).
    Apps Script는 postData.contents 로 본문을 읽으므로 JSON 문자열을 text/plain 으로 보낸다.
    HTTP 상태는 확인하지 않는다.
    """
    u = _check_url(url)
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    try:
        requests.post(
            u,
            data=body,
            headers={"Content-Type": "text/plain;charset=utf-8"},
            timeout=timeout,
            allow_redirects=True,
        )
    except requests.RequestException as e:
        raise RemoteError(f"전송 실패: {e}") from e

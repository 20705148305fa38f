"""
공부 기록 앱 공통 유틸
- 로컬 JSON 설정 파일 (웹 앱 URL, 타임아웃, 로그 레벨)
- 로거 팩토리
- CSS / 헤더 UI 헬퍼
- Streamlit 호환 레이어 (use_container_width -> width)
"""

from __future__ import annotations

import json
import logging
import os
from typing import Callable, Optional

import streamlit as st

# ---------------------------------------------------------
# 0. App Config (로컬 JSON 설정 파일)
# ---------------------------------------------------------
APP_DATA_DIR = os.path.join(os.path.expanduser("~"), "StudyLog_Data")
APP_CONFIG_PATH = os.path.join(APP_DATA_DIR, "study_log_config.json")

# !!! 중요: 배포된 자신의 Google Apps Script 웹 앱 URL로 변경하세요.
PLACEHOLDER_URL = "YOUR_GOOGLE_APPS_SCRIPT_URL_HERE"
URL_ENV_VAR = "STUDY_LOG_WEB_APP_URL"

DEFAULT_CONFIG = {
    "web_app_url": PLACEHOLDER_URL,
    # None 이면 타임아웃 없음
    "request_timeout": None,
    "log_level": "INFO",
}


def load_app_config(path: Optional[str] = None) -> dict:
    """로컬 설정 로드 (없으면 기본값 생성). 환경변수 URL이 있으면 우선."""
    path = path or APP_CONFIG_PATH
    cfg = dict(DEFAULT_CONFIG)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f) or {}
            if not isinstance(data, dict):
                data = {}
            cfg.update({k: v for k, v in data.items() if k in DEFAULT_CONFIG})
        else:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(cfg, f, ensure_ascii=False, indent=2)
    except (OSError, ValueError):
        # 설정 파일이 깨져도 앱은 살아야 함
        get_logger(__name__).warning("설정 파일을 읽지 못해 기본값 사용: %s", path)
        cfg = dict(DEFAULT_CONFIG)

    env_url = os.getenv(URL_ENV_VAR, "").strip()
    if env_url:
        cfg["web_app_url"] = env_url
    return cfg


def save_app_config(cfg: dict, path: Optional[str] = None) -> bool:
    """로컬 설정 저장"""
    path = path or APP_CONFIG_PATH
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump({k: cfg.get(k, v) for k, v in DEFAULT_CONFIG.items()}, f, ensure_ascii=False, indent=2)
        return True
    except OSError:
        get_logger(__name__).exception("설정 저장 실패: %s", path)
        return False


# ---------------------------------------------------------
# 1. Logging
# ---------------------------------------------------------
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """루트 'study_log' 로거에 핸들러 1회 부착"""
    root = logging.getLogger("study_log")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"study_log.{name}")


# ---------------------------------------------------------
# 2. UI Helpers
# ---------------------------------------------------------
def apply_custom_css():
    st.markdown("""
        <style>
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}
        .block-container {padding-top: 1.5rem !important; padding-bottom: 2rem !important;}
        .record-row {
            display: grid; grid-template-columns: 1.3fr 2.5fr 1.5fr 1fr 1fr; gap: 8px;
            padding: 8px 10px; margin-bottom: 4px; border-radius: 10px;
            background: rgba(255,255,255,0.85); border: 1px solid rgba(17,24,39,0.06);
            font-size: 13px; align-items: center;
        }
        .record-row:hover {box-shadow: 0 6px 12px rgba(0,0,0,0.05);}
        .record-content, .record-reaction {white-space: nowrap; overflow: hidden; text-overflow: ellipsis;}
        .record-type {font-weight: 700;}
        .record-date {color: #666;}
        div.stButton > button {border-radius: 6px;}
        </style>
    """, unsafe_allow_html=True)


def ui_header(text):
    """회색톤 섹션 헤더 (color #666, 18px, bold)"""
    st.markdown(f"<div style='color:#666; font-size:18px; font-weight:700; margin-bottom:8px; margin-top:5px;'>{text}</div>", unsafe_allow_html=True)


# ---------------------------------------------------------
# 3. Streamlit 호환 레이어 (use_container_width -> width)
# ---------------------------------------------------------
def _map_use_container_width(kwargs: dict) -> None:
    """
    Streamlit deprecate 대응:
      use_container_width=True  -> width="stretch"
      use_container_width=False -> width="content"
    """
    if "use_container_width" in kwargs:
        ucw = kwargs.pop("use_container_width")
        # width가 이미 주어진 경우는 존중
        if "width" not in kwargs:
            kwargs["width"] = "stretch" if bool(ucw) else "content"


def _wrap_streamlit_fn(fn: Callable) -> Callable:
    """width 미지원 버전(구버전) 대비: TypeError 시 use_container_width로 재호출"""
    def _wrapped(*args, **kwargs):
        original = dict(kwargs)
        _map_use_container_width(kwargs)
        try:
            return fn(*args, **kwargs)
        except TypeError:
            if "width" in kwargs and "width" not in original:
                return fn(*args, **original)
            raise

    return _wrapped


def apply_streamlit_compat() -> None:
    """앱 전체에서 1회 실행 (중복 래핑 방지)"""
    if getattr(st, "_study_log_compat_applied", False):
        return
    st._study_log_compat_applied = True

    st.button = _wrap_streamlit_fn(st.button)
    st.download_button = _wrap_streamlit_fn(st.download_button)
    st.form_submit_button = _wrap_streamlit_fn(st.form_submit_button)

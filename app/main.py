import streamlit as st
import time
import html
from datetime import date

# [모듈 임포트] 프로젝트 내 파일들
import utils     # 설정, CSS, 로거, 호환 레이어
import records   # 필드/날짜 정규화, 정렬, 집계
import session   # 상태 컨테이너 + 불러오기/저장 흐름
import exporter  # 엑셀 내보내기
from errors import EmptyExportError

# ---------------------------------------------------------
# 1. 앱 기본 설정
# ---------------------------------------------------------
st.set_page_config(
    page_title="공부 기록",
    page_icon="📚",
    layout="wide",
    initial_sidebar_state="collapsed"
)

STATE_KEY = "study_log_state"
MOOD_OPTIONS = list(records.MOOD_EMOJIS.keys())
SUBJECT_OPTIONS = list(records.SUBJECT_LABELS.keys())


def _get_state() -> session.StudyLogState:
    """세션당 상태 컨테이너 1개"""
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = session.StudyLogState()
    return st.session_state[STATE_KEY]


def _timeout(cfg):
    t = cfg.get("request_timeout")
    return float(t) if t else None


# ---------------------------------------------------------
# 2. 렌더 함수들 (상태는 인자로 받음)
# ---------------------------------------------------------
def _row_html(r) -> str:
    n = records.normalize_record(r)
    content = html.escape(n.content or "")
    reaction = html.escape(n.reaction or "")
    return (
        "<div class='record-row'>"
        f"<div class='record-type'>{html.escape(records.subject_display(n.subject_code))}</div>"
        f"<div class='record-content' title='{content}'>{content or '-'}</div>"
        f"<div class='record-reaction' title='{reaction}'>{reaction or '-'}</div>"
        f"<div class='record-date'>{html.escape(records.date_display(n.date_value))}</div>"
        f"<div class='record-mood'>{html.escape(records.mood_display(n.mood))}</div>"
        "</div>"
    )


def render_records(state: session.StudyLogState):
    utils.ui_header("📖 공부 기록")
    if state.load_error:
        st.error(state.load_error)
        return
    if not state.records:
        st.info("아직 기록이 없습니다. 첫 기록을 남겨보세요!")
        return

    rows_html = "".join(_row_html(r) for r in state.records)
    with st.container(height=520):
        st.markdown(rows_html, unsafe_allow_html=True)


def render_mood_chart(state: session.StudyLogState):
    utils.ui_header("📊 이번 달 집중도")
    if state.chart_spec is None or not state.mood_counts:
        st.caption("이번 달 기록이 없습니다.")
        return
    st.vega_lite_chart(state.chart_spec, width="stretch")


def render_form(state: session.StudyLogState):
    utils.ui_header("✍️ 오늘의 공부")
    k = state.form_nonce
    with st.form(f"record_form_{k}"):
        f1, f2 = st.columns(2)
        subject = f1.selectbox(
            "과목", SUBJECT_OPTIONS, key=f"type_{k}",
            format_func=lambda c: records.subject_display(c),
        )
        study_date = f2.date_input("날짜", value=date.today(), key=f"date_{k}")
        content = st.text_area("공부 내용", key=f"content_{k}", placeholder="무엇을 공부했나요?")
        f3, f4 = st.columns(2)
        mood = f3.selectbox("집중도", MOOD_OPTIONS, key=f"mood_{k}", format_func=records.mood_display)
        reaction = f4.text_input("난이도", key=f"reaction_{k}", placeholder="쉬움 / 어려움 등")

        label = "저장 중..." if state.submitting else "공부 저장하기"
        clicked = st.form_submit_button(label, type="primary", disabled=state.submitting, use_container_width=True)

    if clicked and not state.submitting:
        state.pending_payload = session.build_payload(
            subject=subject, study_date=study_date, content=content, mood=mood, reaction=reaction,
        )
        state.submitting = True
        # 버튼을 비활성화한 화면으로 다시 그린 뒤 전송
        st.rerun()


def run_pending_submit(state: session.StudyLogState, cfg):
    """비활성화된 버튼이 화면에 나간 뒤 실제 전송"""
    payload = state.pending_payload
    if payload is None:
        return
    state.pending_payload = None

    with st.spinner("저장 중..."):
        ok = session.submit_record(state, cfg["web_app_url"], payload, timeout=_timeout(cfg))

    if ok:
        state.flash = ("success", session.SUBMIT_OK_MSG)
        session.load_records(state, cfg["web_app_url"], timeout=_timeout(cfg))
    else:
        # 입력값은 유지 (form_nonce 그대로)
        state.flash = ("error", session.SUBMIT_ERROR_MSG)
    st.rerun()


def render_export(state: session.StudyLogState):
    if st.button("📥 엑셀로 내보내기", use_container_width=True):
        try:
            data = exporter.build_workbook(state.records)
        except EmptyExportError as e:
            st.warning(str(e))
            return
        st.download_button(
            f"⬇️ {exporter.EXPORT_FILE_NAME} 다운로드",
            data=data,
            file_name=exporter.EXPORT_FILE_NAME,
            mime=exporter.XLSX_MIME,
            use_container_width=True
        )


def render_sidebar(state: session.StudyLogState, cfg):
    with st.sidebar:
        st.markdown("### ⚙️ 설정")
        url = st.text_input("Apps Script 웹 앱 URL", value=cfg.get("web_app_url", ""))
        if st.button("💾 URL 저장", use_container_width=True):
            cfg["web_app_url"] = url.strip()
            if utils.save_app_config(cfg):
                st.toast("설정이 저장되었습니다.")
                session.load_records(state, cfg["web_app_url"], timeout=_timeout(cfg))
                time.sleep(0.5)
                st.rerun()
            else:
                st.error("설정 저장에 실패했습니다.")

        if st.button("🔄 새로고침", use_container_width=True):
            with st.spinner("데이터를 불러오는 중..."):
                session.load_records(state, cfg["web_app_url"], timeout=_timeout(cfg))
            st.rerun()


# ---------------------------------------------------------
# 3. 메인 함수
# ---------------------------------------------------------
def main():
    cfg = utils.load_app_config()
    utils.configure_logging(cfg.get("log_level", "INFO"))
    utils.apply_streamlit_compat()
    utils.apply_custom_css()

    state = _get_state()
    render_sidebar(state, cfg)

    st.markdown("### 📚 공부 기록장")

    # 초기 로드 (세션당 1회)
    if not state.load_attempted:
        with st.spinner("데이터를 불러오는 중..."):
            session.load_records(state, cfg["web_app_url"], timeout=_timeout(cfg))

    if state.flash:
        level, msg = state.flash
        state.flash = None
        (st.success if level == "success" else st.error)(msg)

    left, right = st.columns([2, 3], gap="large")
    with left:
        render_form(state)
        run_pending_submit(state, cfg)
        st.markdown("<div style='height:14px'></div>", unsafe_allow_html=True)
        render_mood_chart(state)
    with right:
        render_records(state)
        render_export(state)


if __name__ == "__main__":
    main()

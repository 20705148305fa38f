# exporter.py
# 엑셀 내보내기: 캐시된 기록 -> 한국어 헤더 행 -> study_records.xlsx

from __future__ import annotations

import io
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

import records as rec
from errors import EmptyExportError

EXPORT_FILE_NAME = "study_records.xlsx"
EXPORT_SHEET_NAME = "공부 기록"
EXPORT_COLUMNS = ["과목", "공부 내용", "난이도", "날짜", "집중도"]
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_export_rows(records: Iterable[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """보기 좋게 컬럼 변환 (한국어 헤더, 아이콘 없는 과목명)"""
    rows = []
    for r in records:
        n = rec.normalize_record(r)
        rows.append({
            "과목": rec.subject_display(n.subject_code, with_icon=False, missing=""),
            "공부 내용": n.content or "",
            "난이도": n.reaction or "",
            "날짜": rec.date_display(n.date_value, missing=""),
            "집중도": n.mood or "",
        })
    return rows


def build_workbook(records: Iterable[Mapping[str, Any]]) -> bytes:
    """단일 시트 xlsx 바이트 생성. 기록이 없으면 EmptyExportError"""
    rows = build_export_rows(records)
    if not rows:
        raise EmptyExportError("내보낼 데이터가 없습니다.")

    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    bio = io.BytesIO()
    with pd.ExcelWriter(bio, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=EXPORT_SHEET_NAME, index=False)
    return bio.getvalue()

"""이번 달 집중도 파이 차트 (Vega-Lite 스펙)"""

from __future__ import annotations

from typing import Dict

CHART_TITLE = "이번 달 집중도 분포"
SERIES_LABEL = "집중도"


def build_mood_chart_spec(counts: Dict[str, int]) -> dict:
    """{라벨: 건수} -> st.vega_lite_chart 용 스펙. 라벨 순서는 입력 순서 유지"""
    labels = list(counts.keys())
    values = [
        {"labels": label, "data": int(n)}
        for label, n in counts.items()
    ]
    return {
        "title": CHART_TITLE,
        "data": {"values": values},
        "mark": {"type": "arc", "tooltip": True},
        "encoding": {
            "theta": {"field": "data", "type": "quantitative", "title": "건수"},
            "color": {
                "field": "labels",
                "type": "nominal",
                "title": SERIES_LABEL,
                "sort": labels,
                "legend": {"orient": "top"},
            },
        },
        "view": {"stroke": None},
    }

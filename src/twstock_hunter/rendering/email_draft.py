"""Plain-text email draft for a report.

Pure functions: the same report always yields byte-identical text.
"""

from __future__ import annotations

from typing import List
from urllib.parse import quote

from ..schemas.report import AnalysisReport

SEPARATOR = "-" * 40
DISCLAIMER = "*本信件由 AI 生成，僅供研究參考，非投資建議。*"

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


def email_subject(report: AnalysisReport) -> str:
    return f"台股 AI 每日分析報告 - {report.date}"


def render_email_body(report: AnalysisReport) -> str:
    """
    Layout:
      - header with date
      - market sentiment
      - numbered stocks with reason and signals
      - source list and disclaimer
    """
    lines: List[str] = [
        f"【每日台股 AI 趨勢快報】 {report.date}",
        "",
        "市場情緒概況：",
        report.market_sentiment,
        "",
        SEPARATOR,
        "今日精選 10 檔潛力股：",
        "",
    ]

    for idx, stock in enumerate(report.stocks):
        lines.append(f"{idx + 1}. {stock.name} ({stock.code}) - {stock.price}")
        lines.append(f"   理由: {stock.reason}")
        lines.append(f"   訊號: Tech[{stock.technical_signal}] / Chip[{stock.chip_signal}]")
        lines.append("")

    lines.append(SEPARATOR)
    lines.append("資料來源 (Gemini Search Grounding)：")
    lines.extend(f"- {source}" for source in report.sources)
    lines.append("")
    lines.append(DISCLAIMER)
    return "\n".join(lines) + "\n"


def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def build_mailto_url(report: AnalysisReport, recipient: str = "") -> str:
    subject = encode_uri_component(email_subject(report))
    body = encode_uri_component(render_email_body(report))
    return f"mailto:{recipient}?subject={subject}&body={body}"

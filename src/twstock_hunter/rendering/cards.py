"""View helpers shared by the terminal and web renderers."""

from __future__ import annotations

from typing import List, NamedTuple, Tuple
from urllib.parse import urlsplit

from ..schemas.report import AnalysisReport, RiskLevel


class RiskBadge(NamedTuple):
    label: str
    style: str  # Rich style
    css_class: str


_BADGES = {
    RiskLevel.HIGH.value: RiskBadge("高風險", "bold red", "risk-high"),
    RiskLevel.MEDIUM.value: RiskBadge("中風險", "bold yellow", "risk-medium"),
    RiskLevel.LOW.value: RiskBadge("低風險", "bold green", "risk-low"),
}


def risk_badge(risk_level: str) -> RiskBadge:
    """Badge for a risk level; unknown or empty values get neutral styling."""
    badge = _BADGES.get((risk_level or "").strip())
    if badge:
        return badge
    return RiskBadge(risk_level.strip() if risk_level and risk_level.strip() else "未知", "dim", "risk-unknown")


LINK_SCHEMES = ("http", "https")


def source_links(report: AnalysisReport) -> List[Tuple[str, str]]:
    """Numbered citation links; only http(s) URLs become clickable."""
    urls = [url for url in report.sources if urlsplit(url).scheme.lower() in LINK_SCHEMES]
    return [(f"參考來源 {i + 1}", url) for i, url in enumerate(urls)]

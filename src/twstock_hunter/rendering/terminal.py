"""Rich console rendering of reports and session states.

Mirrors the web page: sentiment banner, citation strip, one card per stock.
"""

from __future__ import annotations

from typing import List

from rich.columns import Columns
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..schemas.report import AnalysisReport, StockRecommendation
from ..schemas.state import AnalysisState, AnalyzingState, CompleteState, ErrorState
from .cards import risk_badge, source_links

CARD_WIDTH = 48


def render_sentiment_banner(report: AnalysisReport) -> Panel:
    body = Text(report.market_sentiment)
    links = source_links(report)
    if links:
        strip = Text()
        for i, (label, url) in enumerate(links):
            if i:
                strip.append("  ")
            strip.append(label, style=f"link {url} cyan")
        body = Group(body, Text(""), strip)
    return Panel(body, title="市場情緒總結", subtitle=report.date, border_style="blue")


def render_stock_card(stock: StockRecommendation, index: int) -> Panel:
    badge = risk_badge(stock.risk_level)

    header = Text()
    header.append(stock.name, style="bold white")
    header.append(f"  {stock.code}", style="dim")
    header.append(f"  [{stock.sector}]" if stock.sector else "", style="cyan")

    price = Text()
    price.append(stock.price, style="bold red")
    price.append("  ")
    price.append(badge.label, style=badge.style)

    signals = Table.grid(padding=(0, 1))
    signals.add_column(style="dim", no_wrap=True)
    signals.add_column()
    signals.add_row("技術面訊號", Text(stock.technical_signal, style="bright_blue"))
    signals.add_row("籌碼面訊號", Text(stock.chip_signal, style="magenta"))

    return Panel(
        Group(header, price, Text(""), Text(stock.reason), Text(""), signals),
        title=f"#{index + 1}",
        title_align="right",
        width=CARD_WIDTH,
        border_style="grey50",
    )


def render_report(report: AnalysisReport) -> Group:
    cards: List[RenderableType] = [render_stock_card(s, i) for i, s in enumerate(report.stocks)]
    return Group(render_sentiment_banner(report), Columns(cards, equal=True))


def render_state(state: AnalysisState) -> RenderableType:
    if isinstance(state, AnalyzingState):
        return Text("正在掃描台股市場資訊 (Search Grounding)... 這可能需要 15-30 秒", style="cyan")
    if isinstance(state, CompleteState):
        return render_report(state.report)
    if isinstance(state, ErrorState):
        return Panel(
            Group(Text(state.message), Text(""), Text("重新執行 `twstock-hunter analyze` 以重試", style="dim")),
            title="發生錯誤",
            border_style="red",
        )
    return Text("尚未分析。執行 `twstock-hunter analyze` 開始全市場分析。", style="dim")


def print_state(state: AnalysisState, console: Console | None = None) -> None:
    (console or Console()).print(render_state(state))

"""
Replay a saved Gemini reply through the parser and renderers without calling the API.

Usage:
    python scripts/replay_response.py reply.json [--sources URL ...] [--email-draft]
"""
import argparse
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from twstock_hunter.errors import ResponseParseError
from twstock_hunter.llm.analyze import format_report_date, parse_payload
from twstock_hunter.llm.grounding import dedupe_preserving_order
from twstock_hunter.rendering.email_draft import render_email_body
from twstock_hunter.rendering.terminal import render_report
from twstock_hunter.schemas.report import AnalysisReport


def main():
    p = argparse.ArgumentParser(description="Render a saved model reply as a report")
    p.add_argument("reply", help="File holding the raw JSON text returned by the model")
    p.add_argument("--sources", nargs="*", default=[], help="Citation URLs to attach")
    p.add_argument("--email-draft", action="store_true", help="Print the email draft too")
    args = p.parse_args()

    console = Console()
    text = Path(args.reply).read_text(encoding="utf-8")
    try:
        payload = parse_payload(text)
    except ResponseParseError as e:
        console.print(f"[red]Parse failed:[/] {escape(str(e))}", highlight=False)
        sys.exit(1)

    report = AnalysisReport(
        date=format_report_date(datetime.now()),
        market_sentiment=payload.market_sentiment,
        stocks=payload.stocks,
        sources=dedupe_preserving_order(args.sources),
    )
    console.print(render_report(report))
    if args.email_draft:
        print(render_email_body(report))


if __name__ == "__main__":
    main()

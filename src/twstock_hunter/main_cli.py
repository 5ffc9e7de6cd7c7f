"""Command line entry point.

Usage:
    twstock-hunter analyze [--json] [--email-draft] [--open-mail]
    twstock-hunter serve [--host HOST] [--port PORT]
"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from .config import load_settings
from .errors import ConfigurationError
from .log import get_logger, setup_logging
from .rendering.email_draft import render_email_body
from .rendering.terminal import print_state
from .schemas.state import CompleteState
from .session import AnalysisSession
from .share import open_mail_client

logger = get_logger("cli")

EXIT_OK = 0
EXIT_ANALYSIS_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="twstock-hunter", description="Daily Taiwan stock shortlist powered by Gemini")
    sub = p.add_subparsers(dest="command", required=True)

    a = sub.add_parser("analyze", help="Run one analysis and print the report")
    a.add_argument("--json", action="store_true", help="Print the report as JSON instead of cards")
    a.add_argument("--email-draft", action="store_true", help="Also print the plain-text email draft")
    a.add_argument("--open-mail", action="store_true", help="Open the default mail client with the draft")

    s = sub.add_parser("serve", help="Start the web client")
    s.add_argument("--host", help="Bind address (default: WEB_HOST)")
    s.add_argument("--port", type=int, help="Port (default: WEB_PORT)")
    return p


def run_analyze(session: AnalysisSession, args: argparse.Namespace, console: Console) -> int:
    with console.status("正在掃描台股市場資訊 (Search Grounding)..."):
        state = session.start_once()

    if not isinstance(state, CompleteState):
        print_state(state, console)
        return EXIT_ANALYSIS_FAILED

    report = state.report
    if args.json:
        console.print_json(report.model_dump_json(by_alias=True))
    else:
        print_state(state, console)

    if args.email_draft:
        console.print(render_email_body(report), markup=False, highlight=False, soft_wrap=True)
    if args.open_mail:
        open_mail_client(report)
    return EXIT_OK


def run_serve(settings, args: argparse.Namespace) -> int:
    import uvicorn
    from .main_web import create_app

    app = create_app(settings)
    uvicorn.run(app, host=args.host or settings.WEB_HOST, port=args.port or settings.WEB_PORT)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/] {escape(str(e))}")
        return EXIT_CONFIG_ERROR

    setup_logging(settings.LOG_LEVEL)

    if args.command == "serve":
        return run_serve(settings, args)
    return run_analyze(AnalysisSession(settings), args, console)


if __name__ == "__main__":
    sys.exit(main())

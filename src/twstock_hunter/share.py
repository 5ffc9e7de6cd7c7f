"""Side-effecting share actions for a finished report."""

import webbrowser

from .log import get_logger
from .rendering.email_draft import build_mailto_url
from .schemas.report import AnalysisReport

logger = get_logger("share")

def open_mail_client(report: AnalysisReport, recipient: str = "") -> bool:
    """
    Open the default mail client with subject and body pre-filled.
    Returns False when no handler accepted the mailto: URL.
    """
    url = build_mailto_url(report, recipient)
    opened = webbrowser.open(url)
    if not opened:
        logger.warning("No mail handler available for mailto: links")
    return opened

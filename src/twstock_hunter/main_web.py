"""
Single-page web client for TWStock Trend Hunter.
Runs the daily analysis in the background and renders the current session state.

Usage:
    twstock-hunter serve
"""
import threading
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from .config import Settings, get_settings
from .log import get_logger
from .rendering.cards import risk_badge, source_links
from .rendering.email_draft import build_mailto_url, render_email_body
from .schemas.report import AnalysisReport
from .session import AnalysisSession

logger = get_logger("web")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "web" / "templates"))

NO_REPORT_DETAIL = "No report available. Run an analysis first."


def _require_report(session: AnalysisSession) -> AnalysisReport:
    report = session.report
    if report is None:
        raise HTTPException(status_code=409, detail=NO_REPORT_DETAIL)
    return report


def create_app(settings: Optional[Settings] = None, session: Optional[AnalysisSession] = None) -> FastAPI:
    settings = settings or get_settings()
    session = session or AnalysisSession(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.AUTO_ANALYZE:
            # Fire the one-shot initial analysis without blocking startup
            threading.Thread(target=session.start_once, name="initial-analysis", daemon=True).start()
        yield

    app = FastAPI(title="TWStock AI 趨勢獵手", lifespan=lifespan)
    app.state.session = session

    @app.get("/")
    async def index(request: Request):
        state = session.state
        report = session.report
        context = {
            "state": state,
            "report": report,
            "risk_badge": risk_badge,
            "sources": source_links(report) if report else [],
            "email_body": render_email_body(report) if report else "",
            "mailto_url": build_mailto_url(report) if report else "",
            "model": settings.GEMINI_MODEL,
        }
        return templates.TemplateResponse(request, "index.html", context)

    @app.post("/analyze")
    def analyze(background_tasks: BackgroundTasks):
        # Start or retry; a second click while busy is ignored
        if session.begin():
            background_tasks.add_task(session.execute)
        return RedirectResponse("/", status_code=303)

    @app.post("/clear")
    def clear():
        session.clear()
        return RedirectResponse("/", status_code=303)

    @app.get("/api/state")
    def api_state():
        return JSONResponse(session.state.model_dump(mode="json", by_alias=True))

    @app.get("/api/email-draft")
    def api_email_draft():
        return PlainTextResponse(render_email_body(_require_report(session)))

    @app.get("/email")
    def email():
        return RedirectResponse(build_mailto_url(_require_report(session)), status_code=303)

    return app

"""Daily Taiwan stock analysis.

One grounded Gemini call per invocation: fixed prompt in, AnalysisReport out.
No retries; every failure is terminal for the invocation.
"""

import json
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

import httpx
from google.genai import errors as genai_errors
from pydantic import ValidationError

from ..config import Settings
from ..errors import AnalysisError, EmptyResponseError, ProviderError, ResponseParseError
from ..log import get_logger
from ..schemas.report import AnalysisPayload, AnalysisReport
from .client import GeminiClient
from .prompts import load_prompt
from .schema import build_response_schema

logger = get_logger("analysis")


def format_report_date(now: datetime) -> str:
    """zh-TW short date, e.g. 2024/3/5 (no zero padding)."""
    return f"{now.year}/{now.month}/{now.day}"


def parse_payload(text: str) -> AnalysisPayload:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Model reply is not valid JSON: {e}") from e

    try:
        return AnalysisPayload.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(f"Model reply does not match the report shape: {e}") from e


def request_analysis(
    settings: Settings,
    client: Optional[GeminiClient] = None,
    now: Optional[datetime] = None,
) -> AnalysisReport:
    """
    Ask Gemini for ten Taiwan stock picks and a market-sentiment summary.

    Args:
        settings: Validated settings carrying the API key and model id
        client: Pre-built client (tests inject one); built from settings otherwise
        now: Timestamp for the report date; defaults to the current time in REPORT_TIMEZONE

    Returns:
        AnalysisReport with the stocks exactly as returned and de-duplicated sources

    Raises:
        EmptyResponseError, ResponseParseError, ProviderError
    """
    client = client or GeminiClient(settings)
    system_instruction = load_prompt("system_instruction")
    prompt = load_prompt("daily_picks")

    try:
        try:
            run = client.run_grounded(prompt, system_instruction, build_response_schema())
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise ProviderError(str(e)) from e

        if not run.text:
            raise EmptyResponseError("No response generated from Gemini.")

        payload = parse_payload(run.text)
    except AnalysisError:
        logger.exception("Analysis failed")
        raise

    now = now or datetime.now(ZoneInfo(settings.REPORT_TIMEZONE))
    report = AnalysisReport(
        date=format_report_date(now),
        market_sentiment=payload.market_sentiment,
        stocks=payload.stocks,
        sources=run.meta.sources,
    )
    logger.info(f"Analysis complete: {len(report.stocks)} stocks, {len(report.sources)} sources")
    return report

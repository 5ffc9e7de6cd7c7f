import json
import pytest
from datetime import datetime
from unittest.mock import patch

import httpx
from google.genai import types

from twstock_hunter.errors import EmptyResponseError, ProviderError, ResponseParseError
from twstock_hunter.llm.analyze import format_report_date, request_analysis

NOW = datetime(2024, 3, 5, 9, 30)

TSMC = {
    "code": "2330",
    "name": "台積電",
    "price": "600",
    "sector": "半導體",
    "reason": "...",
    "technicalSignal": "MACD黃金交叉",
    "chipSignal": "外資買超",
    "riskLevel": "Low",
}

def _stock(code: str, risk: str = "Medium") -> dict:
    return {**TSMC, "code": code, "riskLevel": risk}

def _payload(stocks, sentiment="盤勢偏多") -> str:
    return json.dumps({"marketSentiment": sentiment, "stocks": stocks}, ensure_ascii=False)


def test_end_to_end_single_stock_duplicate_sources(settings, gemini_client, fake_genai_response):
    """
    WHY: The canonical scenario: one stock, two grounding chunks pointing at the same page.
    HOW: Mock generate_content to return that payload and run the full analysis.
    EXPECTED: One source, one stock, risk level preserved, sentiment and date stamped.
    """
    gemini_client.client.models.generate_content.return_value = fake_genai_response(
        _payload([TSMC]),
        uris=["https://example.com/a", "https://example.com/a"],
    )

    report = request_analysis(settings, client=gemini_client, now=NOW)

    assert len(report.sources) == 1
    assert len(report.stocks) == 1
    assert report.stocks[0].risk_level == "Low"
    assert report.stocks[0].technical_signal == "MACD黃金交叉"
    assert report.market_sentiment == "盤勢偏多"
    assert report.date == "2024/3/5"


def test_sources_deduplicated_in_first_seen_order(settings, gemini_client, fake_genai_response):
    """
    WHY: Citation strip must list every distinct URL once, in the order the model cited them.
    HOW: Chunks a, b, a, (no web), c, b.
    EXPECTED: sources == [a, b, c].
    """
    gemini_client.client.models.generate_content.return_value = fake_genai_response(
        _payload([TSMC]),
        uris=["https://a.tw", "https://b.tw", "https://a.tw", None, "https://c.tw", "https://b.tw"],
    )

    report = request_analysis(settings, client=gemini_client, now=NOW)

    assert report.sources == ["https://a.tw", "https://b.tw", "https://c.tw"]


@pytest.mark.parametrize("count", [0, 3, 12])
def test_stock_count_is_not_truncated_or_padded(settings, gemini_client, fake_genai_response, count):
    """
    WHY: Ten picks are requested but not enforced.
    EXPECTED: The report holds exactly the entries provided, in order.
    """
    stocks = [_stock(str(1000 + i)) for i in range(count)]
    gemini_client.client.models.generate_content.return_value = fake_genai_response(_payload(stocks))

    report = request_analysis(settings, client=gemini_client, now=NOW)

    assert [s.code for s in report.stocks] == [s["code"] for s in stocks]
    assert report.sources == []


def test_unknown_risk_level_is_kept_verbatim(settings, gemini_client, fake_genai_response):
    """
    WHY: The client does not normalize riskLevel; renderers handle odd values.
    """
    gemini_client.client.models.generate_content.return_value = fake_genai_response(
        _payload([_stock("2317", risk="Extreme")])
    )

    report = request_analysis(settings, client=gemini_client, now=NOW)

    assert report.stocks[0].risk_level == "Extreme"


def test_missing_optional_fields_are_accepted(settings, gemini_client, fake_genai_response):
    """
    WHY: Required fields are schema hints only; a sparse item must not fail the whole report.
    HOW: Stock item with only code and name, a numeric price in another item,
         and a third item whose optional fields are JSON null.
    EXPECTED: Missing or null fields default to empty strings; numbers become text.
    """
    stocks = [
        {"code": "2454", "name": "聯發科"},
        {**TSMC, "price": 612.5},
        {**TSMC, "code": "2303", "price": None, "sector": None, "riskLevel": None},
    ]
    gemini_client.client.models.generate_content.return_value = fake_genai_response(_payload(stocks))

    report = request_analysis(settings, client=gemini_client, now=NOW)

    assert report.stocks[0].sector == ""
    assert report.stocks[0].risk_level == ""
    assert report.stocks[1].price == "612.5"
    assert report.stocks[2].code == "2303"
    assert (report.stocks[2].price, report.stocks[2].sector, report.stocks[2].risk_level) == ("", "", "")


@pytest.mark.parametrize("text", [None, ""])
def test_empty_text_raises(settings, gemini_client, fake_genai_response, text):
    """
    WHY: A reply without a text payload means no analysis was generated.
    EXPECTED: EmptyResponseError, no report.
    """
    gemini_client.client.models.generate_content.return_value = fake_genai_response(text, uris=["https://a.tw"])

    with pytest.raises(EmptyResponseError, match="No response generated"):
        request_analysis(settings, client=gemini_client, now=NOW)


@pytest.mark.parametrize("text", ["not json", '{"marketSentiment": "x", "stocks": [', "[1, 2, 3]", '{"stocks": []}'])
def test_unparseable_text_raises(settings, gemini_client, fake_genai_response, text):
    """
    WHY: Text that is not JSON of the report shape is fatal for the invocation.
    EXPECTED: ResponseParseError; no partial recovery.
    """
    gemini_client.client.models.generate_content.return_value = fake_genai_response(text)

    with pytest.raises(ResponseParseError):
        request_analysis(settings, client=gemini_client, now=NOW)


def test_transport_error_surfaces_as_provider_error(settings, gemini_client):
    """
    WHY: Network failures are surfaced with their own message and never retried.
    HOW: generate_content raises httpx.ConnectError.
    EXPECTED: ProviderError carrying the original message; exactly one call made.
    """
    mock_call = gemini_client.client.models.generate_content
    mock_call.side_effect = httpx.ConnectError("connection refused")

    with pytest.raises(ProviderError, match="connection refused") as exc_info:
        request_analysis(settings, client=gemini_client, now=NOW)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert mock_call.call_count == 1


def test_request_uses_search_tool_and_schema(settings, gemini_client, fake_genai_response):
    """
    WHY: The request must enable Google Search and constrain the reply to the report schema.
    HOW: Inspect the kwargs passed to generate_content.
    EXPECTED: Configured model, Chinese prompt, analyst persona, googleSearch tool, JSON mime type,
              riskLevel enum restricted to High/Medium/Low.
    """
    mock_call = gemini_client.client.models.generate_content
    mock_call.return_value = fake_genai_response(_payload([TSMC]))

    request_analysis(settings, client=gemini_client, now=NOW)

    kwargs = mock_call.call_args.kwargs
    assert kwargs["model"] == settings.GEMINI_MODEL
    assert "10 檔" in kwargs["contents"]

    config: types.GenerateContentConfig = kwargs["config"]
    assert "Taiwan Stock Market Analyst" in config.system_instruction
    assert "last 3 months" in config.system_instruction
    assert config.tools[0].google_search is not None
    assert config.response_mime_type == "application/json"

    schema = config.response_schema
    assert schema.required == ["marketSentiment", "stocks"]
    item = schema.properties["stocks"].items
    assert item.properties["riskLevel"].enum == ["High", "Medium", "Low"]
    assert set(item.properties) == {
        "code", "name", "price", "sector", "reason", "technicalSignal", "chipSignal", "riskLevel",
    }


def test_client_built_from_settings_when_not_injected(settings, fake_genai_response):
    """
    WHY: Callers pass only the settings object; the client is built from it at call time.
    """
    with patch("twstock_hunter.llm.analyze.GeminiClient") as mock_cls:
        mock_cls.return_value.run_grounded.return_value.text = _payload([TSMC])
        mock_cls.return_value.run_grounded.return_value.meta.sources = []

        report = request_analysis(settings, now=NOW)

    mock_cls.assert_called_once_with(settings)
    assert report.stocks[0].code == "2330"


def test_report_date_format_has_no_zero_padding():
    assert format_report_date(datetime(2025, 12, 31)) == "2025/12/31"
    assert format_report_date(datetime(2025, 1, 2)) == "2025/1/2"

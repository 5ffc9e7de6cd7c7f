"""Gemini response schema for the daily report.

Constrains the reply to {marketSentiment, stocks[]} with riskLevel limited
to the three RiskLevel values. Required lists are hints to the model; the
parser still accepts items with missing fields.
"""

from google.genai import types

from ..schemas.report import RiskLevel

STOCK_FIELDS = ["code", "name", "price", "sector", "reason", "technicalSignal", "chipSignal"]
REQUIRED_STOCK_FIELDS = ["code", "name", "reason", "technicalSignal", "chipSignal"]


def build_response_schema() -> types.Schema:
    properties = {field: types.Schema(type=types.Type.STRING) for field in STOCK_FIELDS}
    properties["riskLevel"] = types.Schema(
        type=types.Type.STRING,
        enum=[level.value for level in RiskLevel],
    )

    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "marketSentiment": types.Schema(
                type=types.Type.STRING,
                description="Overview of current market trend",
            ),
            "stocks": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(
                    type=types.Type.OBJECT,
                    properties=properties,
                    required=REQUIRED_STOCK_FIELDS,
                ),
            ),
        },
        required=["marketSentiment", "stocks"],
    )

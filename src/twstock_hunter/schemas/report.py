"""Pydantic schemas for the daily stock report.

Defines StockRecommendation, AnalysisReport and the RiskLevel labels.
Wire names are camelCase (as returned by the model); attributes are snake_case.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RiskLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class StockRecommendation(BaseModel):
    """
    One pick returned by the model. Every field is opaque text.
    risk_level is kept verbatim, even outside RiskLevel; renderers decide how to show it.
    """
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    code: str = ""
    name: str = ""
    price: str = ""  # free text, e.g. "約 600 元"
    sector: str = ""
    reason: str = ""
    technical_signal: str = Field("", alias="technicalSignal")
    chip_signal: str = Field("", alias="chipSignal")
    risk_level: str = Field("", alias="riskLevel")

    @field_validator("*", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        # JSON null means the model left the field out
        return "" if v is None else v


class AnalysisPayload(BaseModel):
    """Shape of the JSON text the model replies with."""
    model_config = ConfigDict(populate_by_name=True)

    market_sentiment: str = Field(..., alias="marketSentiment")
    stocks: List[StockRecommendation]


class AnalysisReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    market_sentiment: str = Field(..., alias="marketSentiment")
    stocks: List[StockRecommendation] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list, description="Distinct citation URLs, first-seen order")

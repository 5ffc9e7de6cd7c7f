"""Session state as a tagged union.

Exactly four variants, discriminated by `status`:
idle (no data), analyzing (no data), complete (report) and error (message).
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .report import AnalysisReport


class IdleState(BaseModel):
    status: Literal["idle"] = "idle"


class AnalyzingState(BaseModel):
    status: Literal["analyzing"] = "analyzing"


class CompleteState(BaseModel):
    status: Literal["complete"] = "complete"
    report: AnalysisReport


class ErrorState(BaseModel):
    status: Literal["error"] = "error"
    message: str


AnalysisState = Annotated[
    Union[IdleState, AnalyzingState, CompleteState, ErrorState],
    Field(discriminator="status"),
]

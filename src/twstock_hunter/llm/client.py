"""Gemini client wrapper with Google Search grounding.

Sends one prompt with a system instruction, the search tool and a JSON
response schema, and returns the raw text plus the citation URLs.
"""

from typing import List, Optional

from google import genai
from google.genai import types
from pydantic import BaseModel

from ..config import Settings
from ..log import get_logger
from .grounding import extract_source_urls

logger = get_logger("llm_client")

class RunMeta(BaseModel):
    sources: List[str]
    model: str

class RunResponse(BaseModel):
    text: Optional[str]
    meta: RunMeta

class GeminiClient:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.client = genai.Client(api_key=settings.GEMINI_API_KEY)

    def run_grounded(
        self,
        prompt: str,
        system_instruction: str,
        response_schema: types.Schema,
        model: Optional[str] = None,
    ) -> RunResponse:
        """
        Single round trip to generate_content with the googleSearch tool enabled.
        Provider and transport errors propagate unchanged.
        """
        model = model or self.settings.GEMINI_MODEL
        logger.info(f"Requesting grounded analysis from {model}")

        response = self.client.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                tools=[types.Tool(google_search=types.GoogleSearch())],
                response_mime_type="application/json",
                response_schema=response_schema,
            ),
        )

        sources = extract_source_urls(response)
        logger.debug(f"Grounding returned {len(sources)} distinct sources")
        return RunResponse(
            text=response.text,
            meta=RunMeta(sources=sources, model=model),
        )

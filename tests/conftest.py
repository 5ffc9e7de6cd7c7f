import pytest
import os
from types import SimpleNamespace
from unittest.mock import MagicMock
from dotenv import load_dotenv

from twstock_hunter.config import Settings
from twstock_hunter.llm.client import GeminiClient

@pytest.fixture(scope="session", autouse=True)
def _load_env():
    # Load .env once per session to avoid side-effects on import time
    load_dotenv()

def _truthy(v: str | None) -> bool:
    return v is not None and v.strip().lower() not in ("", "0", "false", "no")

@pytest.fixture(scope="session")
def allow_integration(_load_env) -> bool:
    # Depends on _load_env to ensure .env is loaded first
    return _truthy(os.getenv("RUN_INTEGRATION_TESTS"))

@pytest.fixture(scope="session")
def gemini_api_key(_load_env) -> str | None:
    key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    if not key or key == "your-gemini-api-key":
        return None
    return key

@pytest.fixture
def settings():
    """
    Settings that never read the developer's .env file.
    AUTO_ANALYZE is off so web tests control when analyses run.
    """
    return Settings(_env_file=None, GEMINI_API_KEY="test-key", AUTO_ANALYZE=False)

def make_genai_response(text, uris=()):
    """
    Build an object shaped like google.genai GenerateContentResponse:
    .text and .candidates[0].grounding_metadata.grounding_chunks[i].web.uri
    A None entry in `uris` produces a chunk without a web source.
    """
    chunks = [SimpleNamespace(web=SimpleNamespace(uri=u) if u else None) for u in uris]
    candidate = SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))
    return SimpleNamespace(text=text, candidates=[candidate])

@pytest.fixture
def fake_genai_response():
    return make_genai_response

@pytest.fixture
def gemini_client(settings):
    """
    GeminiClient whose underlying google.genai client is a MagicMock.
    Tests set `gemini_client.client.models.generate_content.return_value`.
    """
    client = GeminiClient(settings)
    client.client = MagicMock()
    return client

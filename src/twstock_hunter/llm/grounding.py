"""Citation extraction from Gemini grounding metadata."""

from typing import Any, Iterable, List


def dedupe_preserving_order(urls: Iterable[str]) -> List[str]:
    """Exact-string de-duplication; the first occurrence wins."""
    return list(dict.fromkeys(urls))


def extract_source_urls(response: Any) -> List[str]:
    """
    Collect candidates[0].grounding_metadata.grounding_chunks[*].web.uri.
    Any missing level (no candidates, no metadata, chunk without web) is skipped.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    urls = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        if uri:
            urls.append(uri)
    return dedupe_preserving_order(urls)

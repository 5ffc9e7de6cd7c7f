"""Error types raised by the analysis client.

Every error surfaces verbatim to the UI as a display string; none are retried.
"""


class AnalysisError(Exception):
    """Base class for failures of a single analysis invocation."""


class ConfigurationError(AnalysisError):
    """Required configuration (the API credential) is missing or invalid."""


class EmptyResponseError(AnalysisError):
    """The provider returned no text payload."""


class ResponseParseError(AnalysisError):
    """The text payload is not JSON of the expected shape."""


class ProviderError(AnalysisError):
    """Transport or model-side failure reported by the provider."""

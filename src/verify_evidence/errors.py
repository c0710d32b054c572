"""Error taxonomy for the evidence pipeline."""


class EvidenceError(Exception):
    """Base class for all evidence pipeline errors."""


class ConfigurationError(EvidenceError):
    """A required credential or setting is missing.

    Raised by component constructors. The factory catches it and skips the
    component instead of failing startup.
    """


class ProviderError(EvidenceError):
    """A search provider returned an error status or an unusable payload.

    Args:
        provider: Provider name (e.g. "langsearch").
        message: Human-readable description.
        status_code: HTTP status code, when the failure came from one.
    """

    def __init__(self, provider: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.status_code = status_code


class ProviderTimeoutError(ProviderError):
    """A provider attempt exceeded its deadline."""

    def __init__(self, provider: str, timeout: float) -> None:
        super().__init__(provider, f"timed out after {timeout:.1f}s")
        self.timeout = timeout


class PipelineError(EvidenceError):
    """Unexpected failure while generating queries or aggregating results."""

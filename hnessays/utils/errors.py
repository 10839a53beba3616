"""Custom exception hierarchy for hnessays.

All application exceptions inherit from :class:`HNEssaysError`, which
carries an optional ``provider_name`` so error handlers can tell which
external collaborator (e.g. "algolia", "paulgraham.com") caused the failure.

The hierarchy follows the pipeline's layers:

    HNEssaysError  (base -- catch-all for any hnessays error)
    +-- EssaySourceError     (essay list could not be fetched or parsed)
    +-- SearchProviderError  (one search API call failed)
    +-- EssaySearchError     (every query variant for an essay failed)
    +-- CheckpointError      (session checkpoint could not be read/written)
    +-- ConfigurationError   (startup / invalid config)
    +-- ReportError          (report rendering or writing failed)

Where each one is handled:

- ``SearchProviderError`` is absorbed by the search service; that query
  variant simply contributes nothing.
- ``EssaySearchError`` (and any other per-essay exception) is absorbed by
  the batch runner, which records the essay with an empty result.
- ``CheckpointError`` never escapes the checkpoint store during a run;
  persistence failures are logged and the in-memory state carries on.
- ``EssaySourceError`` and ``ConfigurationError`` are fatal and reach the CLI.
"""


class HNEssaysError(Exception):
    """Base exception for all hnessays errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[algolia] HTTP 503``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# External collaborator errors
# ---------------------------------------------------------------------------

class EssaySourceError(HNEssaysError):
    """Raised when the essay list page cannot be fetched or parsed."""

    def __init__(
        self,
        message: str = "Essay list could not be retrieved",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class SearchProviderError(HNEssaysError):
    """Raised when a single search API call fails or returns an unexpected shape."""

    def __init__(
        self,
        message: str = "Search request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EssaySearchError(HNEssaysError):
    """Raised when no query variant for an essay could be executed."""

    def __init__(
        self,
        message: str = "All search queries failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Storage / configuration / output errors
# ---------------------------------------------------------------------------

class CheckpointError(HNEssaysError):
    """Raised when a session checkpoint cannot be read or written."""

    def __init__(
        self,
        message: str = "Checkpoint operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(HNEssaysError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ReportError(HNEssaysError):
    """Raised when a report cannot be rendered or written."""

    def __init__(
        self,
        message: str = "Report generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)

class AryflixError(Exception):
    """Base class for failures raised by the content resolution service."""


class InvalidInput(AryflixError, ValueError):
    """Request rejected before any upstream call was made."""


class UpstreamUnavailable(AryflixError):
    """A provider call timed out, failed in transport or returned an error status."""

    def __init__(self, provider: str, detail: str = ""):
        self.provider = provider
        self.detail = detail
        message = f"{provider} is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SearchFailed(UpstreamUnavailable):
    """At least one of the catalog searches behind a combined search failed."""


class MediaNotFound(AryflixError):
    """The catalog answered but has no title under the requested id."""

    def __init__(self, provider: str, detail: str = ""):
        self.provider = provider
        self.detail = detail
        super().__init__(detail or f"{provider} has no such title")

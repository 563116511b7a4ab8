"""Exception hierarchy for EIIM."""


class EIIMError(Exception):
    """Base exception for the application."""
    pass


class ConfigurationError(EIIMError):
    """Error related to configuration loading or validation."""
    pass


class CollectionError(EIIMError):
    """A collection run could not complete."""
    pass


class ScrapeError(CollectionError):
    """Fetching or parsing a scrape target failed."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url

    def __str__(self):
        if self.url:
            return f"{super().__str__()} (URL: {self.url})"
        return super().__str__()


class SummarizationError(EIIMError):
    """The language-model endpoint failed or returned nothing usable."""
    pass


class RateLimitExceeded(SummarizationError):
    """The per-minute request budget is exhausted."""
    pass

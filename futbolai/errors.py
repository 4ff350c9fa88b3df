"""Error taxonomy for the search service.

InvalidQuery is a user error and maps to HTTP 400. AdapterUnavailable and
AdapterMalformed are raised inside adapters only and are converted to typed
AdapterResult failures before they leave the adapter. AllSourcesUnavailable
is the only error the reconciler escalates.
"""


class FutbolAIError(Exception):
    """Base class for all service errors."""
    pass


class InvalidQuery(FutbolAIError):
    """Raised when the search text is missing or blank."""
    pass


class AdapterUnavailable(FutbolAIError):
    """Raised when a provider times out, errors, or is not configured."""
    pass


class AdapterMalformed(FutbolAIError):
    """Raised when a provider returns unparsable or schema-violating data."""
    pass


class AllSourcesUnavailable(FutbolAIError):
    """Raised when every adapter failed and nothing could be synthesized."""

    def __init__(self, query: str, failures=None):
        self.query = query
        self.failures = failures or []
        super().__init__(f"All sources unavailable for query '{query}'")

"""
Domain exceptions raised by the services and translated into HTTP responses by the routes.
"""


class QuotaExceededError(Exception):
    """The user's daily request budget is spent. Resets on the next UTC day."""

    def __init__(self, max_per_day: int):
        super().__init__(f"Daily limit of {max_per_day} requests reached")
        self.max_per_day = max_per_day


class UpstreamGenerationError(Exception):
    """The model call failed, including every fallback attempt that applied."""

    def __init__(self, message: str, model: str | None = None):
        super().__init__(message)
        self.message = message
        self.model = model

"""Exceptions shared by every stage of the request pipeline.

Steps report failures through these types; the pipeline runner decides
which are fatal and which are recovered.
"""


class PipelineError(Exception):
    """Base exception for request pipeline errors."""

    pass


class ConfigurationError(PipelineError):
    """Raised when deployment configuration makes a request unservable.

    Fatal for the current request: the runner converts it into a 5xx
    response and the handler never runs.
    """

    pass


class UpstreamUnauthorized(PipelineError):
    """Raised when an upstream service rejects the current session.

    Recovered by clearing the session and redirecting to the tenant root.
    """

    def __init__(self, service: str, message: str = "Session unauthorized"):
        super().__init__(f"{service}: {message}")
        self.service = service


class UpstreamServiceError(PipelineError):
    """Raised when an upstream service fails for any reason other than 401."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service

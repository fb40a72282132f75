"""Domain exceptions for localization."""

from shared_kernel.exceptions import ConfigurationError


class LocaleNotAvailableError(ConfigurationError):
    """Raised when the negotiated locale is not globally available.

    This means a tenant is configured with a locale the deployment cannot
    serve. The request must not reach the handler.
    """

    def __init__(self, locale: str):
        super().__init__(
            f"Locale {locale} not available. Check your community settings"
        )
        self.locale = locale

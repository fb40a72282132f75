"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Core application settings.

    Environment variables:
        PORTICO_APP_NAME: Application name (default: Portico)
        PORTICO_DEBUG: Debug mode (default: false)
        PORTICO_DOMAIN: Root domain of the application, may include a port
            (default: lvh.me:8000)
        PORTICO_ALWAYS_USE_SSL: Redirect plain HTTP requests to HTTPS
        PORTICO_SSL_PROXY_MARKER: Via header marker of the trusted proxy whose
            traffic is never redirected to HTTPS
        PORTICO_AVAILABLE_LOCALES: Global list of locales the system can serve
        PORTICO_FALLBACK_LOCALE: Locale used when no tenant is resolved
        PORTICO_UPDATE_TRANSLATIONS_ON_EVERY_PAGE_LOAD: Refetch tenant
            translation overrides on every request (translation test servers)
        PORTICO_SESSION_SECRET: Secret used to sign the session cookie
        PORTICO_PIPELINE_EXEMPT_PATHS: Paths that bypass the request pipeline
        PORTICO_TENANT_DIRECTORY_FILE: Optional JSON file seeding the tenant
            directory at startup
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTICO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Portico", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    domain: str = Field(
        default="lvh.me:8000",
        description="Root domain of the application (port allowed)",
    )
    always_use_ssl: bool = Field(
        default=False,
        description="Redirect plain HTTP requests to HTTPS",
    )
    ssl_proxy_marker: str = Field(
        default="portico_proxy",
        description="Via header marker exempting proxied requests from SSL redirect",
    )
    available_locales: list[str] = Field(
        default_factory=lambda: ["en", "fi", "es", "fr", "de", "sv"],
        description="Global list of locales the system can serve",
    )
    fallback_locale: str = Field(
        default="en",
        description="Locale used when no tenant is resolved",
    )
    update_translations_on_every_page_load: bool = Field(
        default=False,
        description="Refetch tenant translation overrides on every request",
    )
    session_secret: SecretStr = Field(
        default=SecretStr("portico-development-secret"),
        description="Secret used to sign the session cookie",
    )
    pipeline_exempt_paths: list[str] = Field(
        default_factory=lambda: ["/health"],
        description="Paths that bypass the request pipeline",
    )
    tenant_directory_file: Path | None = Field(
        default=None,
        description="Optional JSON file seeding the tenant directory",
    )

    @model_validator(mode="after")
    def validate_fallback_locale(self) -> "AppSettings":
        """Validate that the fallback locale is globally available."""
        if self.fallback_locale not in self.available_locales:
            raise ValueError(
                f"fallback_locale ({self.fallback_locale}) must be one of "
                f"available_locales ({', '.join(self.available_locales)})"
            )
        return self

    @property
    def root_domain(self) -> str:
        """Root domain with any port stripped."""
        return self.domain.split(":", 1)[0]


class RoutingSettings(BaseSettings):
    """Redirect targets used by the request pipeline.

    Environment variables:
        PORTICO_ROUTES_TENANT_NOT_FOUND_REDIRECT: Overrides both unresolved
            tenant targets when set
        PORTICO_ROUTES_NEW_TENANT_PATH: Tenant creation page
        PORTICO_ROUTES_TENANT_NOT_FOUND_PATH: Tenant not found page
        PORTICO_ROUTES_LOGIN_PATH: Login page
        PORTICO_ROUTES_JOIN_PATH: Join tenant page
        PORTICO_ROUTES_ACCESS_DENIED_PATH: Banned access page
        PORTICO_ROUTES_CONFIRMATION_PENDING_PATH: Confirmation pending page
        PORTICO_ROUTES_CONFIRMATION_FLOW_PREFIX: Prefix of the email
            confirmation flow
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTICO_ROUTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tenant_not_found_redirect: str | None = Field(
        default=None,
        description="Overrides the unresolved tenant redirect target",
    )
    new_tenant_path: str = Field(default="/tenants/new")
    tenant_not_found_path: str = Field(default="/tenant_not_found")
    login_path: str = Field(default="/login")
    join_path: str = Field(default="/memberships/new")
    access_denied_path: str = Field(default="/memberships/access_denied")
    confirmation_pending_path: str = Field(default="/sessions/confirmation_pending")
    confirmation_flow_prefix: str = Field(default="/people/confirmation")
    membership_gate_exempt_paths: list[str] = Field(
        default_factory=lambda: [
            "/sessions/confirmation_pending",
            "/people/check_email_availability",
        ],
    )
    confirmation_gate_exempt_paths: list[str] = Field(
        default_factory=lambda: [
            "/sessions/confirmation_pending",
            "/people/check_email_availability_and_validity",
        ],
    )


class ServiceSettings(BaseSettings):
    """Upstream service endpoints.

    Environment variables:
        PORTICO_SERVICES_IDENTITY_URL: Identity service base URL
        PORTICO_SERVICES_TRANSLATION_URL: Translation service base URL
        PORTICO_SERVICES_TIMEOUT_SECONDS: Per-call timeout
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTICO_SERVICES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    identity_url: str = Field(default="http://localhost:9001")
    translation_url: str = Field(default="http://localhost:9002")
    timeout_seconds: float = Field(default=5.0, gt=0)


class PlanSettings(BaseSettings):
    """Promotional plan pricing shown to tenant admins.

    Environment variables:
        PORTICO_PLANS_PRO_MONTHLY_LINK / PORTICO_PLANS_PRO_MONTHLY_PRICE
        PORTICO_PLANS_PRO_BIANNUAL_LINK / PORTICO_PLANS_PRO_BIANNUAL_PRICE
    """

    model_config = SettingsConfigDict(
        env_prefix="PORTICO_PLANS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    pro_monthly_link: str | None = None
    pro_monthly_price: str | None = None
    pro_biannual_link: str | None = None
    pro_biannual_price: str | None = None


@lru_cache
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return AppSettings()


@lru_cache
def get_routing_settings() -> RoutingSettings:
    """Get cached routing settings."""
    return RoutingSettings()


@lru_cache
def get_service_settings() -> ServiceSettings:
    """Get cached upstream service settings."""
    return ServiceSettings()


@lru_cache
def get_plan_settings() -> PlanSettings:
    """Get cached plan settings."""
    return PlanSettings()

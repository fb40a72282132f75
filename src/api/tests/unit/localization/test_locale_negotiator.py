"""Unit tests for LocaleNegotiator."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from localization.application import LocaleBundleCache, LocaleNegotiator
from localization.application.observability import LocaleProbe
from localization.domain import LocaleNotAvailableError
from localization.ports import TranslationService
from shared_kernel.exceptions import ConfigurationError
from tests.unit.conftest import make_tenant

AVAILABLE = ("en", "fi", "es", "fr", "de", "sv")


@pytest.fixture
def mock_translation_service():
    service = MagicMock(spec=TranslationService)
    service.get_translations = AsyncMock(
        return_value={"es": {"layouts.title": "Mercado"}}
    )
    return service


@pytest.fixture
def mock_probe():
    return MagicMock(spec=LocaleProbe)


@pytest.fixture
def negotiator(mock_translation_service, mock_probe):
    cache = LocaleBundleCache(
        mock_translation_service,
        base_catalog={"en": {"layouts": {"title": "Market"}}},
    )
    return LocaleNegotiator(
        bundle_cache=cache,
        available_locales=AVAILABLE,
        fallback_locale="en",
        probe=mock_probe,
    )


class TestNegotiate:
    @pytest.mark.asyncio
    async def test_param_used_when_user_preference_unsupported(
        self, negotiator, tenant, mock_probe
    ):
        result = await negotiator.negotiate(tenant, "fr", "es")

        assert result.locale == "es"
        assert result.translations == {"layouts.title": "Mercado"}
        assert result.customization.name == "Mercado Sub"
        mock_probe.locale_negotiated.assert_called_once_with(locale="es", tenant_id="t-1")

    @pytest.mark.asyncio
    async def test_tenant_default_locale(self, negotiator, tenant):
        result = await negotiator.negotiate(tenant, None, None)

        assert result.locale == "en"
        assert result.translations["layouts.title"] == "Market"

    @pytest.mark.asyncio
    async def test_without_tenant_uses_fallback_and_base_catalog(
        self, negotiator, mock_translation_service
    ):
        result = await negotiator.negotiate(None, "fi", "sv")

        assert result.locale == "en"
        assert result.customization is None
        mock_translation_service.get_translations.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_forwards_outbound_headers(self, negotiator, tenant, mock_translation_service):
        await negotiator.negotiate(tenant, None, None, headers={"X-Event-Id": "e-1"})

        mock_translation_service.get_translations.assert_awaited_once_with(
            "t-1", headers={"X-Event-Id": "e-1"}
        )

    @pytest.mark.asyncio
    async def test_unavailable_tenant_default_is_fatal(self, negotiator, mock_probe):
        """A tenant configured with a locale the deployment lacks is fatal."""
        tenant = make_tenant(default_locale="ru", locales=("ru",))

        with pytest.raises(LocaleNotAvailableError) as exc_info:
            await negotiator.negotiate(tenant, None, None)

        assert exc_info.value.locale == "ru"
        assert isinstance(exc_info.value, ConfigurationError)
        assert "Locale ru not available" in str(exc_info.value)
        mock_probe.locale_not_available.assert_called_once_with(
            locale="ru", tenant_id="t-1"
        )

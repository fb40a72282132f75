"""Infrastructure adapters for localization."""

from localization.infrastructure.translation_client import (
    HttpTranslationService,
    translations_for_bundle,
)

__all__ = ["HttpTranslationService", "translations_for_bundle"]

"""Ports (interfaces) for the localization bounded context."""

from localization.ports.translation_service import TranslationService

__all__ = ["TranslationService"]

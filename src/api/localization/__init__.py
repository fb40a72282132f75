"""Localization bounded context.

Negotiates the working locale of a request and serves tenant translation
bundles merged with their dynamic overrides.
"""

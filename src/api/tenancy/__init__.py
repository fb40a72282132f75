"""Tenancy bounded context.

Resolves the tenant ("community") that owns the host of an inbound request.
"""

"""Shared Kernel module.

Value objects every bounded context of the pipeline agrees on: the error
taxonomy, terminal redirects, session and flash state, correlation ids
and URL helpers. Nothing here may import a bounded context.
"""

"""Presentation layer for the pipeline."""

from pipeline.presentation.middleware import PipelineMiddleware, get_request_context

__all__ = ["PipelineMiddleware", "get_request_context"]

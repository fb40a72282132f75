"""Observability for the pipeline application layer."""

from pipeline.application.observability.pipeline_probe import (
    DefaultPipelineProbe,
    PipelineProbe,
    observation_context_for,
)

__all__ = ["DefaultPipelineProbe", "PipelineProbe", "observation_context_for"]

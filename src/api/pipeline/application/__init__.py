"""Application layer for the pipeline."""

from pipeline.application.runner import PipelineRunner
from pipeline.application.steps import (
    PipelineStep,
    build_pipeline_steps,
    recover_unauthorized_session,
)

__all__ = [
    "PipelineRunner",
    "PipelineStep",
    "build_pipeline_steps",
    "recover_unauthorized_session",
]

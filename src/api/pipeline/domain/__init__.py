"""Domain layer for the pipeline: request context and step outcomes."""

from pipeline.domain.outcomes import Continue, Fatal, PipelineResult, StepOutcome, Terminate
from pipeline.domain.request_context import MailTarget, RequestContext

__all__ = [
    "Continue",
    "Fatal",
    "MailTarget",
    "PipelineResult",
    "RequestContext",
    "StepOutcome",
    "Terminate",
]

"""Step outcomes and the pipeline result.

A step either continues with a new context, terminates the pipeline with
a redirect, or fails fatally. Terminating is a normal control-flow exit,
not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus

from pipeline.domain.request_context import RequestContext
from shared_kernel.exceptions import PipelineError
from shared_kernel.redirects import TerminalRedirect


@dataclass(frozen=True)
class Continue:
    context: RequestContext


@dataclass(frozen=True)
class Terminate:
    context: RequestContext
    redirect: TerminalRedirect


@dataclass(frozen=True)
class Fatal:
    context: RequestContext
    error: PipelineError


StepOutcome = Continue | Terminate | Fatal


@dataclass(frozen=True)
class PipelineResult:
    """What the pipeline decided for a request.

    Attributes:
        context: Final request context (session effects included)
        redirect: Set when a step terminated the pipeline
        error: Set when a step failed fatally
        step: Name of the terminating or failing step
    """

    context: RequestContext
    redirect: TerminalRedirect | None = None
    error: PipelineError | None = None
    step: str | None = None

    @property
    def terminated(self) -> bool:
        return self.redirect is not None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def completed(self) -> bool:
        return not self.terminated and not self.failed

    @property
    def status_code(self) -> int | None:
        """HTTP status to answer with, or None to run the handler."""
        if self.error is not None:
            return HTTPStatus.INTERNAL_SERVER_ERROR
        if self.redirect is not None:
            return self.redirect.status_code
        return None

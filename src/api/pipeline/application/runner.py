"""Pipeline runner: executes steps in order until one ends the request."""

from __future__ import annotations

from typing import Awaitable, Callable, Sequence

from pipeline.application.observability import (
    DefaultPipelineProbe,
    PipelineProbe,
    observation_context_for,
)
from pipeline.application.steps import PipelineStep
from pipeline.domain import (
    Continue,
    Fatal,
    PipelineResult,
    RequestContext,
    StepOutcome,
    Terminate,
)
from shared_kernel.exceptions import ConfigurationError, UpstreamUnauthorized

UnauthorizedRecovery = Callable[
    [RequestContext, UpstreamUnauthorized], Awaitable[StepOutcome]
]


class PipelineRunner:
    """Runs an ordered, short-circuiting chain of pipeline steps.

    The first step that terminates or fails ends the run; no later step
    sees the request. ``UpstreamUnauthorized`` from any step is handed to
    the recovery, ``ConfigurationError`` becomes a fatal result. Any other
    exception propagates.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        on_unauthorized: UnauthorizedRecovery,
        probe: PipelineProbe | None = None,
    ):
        self._steps = tuple(steps)
        self._on_unauthorized = on_unauthorized
        self._probe = probe or DefaultPipelineProbe()

    @property
    def step_names(self) -> tuple[str, ...]:
        return tuple(step.name for step in self._steps)

    async def run(self, context: RequestContext) -> PipelineResult:
        """Run every step against ``context``.

        Returns:
            The final context, with the redirect or error of the step that
            ended the run, if any.
        """
        for step in self._steps:
            try:
                outcome = await step.run(context)
            except UpstreamUnauthorized as e:
                outcome = await self._recover(context, e, step.name)
            except ConfigurationError as e:
                outcome = Fatal(context, e)

            match outcome:
                case Continue(context=next_context):
                    context = next_context
                case Terminate() | Fatal():
                    return self._finish(outcome, step.name)

        self._probe.with_context(observation_context_for(context)).pipeline_completed(
            step_count=len(self._steps)
        )
        return PipelineResult(context=context)

    async def recover(
        self, context: RequestContext, error: UpstreamUnauthorized
    ) -> PipelineResult:
        """Recover from an unauthorized session reported after the run.

        Used when the handler itself hits a rejected session, so both paths
        end the same way.
        """
        outcome = await self._recover(context, error, "handler")
        return self._finish(outcome, "handler")

    async def _recover(
        self, context: RequestContext, error: UpstreamUnauthorized, step: str
    ) -> StepOutcome:
        self._probe.with_context(observation_context_for(context)).session_recovered(
            step=step, service=error.service
        )
        return await self._on_unauthorized(context, error)

    def _finish(self, outcome: StepOutcome, step: str) -> PipelineResult:
        probe = self._probe.with_context(observation_context_for(outcome.context))
        match outcome:
            case Terminate(context=context, redirect=redirect):
                probe.pipeline_terminated(
                    step=step,
                    location=redirect.location,
                    status_code=int(redirect.status_code),
                )
                return PipelineResult(context=context, redirect=redirect, step=step)
            case Fatal(context=context, error=error):
                probe.pipeline_failed(step=step, error=error)
                return PipelineResult(context=context, error=error, step=step)
            case Continue(context=context):
                return PipelineResult(context=context)

"""Unit tests for PipelineRunner."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from localization.domain import LocaleNotAvailableError
from pipeline.application import PipelineRunner, PipelineStep
from pipeline.application.observability import PipelineProbe
from pipeline.domain import Continue, Fatal, RequestContext, Terminate
from shared_kernel.exceptions import UpstreamServiceError, UpstreamUnauthorized
from shared_kernel.redirects import TerminalRedirect


@pytest.fixture
def context():
    return RequestContext.start(scheme="http", host="sub.example.com", path="/")


@pytest.fixture
def mock_probe():
    probe = MagicMock(spec=PipelineProbe)
    probe.with_context.return_value = probe
    return probe


def recording_step(name: str, calls: list[str], **changes) -> PipelineStep:
    async def run(context):
        calls.append(name)
        return Continue(context.evolve(**changes))

    return PipelineStep(name, run)


def terminating_step(name: str, location: str) -> PipelineStep:
    async def run(context):
        return Terminate(context, TerminalRedirect.temporary(location))

    return PipelineStep(name, run)


def raising_step(name: str, error: Exception) -> PipelineStep:
    async def run(context):
        raise error

    return PipelineStep(name, run)


async def redirect_home(context, error):
    return Terminate(context.signed_out(), TerminalRedirect.temporary("/"))


class TestRun:
    @pytest.mark.asyncio
    async def test_runs_every_step_in_order(self, context, mock_probe):
        calls: list[str] = []
        runner = PipelineRunner(
            [
                recording_step("first", calls, locale="en"),
                recording_step("second", calls, correlation_id="e-1"),
            ],
            on_unauthorized=redirect_home,
            probe=mock_probe,
        )

        result = await runner.run(context)

        assert calls == ["first", "second"]
        assert result.completed
        assert result.status_code is None
        assert result.context.locale == "en"
        assert result.context.correlation_id == "e-1"
        mock_probe.pipeline_completed.assert_called_once_with(step_count=2)

    @pytest.mark.asyncio
    async def test_terminate_short_circuits(self, context, mock_probe):
        """No later step runs, so no correlation id is generated."""
        calls: list[str] = []
        runner = PipelineRunner(
            [
                terminating_step("resolve_tenant", "/tenant_not_found"),
                recording_step("generate_correlation_id", calls, correlation_id="e-1"),
            ],
            on_unauthorized=redirect_home,
            probe=mock_probe,
        )

        result = await runner.run(context)

        assert calls == []
        assert result.terminated
        assert result.step == "resolve_tenant"
        assert result.status_code == 302
        assert result.context.correlation_id is None
        mock_probe.pipeline_terminated.assert_called_once_with(
            step="resolve_tenant", location="/tenant_not_found", status_code=302
        )

    @pytest.mark.asyncio
    async def test_fatal_outcome(self, context, mock_probe):
        error = LocaleNotAvailableError("ru")

        async def fail(ctx):
            return Fatal(ctx, error)

        runner = PipelineRunner(
            [PipelineStep("negotiate_locale", fail)],
            on_unauthorized=redirect_home,
            probe=mock_probe,
        )

        result = await runner.run(context)

        assert result.failed
        assert result.error is error
        assert result.status_code == 500
        mock_probe.pipeline_failed.assert_called_once_with(
            step="negotiate_locale", error=error
        )

    @pytest.mark.asyncio
    async def test_configuration_error_becomes_fatal(self, context, mock_probe):
        calls: list[str] = []
        runner = PipelineRunner(
            [
                raising_step("negotiate_locale", LocaleNotAvailableError("ru")),
                recording_step("later", calls),
            ],
            on_unauthorized=redirect_home,
            probe=mock_probe,
        )

        result = await runner.run(context)

        assert result.status_code == 500
        assert isinstance(result.error, LocaleNotAvailableError)
        assert calls == []

    @pytest.mark.asyncio
    async def test_unauthorized_is_recovered(self, context, mock_probe):
        context = context.evolve(session=context.session.signed_in_as("u-1"))
        recovery = AsyncMock(side_effect=redirect_home)
        runner = PipelineRunner(
            [raising_step("fetch_identity", UpstreamUnauthorized("identity_service"))],
            on_unauthorized=recovery,
            probe=mock_probe,
        )

        result = await runner.run(context)

        assert result.redirect == TerminalRedirect.temporary("/")
        assert result.context.session.user_id is None
        recovery.assert_awaited_once()
        mock_probe.session_recovered.assert_called_once_with(
            step="fetch_identity", service="identity_service"
        )

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, context, mock_probe):
        runner = PipelineRunner(
            [raising_step("fetch_plan_info", UpstreamServiceError("billing", "down"))],
            on_unauthorized=redirect_home,
            probe=mock_probe,
        )

        with pytest.raises(UpstreamServiceError):
            await runner.run(context)


class TestRecover:
    @pytest.mark.asyncio
    async def test_recovers_handler_errors_like_step_errors(self, context, mock_probe):
        runner = PipelineRunner([], on_unauthorized=redirect_home, probe=mock_probe)

        result = await runner.recover(context, UpstreamUnauthorized("translation_service"))

        assert result.terminated
        assert result.step == "handler"
        mock_probe.session_recovered.assert_called_once_with(
            step="handler", service="translation_service"
        )


def test_step_names():
    runner = PipelineRunner(
        [terminating_step("a", "/"), terminating_step("b", "/")],
        on_unauthorized=redirect_home,
    )

    assert runner.step_names == ("a", "b")

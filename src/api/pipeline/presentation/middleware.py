"""Starlette middleware running the request pipeline before every handler."""

from __future__ import annotations

from typing import Collection

from fastapi import HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import PlainTextResponse, RedirectResponse, Response
from starlette.types import ASGIApp

from infrastructure.logging import (
    bind_request_logging_context,
    clear_request_logging_context,
)
from pipeline.application import PipelineRunner
from pipeline.domain import PipelineResult, RequestContext
from shared_kernel.exceptions import UpstreamUnauthorized
from shared_kernel.session import SessionData


class PipelineMiddleware(BaseHTTPMiddleware):
    """Runs the pipeline and forwards to the handler only on completion.

    Requires Starlette's ``SessionMiddleware`` further out: the session is
    read from and written back to ``request.session``.
    """

    def __init__(
        self,
        app: ASGIApp,
        runner: PipelineRunner,
        exempt_paths: Collection[str] = (),
    ):
        super().__init__(app)
        self._runner = runner
        self._exempt_paths = frozenset(exempt_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self._exempt_paths:
            return await call_next(request)

        context = RequestContext.start(
            scheme=request.url.scheme,
            host=request.url.hostname or "",
            path=request.url.path,
            port=request.url.port,
            query=dict(request.query_params),
            raw_query=request.url.query,
            headers=dict(request.headers),
            session=SessionData.from_mapping(request.session),
        )

        try:
            result = await self._runner.run(context)
            _store_session(request, result.context)
            bind_request_logging_context(
                correlation_id=result.context.correlation_id,
                tenant_id=result.context.tenant.id if result.context.tenant else None,
            )

            if not result.completed:
                return _response_for(result)

            request.state.request_context = result.context
            try:
                return await call_next(request)
            except UpstreamUnauthorized as e:
                recovered = await self._runner.recover(result.context, e)
                _store_session(request, recovered.context)
                return _response_for(recovered)
        finally:
            clear_request_logging_context()


def _store_session(request: Request, context: RequestContext) -> None:
    request.session.clear()
    request.session.update(context.session.to_mapping())


def _response_for(result: PipelineResult) -> Response:
    if result.redirect is not None:
        return RedirectResponse(
            url=result.redirect.location,
            status_code=result.redirect.status_code,
        )
    return PlainTextResponse(
        "Internal Server Error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def get_request_context(request: Request) -> RequestContext:
    """FastAPI dependency exposing the pipeline's context to handlers."""
    context = getattr(request.state, "request_context", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Request did not pass the request pipeline",
        )
    return context

# tokenauth/middleware/auth_middleware.py
import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from tokenauth.core.context import get_request_context
from tokenauth.core.pipeline import Pipelines

logger = logging.getLogger(__name__)


class PipelineResponse(Exception):
    """Raised by router pipelines to end a request with `response`."""

    def __init__(self, response: Response):
        self.response = response
        super().__init__(response.status_code)


async def pipeline_response_handler(request: Request, exc: PipelineResponse) -> Response:
    return exc.response


class PipelineMiddleware(BaseHTTPMiddleware):
    """
    Middleware: runs the application pipelines around every request.
    Before-steps may set context.current_user (mirrored onto
    request.state.current_user) or end the request with a response.
    Exceptions from before-steps or the app go to on_error; unhandled ones
    are re-raised to the host.
    """

    def __init__(self, app, pipelines: Pipelines):
        super().__init__(app)
        self.pipelines = pipelines

    async def dispatch(self, request: Request, call_next: Callable):
        context = get_request_context(request)

        try:
            response = await self.pipelines.before_request.invoke(context)
            request.state.current_user = context.current_user
            if response is None:
                response = await call_next(request)
        except Exception as exc:
            response = await self.pipelines.on_error.invoke(context, exc)
            if response is None:
                raise
            logger.debug("error pipeline handled %s", type(exc).__name__)

        context.response = response
        await self.pipelines.after_request.invoke(context)
        return response


def init_token_authentication(app: FastAPI, pipelines: Optional[Pipelines] = None) -> Pipelines:
    """
    Call this when constructing the FastAPI app.
    Installs the pipeline middleware and the handler that renders router
    short-circuits, and returns the pipelines to register steps on.
    """
    pipelines = pipelines or Pipelines()
    app.state.pipelines = pipelines
    app.add_middleware(PipelineMiddleware, pipelines=pipelines)
    app.add_exception_handler(PipelineResponse, pipeline_response_handler)  # type: ignore
    return pipelines

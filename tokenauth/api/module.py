# tokenauth/api/module.py
from typing import Any

from fastapi import APIRouter, Depends, Request

from tokenauth.core.context import RequestContext, get_request_context
from tokenauth.core.pipeline import AfterPipeline, BeforePipeline, ErrorPipeline
from tokenauth.middleware.auth_middleware import PipelineResponse


class AuthModule(APIRouter):
    """
    APIRouter with its own before/after/error pipelines.
    They run for every route of the router, after the application pipelines.
    Needs init_token_authentication(app) for before-step responses to render.

    After-steps run once the handler returns but before the response is
    built, so context.response is still None there. Steps that inspect the
    response belong on the application's after_request pipeline.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.before = BeforePipeline()
        self.after = AfterPipeline()
        self.on_error = ErrorPipeline()
        self.dependencies.insert(0, Depends(self.run_pipelines))

    async def run_pipelines(self, request: Request):
        context: RequestContext = get_request_context(request)
        response = await self.before.invoke(context)
        if response is not None:
            raise PipelineResponse(response)
        request.state.current_user = context.current_user
        try:
            yield context
        except PipelineResponse:
            raise
        except Exception as exc:
            response = await self.on_error.invoke(context, exc)
            if response is None:
                raise
            raise PipelineResponse(response) from exc
        await self.after.invoke(context)

# tokenauth/core/auth.py
import inspect
import logging
from typing import Any, Callable, Optional

from fastapi import HTTPException, Request, status
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse, Response

from tokenauth.core.config import InvalidArgumentError, TokenAuthenticationConfiguration, TokenSource
from tokenauth.core.context import RequestContext, get_request_context
from tokenauth.core.pipeline import PipelineItem, Pipelines

logger = logging.getLogger(__name__)

SCHEME = "Token"
AUTHORIZATION = "Authorization"
TOKEN_HOOK_NAME = "token-authentication"
REQUIRES_AUTH_NAME = "requires-authentication"


def _located_value(context: RequestContext, source: TokenSource) -> Optional[str]:
    if source == TokenSource.QUERY:
        return context.query_value(AUTHORIZATION)
    values = context.header_values(AUTHORIZATION)
    return values[0] if values else None


def parse_credentials(value: Optional[str]) -> Optional[str]:
    """
    Return the credential from a `Token <credential>` value, or None.
    The split is strict: one scheme, one space, one whitespace-free credential.
    """
    if not value:
        return None
    parts = value.split(" ")
    if len(parts) != 2:
        return None
    scheme, credential = parts
    if scheme != SCHEME or not credential or credential.split() != [credential]:
        return None
    return credential


def get_credentials(context: RequestContext, configuration: TokenAuthenticationConfiguration) -> Optional[str]:
    """Find the raw token for this request in the configured location."""
    source = configuration.token_source
    credential = parse_credentials(_located_value(context, source))
    if credential is None:
        logger.debug("no applicable token in %s", source.value)
    return credential


async def _detokenize(tokenizer: Any, token: str, context: RequestContext) -> Any:
    detokenize = tokenizer.detokenize
    if inspect.iscoroutinefunction(detokenize):
        return await detokenize(token, context)
    result = await run_in_threadpool(detokenize, token, context)
    if inspect.isawaitable(result):
        result = await result
    return result


def get_token_hook(configuration: TokenAuthenticationConfiguration) -> Callable:
    """
    Build the before-request step: locate the token, resolve it, and set
    context.current_user. It never returns a response.
    """
    async def token_hook(context: RequestContext) -> None:
        token = get_credentials(context, configuration)
        if token is None:
            return None
        user = await _detokenize(configuration.tokenizer, token, context)
        if user is not None:
            context.current_user = user
        return None

    return token_hook


def requires_authentication(context: RequestContext) -> Optional[Response]:
    if context.current_user is None:
        return JSONResponse(
            {"detail": "Not authenticated"},
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": SCHEME},
        )
    return None


def enable(pipelines: Pipelines, configuration: TokenAuthenticationConfiguration) -> None:
    """
    Enable token authentication for the whole application.
    The step goes first so later before-steps can rely on current_user.
    """
    if configuration is None:
        raise InvalidArgumentError("configuration")
    pipelines.before_request.add_item_to_start_of_pipeline(
        PipelineItem(get_token_hook(configuration), TOKEN_HOOK_NAME)
    )
    logger.info("token authentication enabled (source=%s)", configuration.token_source.value)


def enable_for_module(module: Any, configuration: TokenAuthenticationConfiguration) -> None:
    """
    Enable token authentication for one router and require it there:
    appends the token step and then the requires-authentication step.
    """
    if configuration is None:
        raise InvalidArgumentError("configuration")
    module.before.add_item_to_end_of_pipeline(PipelineItem(get_token_hook(configuration), TOKEN_HOOK_NAME))
    module.before.add_item_to_end_of_pipeline(PipelineItem(requires_authentication, REQUIRES_AUTH_NAME))
    logger.info("token authentication required for %s", getattr(module, "prefix", None) or module)


# Dependencies for route handlers
def get_optional_user(request: Request) -> Any:
    return get_request_context(request).current_user


def get_current_user(request: Request) -> Any:
    user = get_request_context(request).current_user
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": SCHEME},
        )
    return user

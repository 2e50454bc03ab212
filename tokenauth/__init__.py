from tokenauth.api.module import AuthModule
from tokenauth.core.auth import (
    enable,
    enable_for_module,
    get_current_user,
    get_optional_user,
    requires_authentication,
)
from tokenauth.core.config import (
    InvalidArgumentError,
    TokenAuthenticationConfiguration,
    TokenSource,
    configuration_from_env,
)
from tokenauth.core.context import RequestContext, get_request_context
from tokenauth.core.pipeline import Pipelines
from tokenauth.core.tokenizer import JwtTokenizer, Tokenizer, UserIdentity
from tokenauth.middleware.auth_middleware import PipelineMiddleware, init_token_authentication

__all__ = [
    "AuthModule",
    "InvalidArgumentError",
    "JwtTokenizer",
    "PipelineMiddleware",
    "Pipelines",
    "RequestContext",
    "TokenAuthenticationConfiguration",
    "TokenSource",
    "Tokenizer",
    "UserIdentity",
    "configuration_from_env",
    "enable",
    "enable_for_module",
    "get_current_user",
    "get_optional_user",
    "get_request_context",
    "init_token_authentication",
    "requires_authentication",
]

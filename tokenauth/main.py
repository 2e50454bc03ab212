from typing import Optional

from fastapi import FastAPI, Depends

from tokenauth.api.me import build_router
from tokenauth.core import auth
from tokenauth.core.auth import get_optional_user
from tokenauth.core.config import configuration_from_env
from tokenauth.core.tokenizer import JwtTokenizer, Tokenizer
from tokenauth.middleware.auth_middleware import init_token_authentication


def create_app(tokenizer: Optional[Tokenizer] = None) -> FastAPI:
    app = FastAPI(
        title="Token Authentication API",
        description="Example app wired with token authentication",
        version="1.0.0"
    )

    configuration = configuration_from_env(tokenizer or JwtTokenizer())

    # app-wide: attach identity when a token is present
    pipelines = init_token_authentication(app)
    auth.enable(pipelines, configuration)

    # /me: token required
    me_router = build_router()
    auth.enable_for_module(me_router, configuration)

    @app.get("/")
    def read_root(user=Depends(get_optional_user)):
        return {"message": "API is running!", "authenticated": user is not None}

    app.include_router(me_router)
    app.state.token_configuration = configuration
    return app


app = create_app()

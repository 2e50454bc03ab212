# tokenauth/core/config.py
import os
from enum import Enum
from typing import Any, Optional, Union

from dotenv import load_dotenv

# Load env vars from .env file
load_dotenv()


class InvalidArgumentError(ValueError):
    """Raised at setup time when a required argument is missing."""

    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f"{argument} must not be None")


class TokenSource(str, Enum):
    """Where in the request the token is looked for."""

    HEADER = "header"
    QUERY = "query"


class TokenAuthenticationConfiguration:
    """
    Configuration for token authentication.

    `tokenizer` is fixed for the lifetime of the configuration. `token_source`
    may be swapped at runtime; in-flight requests see either the old or the
    new value.
    """

    def __init__(self, tokenizer: Any, token_source: Union[TokenSource, str] = TokenSource.HEADER):
        if tokenizer is None:
            raise InvalidArgumentError("tokenizer")
        self._tokenizer = tokenizer
        self.token_source = token_source

    @property
    def tokenizer(self) -> Any:
        return self._tokenizer

    @property
    def token_source(self) -> TokenSource:
        return self._token_source

    @token_source.setter
    def token_source(self, value: Union[TokenSource, str]) -> None:
        self._token_source = TokenSource(value)

    def __repr__(self) -> str:
        return f"TokenAuthenticationConfiguration(tokenizer={self._tokenizer!r}, token_source={self._token_source.value!r})"


def configuration_from_env(tokenizer: Any, source: Optional[str] = None) -> TokenAuthenticationConfiguration:
    """Build a configuration using TOKEN_AUTH_SOURCE unless `source` is given."""
    source = source or os.getenv("TOKEN_AUTH_SOURCE", "header")
    return TokenAuthenticationConfiguration(tokenizer, source.lower())

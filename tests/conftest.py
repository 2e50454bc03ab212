"""Global test fixtures."""

import os
from typing import Dict, Optional
from unittest.mock import MagicMock
from urllib.parse import urlencode

import pytest
from starlette.requests import Request

# Set JWT secret before any test modules import the tokenizer
os.environ.setdefault("JWT_SECRET", "test-secret-for-unit-tests-min-32")

from tokenauth.core.context import RequestContext  # noqa: E402
from tokenauth.core.tokenizer import Tokenizer  # noqa: E402


def make_request(headers: Optional[Dict[str, str]] = None, query: Optional[Dict[str, str]] = None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "query_string": urlencode(query or {}).encode(),
    }
    return Request(scope)


def make_context(headers: Optional[Dict[str, str]] = None, query: Optional[Dict[str, str]] = None) -> RequestContext:
    return RequestContext(make_request(headers, query))


@pytest.fixture
def tokenizer() -> MagicMock:
    """A tokenizer that declines every token unless told otherwise."""
    fake = MagicMock(spec=Tokenizer)
    fake.detokenize.return_value = None
    return fake

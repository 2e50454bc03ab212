# tokenauth/core/context.py
from typing import Any, Dict, List, Optional

from starlette.requests import Request
from starlette.responses import Response

STATE_KEY = "auth_context"


class RequestContext:
    """
    Per-request state shared by the global pipeline and router pipelines.
    Created once per request and discarded with it.
    """

    def __init__(self, request: Request):
        self.request = request
        self.current_user: Any = None
        self.items: Dict[str, Any] = {}
        self.response: Optional[Response] = None

    def header_values(self, name: str) -> List[str]:
        # starlette headers are case-insensitive
        return self.request.headers.getlist(name)

    def query_value(self, name: str) -> Optional[str]:
        """Case-insensitive query parameter lookup; the first matching key wins."""
        wanted = name.lower()
        for key, value in self.request.query_params.multi_items():
            if key.lower() == wanted:
                return value
        return None


def get_request_context(request: Request) -> RequestContext:
    context = getattr(request.state, STATE_KEY, None)
    if context is None:
        context = RequestContext(request)
        setattr(request.state, STATE_KEY, context)
    return context

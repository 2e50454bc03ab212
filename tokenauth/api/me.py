# tokenauth/api/me.py
from typing import Any, Dict

from fastapi import Depends

from tokenauth.api.module import AuthModule
from tokenauth.core.auth import get_current_user
from tokenauth.core.tokenizer import UserIdentity


def build_router() -> AuthModule:
    router = AuthModule(prefix="/me", tags=["me"])

    @router.get("", summary="Get the authenticated caller")
    def read_current_user(user: Any = Depends(get_current_user)) -> Dict[str, Any]:
        """Return the identity resolved from the request token."""
        if isinstance(user, UserIdentity):
            return {"user": user.user_name, "claims": user.claims}
        return {"user": str(user)}

    return router

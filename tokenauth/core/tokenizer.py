# tokenauth/core/tokenizer.py
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from tokenauth.core.context import RequestContext

JWT_SECRET = os.getenv("JWT_SECRET", "changeme")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")


class UserIdentity:
    """Who the caller is: a user name plus the claims it was resolved from."""

    def __init__(self, user_name: str, claims: Optional[Dict[str, Any]] = None):
        self.user_name = user_name
        self.claims = dict(claims or {})

    def __repr__(self) -> str:
        return f"UserIdentity(user_name={self.user_name!r})"


class Tokenizer(ABC):
    """
    Resolves a raw token into an identity.

    Return None when the token is not recognised. Raise only for unexpected
    faults (network, corrupt store); those propagate to the host's error
    handling. `detokenize` may be declared `async def`.
    """

    @abstractmethod
    def detokenize(self, token: str, context: RequestContext) -> Any:
        raise NotImplementedError


class JwtTokenizer(Tokenizer):
    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret = secret or JWT_SECRET
        self.algorithm = algorithm or JWT_ALGORITHM

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Decode and validate a JWT. Returns None when it is invalid or expired."""
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            return None

    def detokenize(self, token: str, context: RequestContext) -> Optional[UserIdentity]:
        payload = self.decode(token)
        if not payload:
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        return UserIdentity(str(user_id), payload)

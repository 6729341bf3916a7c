"""JWT bearer token verification."""

from dataclasses import dataclass

import jwt
import structlog

log = structlog.get_logger()


@dataclass
class TokenUser:
    """Authenticated caller from a verified token."""

    user_id: str
    email: str | None = None
    username: str | None = None


class JWTProvider:
    """Verifies HS256 (or configured) tokens and extracts the caller id.

    The caller id is the userId claim, falling back to sub, lowercased to
    match stored object ids.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    def decode_token(self, token: str) -> TokenUser | None:
        """Decode and validate JWT, return user info or None."""
        if not self._secret:
            return None
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.PyJWTError as e:
            log.info("auth.token_rejected", reason=str(e))
            return None
        user_id = claims.get("userId") or claims.get("sub")
        if not user_id or not isinstance(user_id, str):
            log.info("auth.token_rejected", reason="missing user claim")
            return None
        return TokenUser(
            user_id=user_id.strip().lower(),
            email=claims.get("email"),
            username=claims.get("username"),
        )

    def encode_token(self, user_id: str, **claims: object) -> str:
        """Issue a token for user_id. Used by tooling and tests."""
        return jwt.encode({"userId": user_id, **claims}, self._secret, algorithm=self._algorithm)

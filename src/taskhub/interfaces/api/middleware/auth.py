"""Auth middleware - verifies the bearer token and sets req.context.user."""

from dataclasses import dataclass

import falcon.asgi

from taskhub.domain.exceptions import AuthenticationRequired
from taskhub.infrastructure.auth.jwt_provider import JWTProvider


@dataclass
class RequestUser:
    """User from request context."""

    user_id: str
    email: str | None = None
    username: str | None = None


class AuthMiddleware:
    """Middleware that validates JWT and sets req.context.user (None when absent or invalid)."""

    def __init__(self, jwt_provider: JWTProvider) -> None:
        self._jwt = jwt_provider

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Extract user from Authorization header."""
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer "):
            return
        user = self._jwt.decode_token(auth[7:].strip())
        if user:
            req.context.user = RequestUser(
                user_id=user.user_id,
                email=user.email,
                username=user.username,
            )


def require_user(req: falcon.asgi.Request) -> RequestUser:
    """Return the authenticated caller or raise AuthenticationRequired."""
    user = getattr(req.context, "user", None)
    if not user:
        raise AuthenticationRequired()
    return user

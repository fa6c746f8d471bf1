"""
Bearer token verification.

In ``remote`` mode the token is forwarded to the managed auth service
(``GET /auth/v1/user``) and the service decides whether it is valid. In
``jwt`` mode the token is verified locally with the project's JWT secret.
Either way the result is an ``AuthenticatedUser``; failures raise
``InvalidTokenError`` or ``AuthServiceError``. There is no retry and no
caching: every request is verified once.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
import jwt

from trackmyjob.config import Settings, settings as default_settings
from trackmyjob.exceptions import AuthServiceError, InvalidTokenError

logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedUser:
    id: str
    email: Optional[str] = None
    role: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_auth_response(cls, data: dict[str, Any]) -> "AuthenticatedUser":
        user_id = data.get("id")
        if not user_id:
            raise AuthServiceError("user payload has no id")
        return cls(
            id=str(user_id),
            email=data.get("email"),
            role=data.get("role"),
            metadata=data.get("user_metadata") or {},
        )

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "AuthenticatedUser":
        user_id = claims.get("sub")
        if not user_id:
            raise InvalidTokenError("Token has no subject")
        return cls(
            id=str(user_id),
            email=claims.get("email"),
            role=claims.get("role"),
            metadata=claims.get("user_metadata") or {},
        )


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise InvalidTokenError("Not authenticated")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise InvalidTokenError("Authorization header must be 'Bearer <token>'")
    return token.strip()


class AuthClient:
    USER_ENDPOINT = "/auth/v1/user"

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or default_settings
        self._transport = transport

    @property
    def mode(self) -> str:
        return self.config.auth_mode.lower()

    async def get_user(self, token: str) -> AuthenticatedUser:
        if self.mode == "jwt":
            return self.decode_token(token)
        if self.mode == "remote":
            return await self.fetch_user(token)
        raise AuthServiceError(f"unknown auth mode '{self.config.auth_mode}'")

    async def fetch_user(self, token: str) -> AuthenticatedUser:
        """Forward the token to the auth service and return the user it names."""
        url = self.config.auth_url.rstrip("/") + self.USER_ENDPOINT
        headers = {"Authorization": f"Bearer {token}"}
        if self.config.auth_api_key:
            headers["apikey"] = self.config.auth_api_key

        try:
            async with httpx.AsyncClient(
                timeout=self.config.auth_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Auth service request failed: {type(e).__name__}: {e}")
            raise AuthServiceError(str(e)) from e

        if response.status_code in (401, 403):
            raise InvalidTokenError()
        if response.status_code != 200:
            logger.error(f"Auth service returned HTTP {response.status_code}")
            raise AuthServiceError(f"unexpected HTTP {response.status_code}", response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise AuthServiceError("response is not JSON") from e

        return AuthenticatedUser.from_auth_response(data)

    def decode_token(self, token: str) -> AuthenticatedUser:
        """Verify a token locally with the shared JWT secret."""
        if not self.config.jwt_secret:
            raise AuthServiceError("jwt_secret is not configured")

        try:
            claims = jwt.decode(
                token,
                self.config.jwt_secret,
                algorithms=[self.config.jwt_algorithm],
                audience=self.config.jwt_audience or None,
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError() from e

        return AuthenticatedUser.from_claims(claims)

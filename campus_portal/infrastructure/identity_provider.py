"""Identity Provider Boundary — bearer-token verification and the IdP REST client.

Invariants:
    - verify() returns an Identity or raises UnauthorizedError; it never returns None
    - Tokens must carry `sub` and `exp`; expired tokens are rejected
    - app_metadata is never copied into Identity (directory role is authoritative)
    - Transport failures map to IdentityProviderError; bad credentials map to 401

Design Decisions:
    - PyJWT with the IdP's shared HS256 secret: verification needs no network round-trip
    - httpx.AsyncClient for the GoTrue-style REST API; transport injectable for tests
"""

import logging
from typing import Any

import httpx
import jwt

from campus_portal.core.domain_types import SubjectId
from campus_portal.core.errors import (
    ConflictError,
    IdentityProviderError,
    RequestValidationFailure,
    UnauthorizedError,
)
from campus_portal.core.identity import Identity

logger = logging.getLogger(__name__)


def _email_verified(claims: dict[str, Any]) -> bool:
    if claims.get("email_verified") is True:
        return True
    if claims.get("email_confirmed_at"):
        return True
    user_metadata = claims.get("user_metadata") or {}
    return user_metadata.get("email_verified") is True


class TokenVerifier:
    """Verifies IdP-issued access tokens and extracts the Identity."""

    def __init__(
        self,
        secret: str,
        algorithms: list[str] | None = None,
        audience: str | None = None,
        leeway: int = 0,
    ):
        self.secret = secret
        self.algorithms = algorithms or ["HS256"]
        self.audience = audience or None
        self.leeway = leeway

    def verify(self, token: str) -> Identity:
        if not token:
            raise UnauthorizedError("Unauthorized")
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                leeway=self.leeway,
                options={
                    "require": ["exp", "sub"],
                    "verify_aud": self.audience is not None,
                },
            )
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token expired")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise UnauthorizedError("Invalid token")

        sub = claims.get("sub")
        if not isinstance(sub, str) or not sub.strip():
            raise UnauthorizedError("Invalid token")

        metadata = claims.get("user_metadata")
        return Identity(
            subject_id=SubjectId(sub),
            email=str(claims.get("email") or ""),
            email_verified=_email_verified(claims),
            metadata=dict(metadata) if isinstance(metadata, dict) else {},
        )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if isinstance(body.get(key), str):
                return body[key]
    return f"HTTP {response.status_code}"


class IdentityProviderClient:
    """Async client for the identity provider's session API."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["apikey"] = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | None = None,
        json: dict | None = None,
        params: dict | None = None,
    ) -> httpx.Response:
        headers = {}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        try:
            return await self._client.request(
                method, path, json=json, params=params, headers=headers,
            )
        except httpx.TimeoutException:
            raise IdentityProviderError("request timed out")
        except httpx.HTTPError as e:
            logger.error(f"Identity provider transport error: {e}")
            raise IdentityProviderError("connection failed")

    @staticmethod
    def _json(response: httpx.Response) -> dict:
        if response.status_code == 204 or not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            raise IdentityProviderError(
                "invalid JSON response", upstream_status=response.status_code,
            )
        if not isinstance(body, dict):
            raise IdentityProviderError(
                "unexpected response shape", upstream_status=response.status_code,
            )
        return body

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code < 400:
            return
        message = _error_message(response)
        if response.status_code >= 500:
            raise IdentityProviderError(message, upstream_status=response.status_code)
        if response.status_code == 401:
            raise UnauthorizedError(message)
        if response.status_code == 409 or "already registered" in message.lower():
            raise ConflictError(message, "EMAIL_TAKEN")
        raise RequestValidationFailure(message)

    async def sign_in_with_password(self, email: str, password: str) -> dict:
        """Password grant. Bad credentials raise UnauthorizedError."""
        response = await self._request(
            "POST", "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code in (400, 401, 422):
            raise UnauthorizedError("Invalid login credentials")
        self._raise_for_status(response)
        return self._json(response)

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: dict | None = None,
        redirect_to: str | None = None,
    ) -> dict:
        """Register a new identity. Returns the user (and session when auto-confirmed)."""
        response = await self._request(
            "POST", "/signup",
            params={"redirect_to": redirect_to} if redirect_to else None,
            json={"email": email, "password": password, "data": metadata or {}},
        )
        self._raise_for_status(response)
        return self._json(response)

    async def sign_out(self, access_token: str) -> None:
        response = await self._request("POST", "/logout", access_token=access_token)
        self._raise_for_status(response)

    async def get_user(self, access_token: str) -> dict:
        response = await self._request("GET", "/user", access_token=access_token)
        self._raise_for_status(response)
        return self._json(response)

    async def update_user_metadata(self, access_token: str, data: dict) -> dict:
        """Merge `data` into the identity's user_metadata."""
        response = await self._request(
            "PUT", "/user", access_token=access_token, json={"data": data},
        )
        self._raise_for_status(response)
        return self._json(response)

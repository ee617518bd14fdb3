"""Azure AD bearer tokens: JWKS retrieval and claim validation."""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any

from fastapi import HTTPException, status
from jose import jwk, jwt
from jose.constants import Algorithms
from jose.exceptions import ExpiredSignatureError, JWSSignatureError, JWTClaimsError, JWTError

from orgchart.core.cache import TTLCache
from orgchart.models.auth import UserInfo

logger = logging.getLogger("azure_auth")

JWKS_TTL_SECONDS = 24 * 60 * 60

# Signing keys are shared across requests; stale entries back a failed refresh.
jwks_cache = TTLCache(default_ttl=JWKS_TTL_SECONDS, clock=time.time)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class TokenValidator:
    def __init__(self, tenant_id: str, client_id: str, cache: TTLCache = jwks_cache) -> None:
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.cache = cache

    @property
    def jwks_uri(self) -> str:
        return f"https://login.microsoftonline.com/{self.tenant_id}/discovery/v2.0/keys"

    @property
    def issuers(self) -> list[str]:
        return [
            f"https://login.microsoftonline.com/{self.tenant_id}/v2.0",
            f"https://sts.windows.net/{self.tenant_id}/",
        ]

    @property
    def audiences(self) -> list[str]:
        return [self.client_id, f"api://{self.client_id}"]

    def fetch_jwks(self) -> dict[str, Any]:
        logger.info("Fetching JWKS from %s", self.jwks_uri)
        req = urllib.request.Request(self.jwks_uri)  # noqa: S310
        with urllib.request.urlopen(req, timeout=15) as resp:  # noqa: S310
            return json.loads(resp.read().decode())

    def get_jwks(self) -> dict[str, Any]:
        cache_key = f"auth:jwks:{self.tenant_id}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            jwks = self.fetch_jwks()
        except (urllib.error.URLError, urllib.error.HTTPError) as e:
            logger.error("Failed to fetch JWKS: %s", e)
            stale = self.cache.get_stale(cache_key)
            if stale is not None:
                logger.warning("Using expired JWKS from cache for tenant %s", self.tenant_id)
                return stale
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Could not fetch JWKS: {e}",
            ) from e

        self.cache.set(cache_key, jwks)
        return jwks

    def signing_key(self, token: str) -> dict[str, str]:
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise _unauthorized(f"Invalid token header: {e}") from e

        kid = header.get("kid")
        if not kid:
            raise _unauthorized("Token has no 'kid' in header")

        for key in self.get_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key
        raise _unauthorized(f"No matching signing key for kid: {kid}")

    def validate(self, token: str) -> dict[str, Any]:
        """Decoded claims of a valid token; raises HTTPException otherwise."""
        if not self.tenant_id or not self.client_id:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Missing Azure AD configuration",
            )

        key = self.signing_key(token)
        algorithm = key.get("alg", Algorithms.RS256)
        public_key = jwk.construct(key, algorithm=algorithm)
        options = {
            "verify_signature": True,
            "verify_aud": True,
            "verify_iss": True,
            "verify_exp": True,
            "require": ["exp", "iss", "aud"],
        }

        last_error: Exception | None = None
        for issuer in self.issuers:
            for audience in self.audiences:
                try:
                    return jwt.decode(
                        token,
                        public_key,
                        algorithms=[algorithm],
                        audience=audience,
                        issuer=issuer,
                        options=options,
                    )
                except ExpiredSignatureError as e:
                    raise _unauthorized("Token is expired") from e
                except JWSSignatureError as e:
                    raise _unauthorized("Invalid token signature") from e
                except (JWTClaimsError, JWTError) as e:
                    last_error = e

        message = str(last_error).lower() if isinstance(last_error, JWTClaimsError) else ""
        if "audience" in message:
            raise _unauthorized(f"Invalid token audience. Expected one of: {self.audiences}")
        if "issuer" in message:
            raise _unauthorized(f"Invalid token issuer. Expected one of: {self.issuers}")
        raise _unauthorized("Invalid authentication credentials")


def extract_roles(claims: dict[str, Any]) -> list[str]:
    roles = claims.get("roles", [])
    if not isinstance(roles, list):
        return []
    return [str(r) for r in roles if isinstance(r, str | int)]


def user_from_claims(claims: dict[str, Any]) -> UserInfo:
    return UserInfo(
        id=claims.get("oid"),
        name=claims.get("name"),
        email=claims.get("preferred_username"),
        roles=extract_roles(claims),
    )

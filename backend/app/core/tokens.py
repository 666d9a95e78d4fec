"""Access tokens - HS256-signed JWTs carrying iss/sub/iat/exp"""

from datetime import timedelta
from typing import Any, Callable, Dict, Tuple
import json
import math
import time
import uuid

from jose import jws, jwt
from jose.exceptions import JOSEError
from jose.utils import base64url_decode

from app.core.exceptions import (
    ConfigurationError,
    TokenExpiredError,
    TokenMalformedError,
    TokenSignatureError,
)

DEFAULT_ISSUER = "chirpy"
SIGNING_ALGORITHM = "HS256"


def _decode_segment(segment: str) -> Any:
    return json.loads(base64url_decode(segment.encode("ascii")).decode("utf-8"))


def _split_token(token: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Parse header and claims without trusting either

    Raises:
        TokenMalformedError: If the token is not three base64url segments
            with JSON object header and claims
    """
    if not isinstance(token, str) or token.count(".") != 2:
        raise TokenMalformedError("Token must have three dot-separated segments")

    header_segment, claims_segment, signature_segment = token.split(".")
    try:
        header = _decode_segment(header_segment)
        claims = _decode_segment(claims_segment)
        base64url_decode(signature_segment.encode("ascii"))
    except (ValueError, UnicodeError) as exc:
        raise TokenMalformedError("Token segments are not base64url JSON") from exc

    if not isinstance(header, dict) or not isinstance(claims, dict):
        raise TokenMalformedError("Token header and claims must be JSON objects")
    return header, claims


class AccessTokenService:
    """
    Issue and verify stateless access tokens.

    Holds only immutable configuration, so a single instance is shared by
    every request. The verification algorithm is pinned at construction
    and the token header never chooses it.
    """

    def __init__(
        self,
        secret: str,
        issuer: str = DEFAULT_ISSUER,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ConfigurationError("Access token signing secret must not be empty")
        self._secret = secret
        self.issuer = issuer
        self.algorithm = SIGNING_ALGORITHM
        self._clock = clock

    def issue(self, user_id: uuid.UUID, ttl: timedelta) -> str:
        """
        Create a signed access token for a user

        Args:
            user_id: Token subject
            ttl: Lifetime of the token, must be positive

        Returns:
            str: Compact JWT (header.claims.signature)
        """
        if ttl.total_seconds() <= 0:
            raise ValueError("Access token ttl must be positive")

        now = self._clock()
        issued_at = int(now)
        claims = {
            "iss": self.issuer,
            "sub": str(user_id),
            "iat": issued_at,
            "exp": math.ceil(now + ttl.total_seconds()),
        }
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> uuid.UUID:
        """
        Verify an access token and return its subject

        Checks run in order: structure, algorithm, signature, expiry,
        issuer, subject.

        Raises:
            TokenMalformedError: Unparseable token or unusable claims
            TokenSignatureError: Signature does not match the secret
            TokenExpiredError: now >= exp
        """
        header, claims = _split_token(token)

        if header.get("alg") != self.algorithm:
            raise TokenMalformedError("Unexpected signing algorithm")

        try:
            jws.verify(token, self._secret, algorithms=[self.algorithm])
        except JOSEError as exc:
            raise TokenSignatureError("Token signature is invalid") from exc

        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise TokenMalformedError("Token has no numeric exp claim")
        if self._clock() >= exp:
            raise TokenExpiredError("Token has expired")

        if claims.get("iss") != self.issuer:
            raise TokenMalformedError("Unexpected token issuer")

        try:
            return uuid.UUID(str(claims.get("sub")))
        except ValueError as exc:
            raise TokenMalformedError("Token subject is not a valid user id") from exc


def make_jwt(user_id: uuid.UUID, secret: str, expires_in: timedelta) -> str:
    """Issue an access token without holding a service instance"""
    return AccessTokenService(secret).issue(user_id, expires_in)


def validate_jwt(token: str, secret: str) -> uuid.UUID:
    """Verify an access token without holding a service instance"""
    return AccessTokenService(secret).verify(token)

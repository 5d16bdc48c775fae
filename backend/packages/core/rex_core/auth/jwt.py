"""
JWT token handling.

Tokens are normally minted by the identity provider; ``create_access_token``
exists for service-to-service calls and tests that need a signed token.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel

from rex_core import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class JWTConfig:
    """JWT signing and verification settings."""

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    issuer: str = ""
    audience: str = ""
    phone_verified_claim: str = "phone_verified"


class TokenData(BaseModel):
    """Verified token claims."""

    sub: str
    type: str = "access"
    exp: datetime | None = None
    phone_verified: bool = False


def create_access_token(
    user_id: str,
    config: JWTConfig,
    token_type: str = "access",
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        user_id: Subject (identity provider uid).
        config: JWT configuration.
        token_type: Token type claim.
        extra_claims: Additional claims to embed.

    Returns:
        Encoded JWT string.
    """
    expire = datetime.now(UTC) + timedelta(minutes=config.access_token_expire_minutes)
    claims: dict[str, Any] = {"sub": user_id, "type": token_type, "exp": expire}
    if config.issuer:
        claims["iss"] = config.issuer
    if config.audience:
        claims["aud"] = config.audience
    if extra_claims:
        claims.update(extra_claims)
    return jwt.encode(claims, config.secret_key, algorithm=config.algorithm)


def verify_token(token: str, config: JWTConfig) -> TokenData | None:
    """
    Verify a token and extract its claims.

    Args:
        token: Encoded JWT.
        config: JWT configuration.

    Returns:
        Token data, or None if the token is invalid or expired.
    """
    options = {"verify_aud": bool(config.audience)}
    try:
        payload = jwt.decode(
            token,
            config.secret_key,
            algorithms=[config.algorithm],
            audience=config.audience or None,
            issuer=config.issuer or None,
            options=options,
        )
    except JWTError as e:
        logger.debug("Token verification failed", extra={"error": str(e)})
        return None

    subject = payload.get("sub")
    if not subject:
        return None

    exp = payload.get("exp")
    return TokenData(
        sub=str(subject),
        type=str(payload.get("type", "access")),
        exp=datetime.fromtimestamp(exp, UTC) if isinstance(exp, int | float) else None,
        phone_verified=bool(payload.get(config.phone_verified_claim, False)),
    )

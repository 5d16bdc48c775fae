"""
Identity provider configuration.

Rex does not issue sessions itself; bearer tokens come from the identity
provider (Clerk / Firebase Auth). This module holds the verification
settings loaded from environment variables.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Find .env file in project root
_env_file = Path(__file__).parent.parent.parent.parent.parent / ".env"


class IdentityProviderConfig(BaseSettings):
    """
    Token verification settings from environment variables.

    All settings are prefixed with AUTH_ in environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=str(_env_file) if _env_file.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer: str = ""  # Expected "iss" claim; empty disables the check
    audience: str = ""  # Expected "aud" claim; empty disables the check
    phone_verified_claim: str = "phone_verified"


# Global instance
identity_provider_config = IdentityProviderConfig()

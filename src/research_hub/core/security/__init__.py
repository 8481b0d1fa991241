"""Security utilities - crypto and validators.

Re-exports all security-related functions for convenience.
"""

from src.research_hub.core.security.crypto import (
    DUMMY_PASSWORD_HASH,
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    verify_password,
)
from src.research_hub.core.security.validators import (
    is_institutional_email,
    sanitize_filename,
    validate_username_format,
)

__all__ = [
    # Crypto
    "DUMMY_PASSWORD_HASH",
    "TokenType",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "hash_password",
    "hash_token",
    "verify_password",
    # Validators
    "is_institutional_email",
    "sanitize_filename",
    "validate_username_format",
]

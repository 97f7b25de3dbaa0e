"""
Credential primitives: bcrypt password hashing and opaque session tokens.
"""

import secrets

import bcrypt

from app.core.config import get_settings
from app.core.errors import ValidationError

SESSION_TOKEN_BYTES = 48
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValidationError(
            message="A senha informada é muito longa.",
            action=f"Utilize uma senha com no máximo {BCRYPT_MAX_BYTES} bytes.",
        )
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    encoded = password.encode("utf-8")
    if not hashed_password or len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def generate_session_token() -> str:
    """96 hex characters from a CSPRNG."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)

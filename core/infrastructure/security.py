"""
Password hashing and access tokens.

bcrypt for password hashes, python-jose for HS256 JWTs.
"""
from datetime import datetime, timedelta
from typing import Any, Dict

import bcrypt
from jose import JWTError, jwt

from core.domain.exceptions import AuthenticationError
from core.settings.sections.auth import AuthSettings


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(claims: Dict[str, Any], settings: AuthSettings) -> str:
    """
    Sign an access token.

    Args:
        claims: Token claims; must include `sub`
        settings: Auth settings (secret, algorithm, lifetime)

    Returns:
        Encoded JWT
    """
    payload = dict(claims)
    payload["exp"] = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: AuthSettings) -> Dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        AuthenticationError: If the token is invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError("Invalid or expired token") from e
    if not payload.get("sub"):
        raise AuthenticationError("Token has no subject")
    return payload

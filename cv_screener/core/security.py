import hashlib
import secrets

API_TOKEN_BYTES = 32


def generate_api_token() -> str:
    """Create a new opaque API token. Only its hash is ever stored."""
    return secrets.token_urlsafe(API_TOKEN_BYTES)


def hash_api_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

import secrets

VERIFICATION_TOKEN_BYTES = 16


def generate_verification_token() -> str:
    """Return an unguessable, URL-safe token for email verification links."""
    return secrets.token_urlsafe(VERIFICATION_TOKEN_BYTES)

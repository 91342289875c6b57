"""Request signing (HMAC-SHA256 over the exact request body)"""

import hashlib
import hmac


def sign(payload: str, secret: str) -> str:
    """
    Sign a serialized payload with the dev key

    Args:
        payload: The JSON string that will be sent, byte for byte
        secret: Developer key

    Returns:
        Lowercase hex digest (64 chars) for the Authorization header
    """
    return hmac.new(
        secret.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()

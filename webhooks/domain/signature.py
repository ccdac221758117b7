"""
Webhook signature verification.

The provider signs the raw request body with HMAC-SHA256 using the
shared signing secret and sends the hex digest in a header.
"""
import hashlib
import hmac


def generate_signature(payload: bytes, secret: str) -> str:
    """
    Generate HMAC signature for webhook payload.

    Args:
        payload: Raw request body
        secret: Webhook signing secret

    Returns:
        HMAC SHA-256 signature (hex)
    """
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    """
    Verify webhook signature in constant time.

    Args:
        payload: Raw request body
        signature: Signature sent by the provider
        secret: Webhook signing secret

    Returns:
        True if signature is valid
    """
    if not signature:
        return False
    expected_signature = generate_signature(payload, secret)
    return hmac.compare_digest(expected_signature.encode(), signature.strip().lower().encode())

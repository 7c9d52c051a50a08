"""HMAC-SHA256 signing and verification for GitHub webhook deliveries."""

import hashlib
import hmac

import structlog

logger = structlog.get_logger()

SIGNATURE_PREFIX = "sha256="


def sign_payload(body: bytes, secret: str) -> str:
    """Compute the ``X-Hub-Signature-256`` value GitHub sends for *body*."""
    digest = hmac.new(
        secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256,
    ).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Check a claimed signature against the raw request body.

    The comparison is constant-time and runs on bytes, so a header of the
    wrong length or with non-ASCII characters is simply a mismatch.

    Returns:
        True only when a secret is configured, a signature was supplied,
        and it matches ``sign_payload(body, secret)``. Never raises.
    """
    if not secret:
        logger.warning("signature_rejected", reason="secret_not_configured")
        return False
    if not signature:
        logger.warning("signature_rejected", reason="missing_signature")
        return False

    expected = sign_payload(body, secret).encode("ascii")
    if not hmac.compare_digest(expected, signature.encode("utf-8")):
        logger.warning("signature_rejected", reason="mismatch")
        return False
    return True

"""
Encryption utilities for ResellerHub
Fernet encryption for panel credentials and webhook secrets stored per reseller.
"""

import base64
import logging
import os

from cryptography.fernet import Fernet, InvalidToken
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)


def get_encryption_key() -> bytes:
    """
    Get encryption key for sensitive data.
    Uses settings.ENCRYPTION_KEY or the DJANGO_ENCRYPTION_KEY environment variable.
    """
    encryption_key = getattr(settings, "ENCRYPTION_KEY", None)

    if not encryption_key:
        encryption_key = os.environ.get("DJANGO_ENCRYPTION_KEY")

    if not encryption_key:
        raise ImproperlyConfigured(
            "DJANGO_ENCRYPTION_KEY environment variable must be set. "
            "Generate one with: from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"
        )

    if isinstance(encryption_key, str):
        encryption_key = encryption_key.encode()

    return encryption_key


def encrypt_sensitive_data(data: str) -> str:
    """
    Encrypt sensitive data (panel passwords, API keys) for database storage.

    Args:
        data: Plain text string to encrypt

    Returns:
        Base64-encoded encrypted string safe for database storage
    """
    if not data:
        return ""

    fernet = Fernet(get_encryption_key())
    encrypted_bytes = fernet.encrypt(data.encode("utf-8"))
    return base64.b64encode(encrypted_bytes).decode("utf-8")


def decrypt_sensitive_data(encrypted_data: str) -> str:
    """
    Decrypt sensitive data from database storage.

    Returns an empty string when the value cannot be decrypted, so a rotated
    key disables the affected credential instead of crashing the caller.
    """
    if not encrypted_data:
        return ""

    try:
        fernet = Fernet(get_encryption_key())
        encrypted_bytes = base64.b64decode(encrypted_data.encode("utf-8"))
        return fernet.decrypt(encrypted_bytes).decode("utf-8")
    except (InvalidToken, ValueError) as e:
        # Log error but don't expose decryption details
        logger.error(f"🔥 [Encryption] Failed to decrypt sensitive data: {type(e).__name__}")
        return ""

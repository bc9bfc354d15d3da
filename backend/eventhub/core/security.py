import hashlib
import hmac
import re
import secrets

import bcrypt

from eventhub.core.config import settings

USN_PATTERN = re.compile(r"^1BM[0-9]{2}[A-Z]{2}[0-9]{3}$")
MOBILE_PATTERN = re.compile(r"^[0-9]{10}$")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def is_valid_usn(usn: str) -> bool:
    """Check the institutional USN format, e.g. 1BM21CS001"""
    return bool(usn) and USN_PATTERN.match(usn) is not None


def is_valid_mobile(mobile: str) -> bool:
    return bool(mobile) and MOBILE_PATTERN.match(mobile) is not None


def generate_session_token() -> str:
    """Opaque session identifier carried in the session cookie"""
    return secrets.token_urlsafe(32)


def generate_reset_token() -> str:
    """Generate secure password reset token (32 random bytes, hex)"""
    return secrets.token_hex(32)


def hash_reset_token(token: str) -> str:
    """Digest stored in place of the raw reset token"""
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def compute_payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """
    Razorpay checkout signature: HMAC-SHA256 of "order_id|payment_id"
    keyed with the account's key secret, hex encoded.
    """
    message = f"{order_id}|{payment_id}"
    return hmac.new(
        secret.encode('utf-8'),
        message.encode('utf-8'),
        hashlib.sha256
    ).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """Constant-time comparison of the expected and supplied signatures"""
    if not (order_id and payment_id and signature and secret):
        return False
    expected = compute_payment_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode('utf-8'), signature.encode('utf-8'))

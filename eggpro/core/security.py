import hashlib
import hmac
import secrets

from passlib.context import CryptContext

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

OTP_LENGTH = 6


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate a hash for a plain password."""
    if isinstance(password, bytes):
        password = password.decode('utf-8')
    return pwd_context.hash(password)


def generate_otp() -> str:
    """Generate a random 6-digit OTP in the range 100000-999999."""
    return str(100000 + secrets.randbelow(900000))


def is_well_formed_otp(code: str) -> bool:
    """True when the code is exactly six ASCII digits."""
    return len(code) == OTP_LENGTH and code.isascii() and code.isdigit()


def hash_otp(code: str) -> str:
    """SHA-256 hex digest of an OTP. Only the digest is ever stored."""
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def verify_otp_hash(code: str, otp_hash: str) -> bool:
    return hmac.compare_digest(hash_otp(code), otp_hash)


def compute_payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """
    Razorpay checkout signature.

    Lowercase hex HMAC-SHA256 of "{order_id}|{payment_id}" keyed by the key secret.
    """
    payload = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    expected = compute_payment_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))

import secrets
from typing import Optional
import bcrypt

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72

def generate_invite_token(nbytes: int = 32) -> str:
    """Generate a random hex activation token"""
    return secrets.token_hex(nbytes)

def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]

def hash_password(plain_password: str) -> str:
    """Hash a plain password using bcrypt."""
    return bcrypt.hashpw(_password_bytes(plain_password), bcrypt.gensalt()).decode("utf-8")

def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(_password_bytes(plain_password), password_hash.encode("utf-8"))

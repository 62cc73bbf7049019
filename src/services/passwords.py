"""Password hashing with bcrypt."""
import bcrypt

# bcrypt only reads the first 72 bytes; newer releases reject longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with a fresh salt.

    Raises:
        ValueError: If the password is longer than MAX_PASSWORD_BYTES when encoded.
    """
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        # Never matches, even where bcrypt would silently truncate
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode())
    except ValueError:
        # Stored value is not a bcrypt hash
        return False

"""Password hashing."""
import hmac

import bcrypt

# bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    # surrogatepass: lone surrogates hash like any other code unit
    return password.encode("utf-8", "surrogatepass")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str, rounds: int = 12) -> str:
    """Hash a password."""
    return bcrypt.hashpw(
        _encode(password),
        bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


def is_bcrypt_hash(hashed_password: str) -> bool:
    return hashed_password.startswith(("$2a$", "$2b$", "$2y$"))


def legacy_checksum(password: str) -> str:
    """32-bit rolling checksum used by registries written before bcrypt.

    Iterates UTF-16 code units, computing ``h = h * 31 + unit`` in signed
    32-bit arithmetic, and renders the result as a decimal string.
    """
    data = password.encode("utf-16-le", "surrogatepass")
    value = 0
    for i in range(0, len(data), 2):
        unit = int.from_bytes(data[i:i + 2], "little")
        value = ((value << 5) - value + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return str(value)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash or a legacy checksum."""
    if is_bcrypt_hash(hashed_password):
        try:
            return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed salt in the stored hash
            return False
    return hmac.compare_digest(
        legacy_checksum(plain_password).encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def needs_rehash(hashed_password: str) -> bool:
    """True for hashes that should be replaced by bcrypt after a login."""
    return not is_bcrypt_hash(hashed_password)

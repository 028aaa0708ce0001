"""
Fixed algorithm parameters for deterministic searchable encryption.

- Only CBC based ciphers are applicable: the IV is derived, not random.
- Values must match across implementations for ciphertexts to be comparable.
- Nothing here is read from the environment.
"""

from typing import NamedTuple

CIPHER = "AES-256-CBC"
HASH = "sha256"
# Cost of the IV derivation; slows down building rainbow tables.
PBKDF2_ITERATIONS = 64000
MIN_PBKDF2_ITERATIONS = 64000
KEY_LENGTH = 32
KEY_HEX_LENGTH = KEY_LENGTH * 2
ENCODING = "base64"


class CipherSuite(NamedTuple):
    """Read-only view of the parameters above."""
    cipher: str
    hash: str
    pbkdf2_iterations: int
    key_length: int
    encoding: str


SUITE = CipherSuite(
    cipher=CIPHER,
    hash=HASH,
    pbkdf2_iterations=PBKDF2_ITERATIONS,
    key_length=KEY_LENGTH,
    encoding=ENCODING,
)

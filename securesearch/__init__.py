"""Deterministic one-way encryption of unique sensitive data for equality search."""

from .constants import (
    CIPHER,
    HASH,
    PBKDF2_ITERATIONS,
    MIN_PBKDF2_ITERATIONS,
    KEY_LENGTH,
    SUITE,
    CipherSuite,
)
from .errors import (
    SecureSearchError,
    CipherConfigurationError,
    KeyDerivationError,
    EncryptionError,
    InsufficientEntropyError,
)
from .deterministic import (
    encrypt,
    generate_key,
    key_from_hex,
    cipher_iv_length,
    derive_salt,
    derive_iv,
)
from .secret import SecretBuffer, secure_zero
from .index_backend import IndexBackend, JsonIndexBackend, SqliteIndexBackend, open_backend
from .lookup import EncryptedLookup

__all__ = [
    "CIPHER",
    "HASH",
    "PBKDF2_ITERATIONS",
    "MIN_PBKDF2_ITERATIONS",
    "KEY_LENGTH",
    "SUITE",
    "CipherSuite",
    "SecureSearchError",
    "CipherConfigurationError",
    "KeyDerivationError",
    "EncryptionError",
    "InsufficientEntropyError",
    "encrypt",
    "generate_key",
    "key_from_hex",
    "cipher_iv_length",
    "derive_salt",
    "derive_iv",
    "SecretBuffer",
    "secure_zero",
    "IndexBackend",
    "JsonIndexBackend",
    "SqliteIndexBackend",
    "open_backend",
    "EncryptedLookup",
]

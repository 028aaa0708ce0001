"""
Deterministic one-way encryption of unique sensitive data.

- Same data + same key -> same ciphertext, so encrypted records can be searched
  by equality without decrypting them.
- IV = PBKDF2-HMAC-SHA256(data, salt=hex(SHA-256(key)), 64000 rounds): derived
  only from data and key, unpredictable without the key, reproducible.
- AES-256-CBC with PKCS#7 padding; result is base64 text.
- There is no decrypt: the IV can only be recomputed from the original data.
- Salt and IV are wiped after use (best-effort, see secret.py).
"""

import base64
import binascii
import hashlib
import logging
import os
from typing import Dict, Tuple, Union

from Crypto.Cipher import AES
from Crypto.Util.Padding import pad

from .constants import (
    CIPHER,
    HASH,
    KEY_HEX_LENGTH,
    KEY_LENGTH,
    MIN_PBKDF2_ITERATIONS,
    PBKDF2_ITERATIONS,
)
from .errors import (
    CipherConfigurationError,
    EncryptionError,
    InsufficientEntropyError,
    KeyDerivationError,
)
from .secret import SecretBuffer

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray]

# cipher name -> (pycryptodome module, mode, key length)
_CIPHERS: Dict[str, Tuple[object, int, int]] = {
    "AES-256-CBC": (AES, AES.MODE_CBC, 32),
}


def _require_bytes(value: object, name: str) -> None:
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"{name} must be bytes, not {type(value).__name__}; encode it first")


def _cipher_spec(cipher: str) -> Tuple[object, int, int]:
    try:
        return _CIPHERS[cipher.upper()]
    except (KeyError, AttributeError):
        raise CipherConfigurationError(f"unsupported cipher: {cipher!r}") from None


def cipher_iv_length(cipher: str = CIPHER) -> int:
    """IV length in bytes for the named cipher (16 for AES)."""
    module, _, _ = _cipher_spec(cipher)
    return module.block_size


def derive_salt(key: BytesLike) -> bytearray:
    """
    Salt for the IV derivation: lowercase hex SHA-256 of the key, ASCII encoded.
    Anything deterministic would do; the hex form keeps ciphertexts compatible.
    Caller owns the returned buffer and should wipe it.
    """
    _require_bytes(key, "key")
    return bytearray(hashlib.new(HASH, key).hexdigest(), "ascii")


def derive_iv(
    data: BytesLike,
    salt: BytesLike,
    length: int,
    iterations: int = PBKDF2_ITERATIONS,
) -> bytearray:
    """
    Derive the IV from the data itself with PBKDF2-HMAC-SHA256.
    Raises KeyDerivationError if the parameters are rejected.
    """
    _require_bytes(data, "data")
    if iterations < MIN_PBKDF2_ITERATIONS:
        raise KeyDerivationError(
            f"PBKDF2 iterations must be at least {MIN_PBKDF2_ITERATIONS}"
        )
    try:
        return bytearray(hashlib.pbkdf2_hmac(HASH, data, salt, iterations, dklen=length))
    except (ValueError, OverflowError, TypeError) as exc:
        raise KeyDerivationError("IV derivation from data failed") from exc


def encrypt(data: BytesLike, key: BytesLike) -> str:
    """
    One-way encryption of unique sensitive data.
    data must already be in canonical byte form (e.g. b"1234567890", not 1234567890).
    Returns base64 text. Same (data, key) always gives the same result.
    """
    _require_bytes(data, "data")
    _require_bytes(key, "key")
    module, mode, key_length = _cipher_spec(CIPHER)
    iv_length = module.block_size
    if len(key) != key_length:
        raise EncryptionError(f"key must be {key_length} bytes")
    with SecretBuffer(derive_salt(key)) as salt:
        with SecretBuffer(derive_iv(data, salt, iv_length)) as iv:
            try:
                cipher = module.new(key, mode, iv=iv)
                ciphertext = cipher.encrypt(pad(data, module.block_size))
            except (ValueError, TypeError) as exc:
                raise EncryptionError("encryption of data failed") from exc
    return base64.b64encode(ciphertext).decode("ascii")


def generate_key() -> str:
    """
    Generate a new 256-bit key using os.urandom.
    Returns 64 lowercase hex characters. Never falls back to a weaker source.
    """
    try:
        raw = os.urandom(KEY_LENGTH)
    except (OSError, NotImplementedError) as exc:
        raise InsufficientEntropyError("key generation failed") from exc
    if len(raw) != KEY_LENGTH:
        raise InsufficientEntropyError("key generation failed")
    logger.debug("generated %d-byte key", KEY_LENGTH)
    return raw.hex()


def key_from_hex(text: str) -> bytes:
    """Decode a hex key as produced by generate_key. Raises ValueError if malformed."""
    text = text.strip()
    if len(text) != KEY_HEX_LENGTH:
        raise ValueError(f"key must be {KEY_HEX_LENGTH} hex characters")
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError):
        raise ValueError("key is not valid hex") from None

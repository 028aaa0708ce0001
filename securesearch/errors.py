"""Errors raised by deterministic encryption and key generation.

Messages never include plaintext, key, salt or IV.
"""


class SecureSearchError(RuntimeError):
    """Base class for all securesearch failures."""


class CipherConfigurationError(SecureSearchError):
    """Cipher or mode is not known to the crypto provider."""


class KeyDerivationError(SecureSearchError):
    """PBKDF2 rejected its parameters."""


class EncryptionError(SecureSearchError):
    """Block cipher rejected key, IV or data."""


class InsufficientEntropyError(SecureSearchError):
    """The OS random source failed; no key may be issued."""

"""
Scoped buffers for key-dependent intermediate values (salt, IV, keys).

- SecretBuffer wipes its bytearray on every exit path, including exceptions.
- Best-effort only: the interpreter may hold immutable copies (e.g. the bytes
  returned by hashlib) that cannot be overwritten.
"""

from typing import Optional, Union


def secure_zero(b: bytearray) -> None:
    """Overwrite buffer with zeros to reduce exposure of key material."""
    for i in range(len(b)):
        b[i] = 0


class SecretBuffer:
    """Context manager yielding a mutable copy of sensitive bytes."""

    def __init__(self, data: Union[bytes, bytearray, memoryview] = b""):
        # bytearrays are adopted, not copied, so the caller's buffer gets wiped
        if isinstance(data, bytearray):
            self._buf: Optional[bytearray] = data
        else:
            self._buf = bytearray(data)

    def __enter__(self) -> bytearray:
        if self._buf is None:
            raise ValueError("SecretBuffer already wiped")
        return self._buf

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __len__(self) -> int:
        return len(self._buf) if self._buf is not None else 0

    def __repr__(self) -> str:
        return f"<SecretBuffer len={len(self)}>"

    @property
    def wiped(self) -> bool:
        return self._buf is None

    def wipe(self) -> None:
        """Zero and release the buffer. Safe to call more than once."""
        if self._buf is not None:
            secure_zero(self._buf)
            self._buf = None

"""
Equality search over encrypted records.

- Data owner holds the key; the backend only sees deterministic ciphertexts.
- find(value) re-encrypts the value and looks up the ciphertext.
- Values and ciphertexts are never logged; only counts.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .deterministic import BytesLike, encrypt
from .index_backend import IndexBackend, JsonIndexBackend
from .secret import secure_zero

logger = logging.getLogger(__name__)


class EncryptedLookup:
    """
    Searchable store of record IDs keyed by encrypted values.
    Encryption runs outside the lock so lookups proceed in parallel;
    backend access and the key wipe on close are serialized.
    """

    def __init__(self, key: BytesLike, backend: Optional[IndexBackend] = None):
        self._key: Optional[bytearray] = bytearray(key)
        self._backend = backend if backend is not None else JsonIndexBackend()
        self._lock = threading.RLock()
        self._idle = threading.Condition(self._lock)
        self._active = 0

    @contextmanager
    def _using_key(self) -> Iterator[bytearray]:
        """Hold a reference to the key; close() waits until all holders are done."""
        with self._lock:
            if self._key is None:
                raise RuntimeError("lookup is closed")
            key = self._key
            self._active += 1
        try:
            yield key
        finally:
            with self._lock:
                self._active -= 1
                if not self._active:
                    self._idle.notify_all()

    def _encrypt(self, value: BytesLike) -> str:
        with self._using_key() as key:
            return encrypt(value, key)

    def add(self, record_id: str, value: BytesLike) -> str:
        """Encrypt value and index it under record_id. Returns the ciphertext."""
        ct = self._encrypt(value)
        with self._lock:
            self._backend.add(ct, [record_id])
        return ct

    def add_batch(self, records: Iterable[Tuple[str, BytesLike]]) -> Dict[str, List[str]]:
        """
        Index many (record_id, value) pairs in one backend write.
        Returns the index sent to the backend: { ciphertext: [record_id, ...] }.
        """
        index: Dict[str, List[str]] = {}
        with self._using_key() as key:
            for record_id, value in records:
                index.setdefault(encrypt(value, key), []).append(record_id)
        with self._lock:
            self._backend.add_batch(index)
        logger.info("indexed %d distinct values", len(index))
        return index

    def find(self, value: BytesLike) -> List[str]:
        """Record IDs whose value equals value. Empty list if none."""
        ct = self._encrypt(value)
        with self._lock:
            return self._backend.get(ct)

    def remove(self, record_id: str) -> None:
        with self._lock:
            self._backend.remove_record_id(record_id)

    def close(self) -> None:
        """Wipe the key once in-flight encryptions finish, then release the backend."""
        with self._lock:
            if self._key is None:
                return
            key, self._key = self._key, None
            while self._active:
                self._idle.wait()
            secure_zero(key)
            self._backend.close()

    def __enter__(self) -> "EncryptedLookup":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

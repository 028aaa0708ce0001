"""
Index storage backends for encrypted equality search: JSON file and SQLite.

- Entries map ciphertext (base64 text) -> record IDs.
- Ciphertexts are deterministic, so lookup is a plain key match; no scan needed.
- Backends never see plaintext or keys.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class IndexBackend:
    """Abstract backend for (ciphertext, record_id) entries."""

    def add(self, ciphertext: str, record_ids: List[str]) -> None:
        """Add or merge record_ids for ciphertext."""
        raise NotImplementedError

    def add_batch(self, index: Dict[str, List[str]]) -> None:
        """Add multiple ciphertext -> record_ids."""
        for ct, record_ids in index.items():
            self.add(ct, record_ids)

    def get(self, ciphertext: str) -> List[str]:
        """Record IDs stored under ciphertext, or an empty list."""
        raise NotImplementedError

    def remove_record_id(self, record_id: str) -> None:
        """Remove a record from the index (all ciphertexts that reference it)."""
        raise NotImplementedError

    def __len__(self) -> int:
        raise NotImplementedError

    def close(self) -> None:
        """Release resources."""
        pass


class JsonIndexBackend(IndexBackend):
    """In-memory dict persisted as JSON. Fine for small record sets; path=None keeps it in memory only."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else None
        self._index: Dict[str, List[str]] = {}
        if self._path is not None and self._path.exists():
            with open(self._path, "r", encoding="utf-8") as f:
                self._index = json.load(f)
            logger.debug("loaded %d index entries from %s", len(self._index), self._path)

    def _merge(self, ciphertext: str, record_ids: List[str]) -> None:
        merged = self._index.get(ciphertext, []) + list(record_ids)
        self._index[ciphertext] = list(dict.fromkeys(merged))

    def add(self, ciphertext: str, record_ids: List[str]) -> None:
        self._merge(ciphertext, record_ids)
        self._save()

    def add_batch(self, index: Dict[str, List[str]]) -> None:
        for ct, record_ids in index.items():
            self._merge(ct, record_ids)
        self._save()

    def get(self, ciphertext: str) -> List[str]:
        return list(self._index.get(ciphertext, []))

    def remove_record_id(self, record_id: str) -> None:
        for ct, record_ids in list(self._index.items()):
            remaining = [r for r in record_ids if r != record_id]
            if remaining:
                self._index[ct] = remaining
            else:
                del self._index[ct]
        self._save()

    def __len__(self) -> int:
        return len(self._index)

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(self._index, f, indent=2)


class SqliteIndexBackend(IndexBackend):
    """
    SQLite-backed index: one row per (ciphertext, record_id).
    Scales to large record sets; lookups use the ciphertext index.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._path), check_same_thread=False)
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS index_entries ("
            "ciphertext TEXT NOT NULL, record_id TEXT NOT NULL, "
            "seq INTEGER PRIMARY KEY AUTOINCREMENT, UNIQUE(ciphertext, record_id))"
        )
        self._conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_ciphertext ON index_entries(ciphertext)"
        )
        self._conn.commit()

    def _insert(self, ciphertext: str, record_ids: List[str]) -> None:
        for record_id in dict.fromkeys(record_ids):
            self._conn.execute(
                "INSERT OR IGNORE INTO index_entries (ciphertext, record_id) VALUES (?, ?)",
                (ciphertext, record_id),
            )

    def add(self, ciphertext: str, record_ids: List[str]) -> None:
        self._insert(ciphertext, record_ids)
        self._conn.commit()

    def add_batch(self, index: Dict[str, List[str]]) -> None:
        for ct, record_ids in index.items():
            self._insert(ct, record_ids)
        self._conn.commit()

    def get(self, ciphertext: str) -> List[str]:
        cur = self._conn.execute(
            "SELECT record_id FROM index_entries WHERE ciphertext = ? ORDER BY seq",
            (ciphertext,),
        )
        return [row[0] for row in cur]

    def remove_record_id(self, record_id: str) -> None:
        self._conn.execute("DELETE FROM index_entries WHERE record_id = ?", (record_id,))
        self._conn.commit()

    def __len__(self) -> int:
        cur = self._conn.execute("SELECT COUNT(DISTINCT ciphertext) FROM index_entries")
        return cur.fetchone()[0]

    def close(self) -> None:
        self._conn.close()


def open_backend(path: Path, kind: str = "sqlite") -> IndexBackend:
    """Backend by name: 'sqlite' or 'json'."""
    if kind == "sqlite":
        return SqliteIndexBackend(path)
    if kind == "json":
        return JsonIndexBackend(path)
    raise ValueError(f"unknown index backend: {kind!r}")

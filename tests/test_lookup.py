"""
Equality search over encrypted records: both index backends, persistence,
removal and key wiping on close.
"""

import binascii
import json
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from securesearch import (
    EncryptedLookup,
    JsonIndexBackend,
    SqliteIndexBackend,
    encrypt,
    open_backend,
)
from securesearch import lookup as lookup_module

KEY = binascii.unhexlify("2116d1542ad7377a9395e22c8264b480cdf843b069c391ff02183179f9ff2446")
ENCRYPTED = "RoH2Bfuob46Mn+XX5TETBg=="


@pytest.fixture(params=["json", "sqlite"])
def backend(request, tmp_path):
    b = open_backend(tmp_path / f"index.{request.param}", request.param)
    yield b
    b.close()


def test_add_returns_ciphertext(backend):
    lookup = EncryptedLookup(KEY, backend)
    assert lookup.add("rec1", b"1234567890") == ENCRYPTED
    assert backend.get(ENCRYPTED) == ["rec1"]


def test_find_equal_values_only(backend):
    lookup = EncryptedLookup(KEY, backend)
    lookup.add_batch([
        ("rec1", b"1234567890"),
        ("rec2", b"1234567891"),
        ("rec3", b"1234567890"),
    ])
    assert lookup.find(b"1234567890") == ["rec1", "rec3"]
    assert lookup.find(b"1234567891") == ["rec2"]
    assert lookup.find(b"0000000000") == []
    assert len(backend) == 2


def test_add_batch_dedupes(backend):
    lookup = EncryptedLookup(KEY, backend)
    index = lookup.add_batch([("rec1", b"a"), ("rec1", b"a")])
    lookup.add("rec1", b"a")
    assert list(index) == [encrypt(b"a", KEY)]
    assert lookup.find(b"a") == ["rec1"]


def test_remove(backend):
    lookup = EncryptedLookup(KEY, backend)
    lookup.add_batch([("rec1", b"a"), ("rec2", b"a"), ("rec1", b"b")])
    lookup.remove("rec1")
    assert lookup.find(b"a") == ["rec2"]
    assert lookup.find(b"b") == []
    assert len(backend) == 1


def test_different_key_finds_nothing(backend):
    EncryptedLookup(KEY, backend).add("rec1", b"1234567890")
    other = bytes(b ^ 0xFF for b in KEY)
    assert EncryptedLookup(other, backend).find(b"1234567890") == []


def test_json_backend_persists_ciphertext_only(tmp_path):
    path = tmp_path / "index.json"
    with EncryptedLookup(KEY, JsonIndexBackend(path)) as lookup:
        lookup.add("rec1", b"1234567890")
    text = path.read_text(encoding="utf-8")
    assert "1234567890" not in text
    assert json.loads(text) == {ENCRYPTED: ["rec1"]}
    with EncryptedLookup(KEY, JsonIndexBackend(path)) as lookup:
        assert lookup.find(b"1234567890") == ["rec1"]


def test_sqlite_backend_persists(tmp_path):
    path = tmp_path / "index.db"
    with EncryptedLookup(KEY, SqliteIndexBackend(path)) as lookup:
        lookup.add("rec1", b"1234567890")
    with EncryptedLookup(KEY, SqliteIndexBackend(path)) as lookup:
        assert lookup.find(b"1234567890") == ["rec1"]


def test_memory_backend_default():
    lookup = EncryptedLookup(KEY)
    lookup.add("rec1", b"x")
    assert lookup.find(b"x") == ["rec1"]


def test_close_wipes_key():
    lookup = EncryptedLookup(KEY)
    key_buf = lookup._key
    lookup.close()
    assert not any(key_buf)
    with pytest.raises(RuntimeError):
        lookup.find(b"x")


def test_unknown_backend(tmp_path):
    with pytest.raises(ValueError):
        open_backend(tmp_path / "x", "redis")


def test_concurrent_add_and_find(backend):
    lookup = EncryptedLookup(KEY, backend)
    values = [("rec%d" % i, b"%010d" % (i % 4)) for i in range(12)]
    with ThreadPoolExecutor(max_workers=6) as pool:
        list(pool.map(lambda rv: lookup.add(*rv), values))
    with ThreadPoolExecutor(max_workers=6) as pool:
        found = list(pool.map(lambda i: lookup.find(b"%010d" % i), range(4)))
    for i, record_ids in enumerate(found):
        assert sorted(record_ids) == sorted("rec%d" % j for j in range(12) if j % 4 == i)


def test_finds_encrypt_in_parallel(monkeypatch):
    # both finds must be inside encrypt at the same time to pass the barrier
    barrier = threading.Barrier(2, timeout=5)
    real_encrypt = lookup_module.encrypt

    def encrypt_at_barrier(value, key):
        barrier.wait()
        return real_encrypt(value, key)

    monkeypatch.setattr(lookup_module, "encrypt", encrypt_at_barrier)
    lookup = EncryptedLookup(KEY)
    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lookup.find, [b"a", b"b"]))
    assert results == [[], []]


def test_close_waits_for_key_in_use():
    lookup = EncryptedLookup(KEY)
    key_buf = lookup._key
    with lookup._using_key():
        closer = threading.Thread(target=lookup.close)
        closer.start()
        closer.join(timeout=0.2)
        assert closer.is_alive()
        assert bytes(key_buf) == KEY
    closer.join(timeout=5)
    assert not closer.is_alive()
    assert not any(key_buf)


def test_close_twice():
    lookup = EncryptedLookup(KEY)
    lookup.close()
    lookup.close()

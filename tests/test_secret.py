import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from securesearch.secret import SecretBuffer, secure_zero


def test_secure_zero():
    b = bytearray(b"secret")
    secure_zero(b)
    assert b == bytearray(6)


def test_secret_buffer_wipes_on_exit():
    sb = SecretBuffer(b"secret")
    with sb as buf:
        assert bytes(buf) == b"secret"
    assert buf == bytearray(6)
    assert sb.wiped
    assert len(sb) == 0


def test_secret_buffer_wipes_on_error():
    with pytest.raises(RuntimeError):
        with SecretBuffer(b"secret") as buf:
            raise RuntimeError("boom")
    assert not any(buf)


def test_secret_buffer_adopts_bytearray():
    original = bytearray(b"abc")
    with SecretBuffer(original):
        pass
    assert original == bytearray(3)


def test_secret_buffer_cannot_reenter():
    sb = SecretBuffer(b"x")
    sb.wipe()
    sb.wipe()
    with pytest.raises(ValueError):
        with sb:
            pass


def test_repr_hides_content():
    assert "secret" not in repr(SecretBuffer(b"secret"))

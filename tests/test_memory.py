import pytest

from rv_iss import Memory, OutOfBounds

BASE = 0x80000000
SIZE = 0x4000


@pytest.fixture
def mem():
    return Memory(BASE, SIZE)


def test_starts_zeroed(mem):
    assert mem.read_word(BASE) == 0
    assert mem.read_word(BASE + SIZE - 4) == 0


@pytest.mark.parametrize("addr", [BASE, BASE + 0x100, BASE + SIZE - 4, BASE + 3])
def test_word_round_trip(mem, addr):
    mem.write_word(addr, 0xDEADBEEF)
    assert mem.read_word(addr) == 0xDEADBEEF


def test_little_endian_layout(mem):
    mem.write_bytes(BASE, b"\x44\x33\x22\x11")
    assert mem.read_word(BASE) == 0x11223344
    mem.write_word(BASE + 8, 0xAABBCCDD)
    assert bytes(mem.data[8:12]) == b"\xdd\xcc\xbb\xaa"


def test_partial_write_keeps_neighbours(mem):
    mem.write_word(BASE, 0x11223344)
    mem.write_bytes(BASE + 1, b"\xff")
    assert mem.read_word(BASE) == 0x1122FF44
    assert len(mem.data) == SIZE


@pytest.mark.parametrize("addr", [BASE - 1, BASE - 4, 0, BASE + SIZE, BASE + SIZE - 3])
def test_read_out_of_bounds(mem, addr):
    with pytest.raises(OutOfBounds) as excinfo:
        mem.read_word(addr)
    assert excinfo.value.address == addr


def test_write_out_of_bounds(mem):
    with pytest.raises(OutOfBounds):
        mem.write_bytes(BASE - 1, b"\x00")
    with pytest.raises(OutOfBounds):
        mem.write_bytes(BASE + SIZE - 2, b"\x00\x00\x00")
    # the failed writes left nothing behind
    assert mem.data == bytearray(SIZE)


def test_contains(mem):
    assert mem.contains(BASE, SIZE)
    assert not mem.contains(BASE, SIZE + 1)
    assert not mem.contains(BASE - 1, 1)

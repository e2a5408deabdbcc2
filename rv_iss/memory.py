"""Fixed-window, byte-addressable little-endian memory"""

import struct

from .errors import OutOfBounds


class Memory:
    """Zero-filled byte store mapped at ``base``.

    Every access is bounds checked against ``[base, base + size)``; nothing
    outside the window is readable or writable. Alignment is not enforced.
    """

    def __init__(self, base: int, size: int):
        self.base = base
        self.size = size
        self.data = bytearray(size)

    def contains(self, addr: int, length: int) -> bool:
        """True if ``length`` bytes starting at ``addr`` fit in the window"""
        offset = addr - self.base
        return offset >= 0 and offset + length <= self.size

    def _offset(self, addr: int, length: int) -> int:
        if not self.contains(addr, length):
            raise OutOfBounds(addr, length)
        return addr - self.base

    def read_word(self, addr: int) -> int:
        """Read 32-bit word from memory (little-endian)"""
        offset = self._offset(addr, 4)
        return struct.unpack_from("<I", self.data, offset)[0]

    def write_bytes(self, addr: int, data: bytes):
        """Replace ``len(data)`` bytes starting at ``addr`` in place"""
        offset = self._offset(addr, len(data))
        self.data[offset:offset + len(data)] = data

    def write_word(self, addr: int, value: int):
        """Write 32-bit word to memory (little-endian)"""
        self.write_bytes(addr, struct.pack("<I", value & 0xFFFFFFFF))

"""
Program loaders. Each yields (physical address, payload) segments that are
copied into simulator memory with ExecutionEngine.write_bytes()
"""

import logging
import struct
from typing import Iterable, Iterator, Tuple

log = logging.getLogger(__name__)

Segment = Tuple[int, bytes]


def load_elf_segments(elf_file: str) -> Iterator[Segment]:
    """Yield the PT_LOAD segments of an ELF file at their physical addresses"""
    from elftools.elf.elffile import ELFFile

    with open(elf_file, 'rb') as f:
        elf = ELFFile(f)
        for segment in elf.iter_segments():
            if segment['p_type'] != 'PT_LOAD':
                continue
            data = segment.data()
            if not data:
                continue
            yield segment['p_paddr'], data


def load_hex_segments(hex_file: str, base_addr: int) -> Iterator[Segment]:
    """Load hex file as a single segment starting at base address.

    Hex file format: one 32-bit word per line (8 hex digits, no 0x prefix)
    Words are stored as little-endian bytes in memory.
    """
    words = []
    with open(hex_file, 'r') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            words.append(int(line, 16) & 0xFFFFFFFF)
    if words:
        yield base_addr, struct.pack(f"<{len(words)}I", *words)


def load_program(engine, segments: Iterable[Segment]) -> int:
    """Copy every segment into the engine's memory; returns bytes loaded"""
    total = 0
    for addr, data in segments:
        log.debug("segment 0x%08X (%d bytes)", addr, len(data))
        engine.write_bytes(addr, data)
        total += len(data)
    return total

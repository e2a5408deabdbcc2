"""RV32I architectural registers"""

from typing import List

REG_NAMES = (
    ["x0", "ra", "sp", "gp", "tp"]
    + [f"t{i}" for i in range(0, 3)]
    + ["s0", "s1"]
    + [f"a{i}" for i in range(0, 8)]
    + [f"s{i}" for i in range(2, 12)]
    + [f"t{i}" for i in range(3, 7)]
)


class RegisterFile:
    """32 RISC-V registers (x0-x31) plus the program counter"""
    def __init__(self):
        # x0 is hardwired to 0
        self.regs: List[int] = [0] * 32
        self._pc = 0

    def read(self, reg: int) -> int:
        """Read register value (x0 always returns 0)"""
        if reg == 0:
            return 0
        return self.regs[reg]

    def write(self, reg: int, value: int):
        """Write register value (x0 writes are ignored)"""
        if reg != 0:
            self.regs[reg] = value & 0xFFFFFFFF

    @property
    def pc(self) -> int:
        return self._pc

    @pc.setter
    def pc(self, value: int):
        self._pc = value & 0xFFFFFFFF

    def get_name(self, reg: int) -> str:
        """Get ABI register name"""
        return REG_NAMES[reg]

"""
RISC-V Instruction Set Simulator (RV32I)
Sequential fetch/decode/execute/writeback engine, one retired instruction
per step, with an optional execution trace
"""

import logging
import struct
from typing import List, Optional

from .alu import arith, cond
from .config import MAX_STEPS, SimConfig
from .decoder import (ALT_FUNCT7, ArithOp, Instruction, LoadOp, Opcode,
                      StoreOp, SystemOp, decode, sign_extend)
from .disasm import disassemble
from .errors import (DecodeFailure, GuestTestFailure, SimulatorError,
                     StepLimitExceeded)
from .memory import Memory
from .regfile import REG_NAMES, RegisterFile

log = logging.getLogger(__name__)

STORE_FORMATS = {
    StoreOp.SB: ("<B", 0xFF),
    StoreOp.SH: ("<H", 0xFFFF),
    StoreOp.SW: ("<I", 0xFFFFFFFF),
}


class ExecutionEngine:
    """RISC-V Instruction Set Simulator.

    Owns one RegisterFile and one Memory. A loader fills memory through
    write_bytes(), sets the entry point with set_pc(), and the driver then
    calls step() until it returns False. Every SimulatorError raised by a
    step is fatal to the run; the register dump is attached to it as
    ``state`` before it propagates.
    """

    def __init__(self, config: Optional[SimConfig] = None):
        self.config = config or SimConfig()
        # Set to a list to collect one trace line per retired instruction
        self.trace: Optional[List[str]] = None
        self.current: Optional[Instruction] = None
        self.reset()

    def reset(self):
        """Fresh zeroed registers and memory"""
        self.regs = RegisterFile()
        self.mem = Memory(self.config.mem_base, self.config.mem_size)
        self.instret = 0
        self.current = None

    def get_pc(self) -> int:
        return self.regs.pc

    def set_pc(self, addr: int):
        self.regs.pc = addr

    def write_bytes(self, addr: int, data: bytes):
        """Copy a program segment into memory"""
        self.mem.write_bytes(addr, data)

    def dump(self) -> str:
        """Format all registers and the PC, 8 registers per row"""
        lines = []
        for row in range(0, 32, 8):
            lines.append(" ".join(
                f" {REG_NAMES[i]:>3}: {self.regs.read(i):08x}" for i in range(row, row + 8)
            ))
        lines.append(f"  PC: {self.regs.pc:08x}")
        return "\n".join(lines)

    def step(self) -> bool:
        """Retire one instruction; False means the guest asked to stop"""
        pc = self.regs.pc
        self.current = None
        try:
            return self._step()
        except SimulatorError as e:
            e.state = self.dump()
            where = f" [{disassemble(self.current)}]" if self.current else ""
            log.error("%s at pc 0x%08X%s\n%s", e, pc, where, e.state)
            raise

    def run(self, max_steps: int = MAX_STEPS) -> int:
        """Step until the guest stops; returns the retired instruction count"""
        while self.step():
            if self.instret >= max_steps:
                e = StepLimitExceeded(max_steps)
                e.state = self.dump()
                log.error("%s at pc 0x%08X\n%s", e, self.regs.pc, e.state)
                raise e
        return self.instret

    def _step(self) -> bool:
        # ** Instruction fetch **
        inst = self.mem.read_word(self.regs.pc)

        # ** Instruction decode and register fetch **
        ins = decode(inst)
        self.current = ins
        vs1 = self.regs.read(ins.rs1)
        vs2 = self.regs.read(ins.rs2)
        vpc = self.regs.pc

        # register write set up
        pend = 0
        is_reg_writeback = False
        is_pend_new_pc = False
        is_load = False
        is_store = False
        resources: List[str] = []

        # ** Execute **
        opcode = ins.opcode
        if opcode == Opcode.LUI:
            pend = ins.imm_u
            is_reg_writeback = True
        elif opcode == Opcode.AUIPC:
            pend = arith(ArithOp.ADD, vpc, ins.imm_u)
            is_reg_writeback = True
        elif opcode == Opcode.JAL:
            pend = arith(ArithOp.ADD, vpc, ins.imm_j)
            is_pend_new_pc = True
            is_reg_writeback = True
        elif opcode == Opcode.JALR:
            pend = arith(ArithOp.ADD, vs1, ins.imm_i)
            is_pend_new_pc = True
            is_reg_writeback = True
        elif opcode == Opcode.BRANCH:
            pend = arith(ArithOp.ADD, vpc, ins.imm_b)
            is_pend_new_pc = cond(ins.funct3, vs1, vs2)
            resources.append(f"taken={'true' if is_pend_new_pc else 'false'}")
        elif opcode == Opcode.OP:
            pend = arith(ins.funct3, vs1, vs2, ins.funct7 == ALT_FUNCT7)
            is_reg_writeback = True
        elif opcode == Opcode.OP_IMM:
            # funct7 only selects SRAI; for every other selector it is immediate bits
            alt = ins.funct3 == ArithOp.SR and ins.funct7 == ALT_FUNCT7
            pend = arith(ins.funct3, vs1, ins.imm_i, alt)
            is_reg_writeback = True
        elif opcode == Opcode.LOAD:
            pend = arith(ArithOp.ADD, vs1, ins.imm_i)
            is_load = True
            is_reg_writeback = True
        elif opcode == Opcode.STORE:
            pend = arith(ArithOp.ADD, vs1, ins.imm_s)
            is_store = True
        elif opcode == Opcode.MISC_MEM:
            pass
        elif opcode == Opcode.SYSTEM:
            if ins.funct3 == SystemOp.CSRRW and ins.imm_i == self.config.exit_csr_immediate:
                log.debug("exit sentinel at pc 0x%08X after %d instructions", vpc, self.instret)
                self._record(vpc, ins, ["exit"])
                return False
            if ins.funct3 == SystemOp.PRIV:
                self._ecall()
        else:
            raise DecodeFailure(f"{opcode.name} is not a valid opcode class")

        # ** Memory access **
        if is_load:
            pend = self._load(ins.funct3, pend)
        elif is_store:
            resources.append(self._store(ins.funct3, pend, vs2))

        # ** Register write back **
        if is_pend_new_pc:
            if is_reg_writeback:
                self.regs.write(ins.rd, vpc + 4)
                resources.append(f"x{ins.rd}=0x{(vpc + 4) & 0xFFFFFFFF:08X}")
            self.regs.pc = pend
            resources.append(f"pc=0x{self.regs.pc:08X}")
        else:
            if is_reg_writeback:
                self.regs.write(ins.rd, pend)
                resources.append(f"x{ins.rd}=0x{pend & 0xFFFFFFFF:08X}")
            self.regs.pc = vpc + 4

        self.instret += 1
        self._record(vpc, ins, resources)
        return True

    def _load(self, func3: int, addr: int) -> int:
        try:
            func3 = LoadOp(func3)
        except ValueError:
            raise DecodeFailure(f"{func3:#05b} is not a valid load width") from None
        # narrow loads come from the enclosing word
        word = self.mem.read_word(addr)
        if func3 == LoadOp.LB:
            return sign_extend(word & 0xFF, 8)
        if func3 == LoadOp.LH:
            return sign_extend(word & 0xFFFF, 16)
        if func3 == LoadOp.LW:
            return word
        if func3 == LoadOp.LBU:
            return word & 0xFF
        return word & 0xFFFF  # LHU

    def _store(self, func3: int, addr: int, value: int) -> str:
        try:
            fmt, mask = STORE_FORMATS[StoreOp(func3)]
        except ValueError:
            raise DecodeFailure(f"{func3:#05b} is not a valid store width") from None
        self.mem.write_bytes(addr, struct.pack(fmt, value & mask))
        return f"mem[0x{addr:08X}]=0x{value & mask:08X}"

    def _ecall(self):
        report = self.regs.read(self.config.report_register)
        log.info("ecall %d", report)
        if report > self.config.failure_threshold:
            raise GuestTestFailure(report)

    def _record(self, pc: int, ins: Instruction, resources: List[str]):
        if self.trace is not None:
            self.trace.append(f"0x{pc:08X};0x{ins.word:08X};{disassemble(ins)};{';'.join(resources)}")

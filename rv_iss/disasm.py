"""Disassembler used for execution traces and fatal diagnostics"""

from .decoder import (ALT_FUNCT7, ArithOp, BranchOp, Instruction, LoadOp,
                      Opcode, StoreOp, SystemOp)


def fmt_imm(val: int) -> str:
    # Show as hex, using 8 digits for negative values
    if val < 0:
        return f"0x{val & 0xFFFFFFFF:08X}"
    return f"0x{val:X}"


def reg(index: int) -> str:
    return f"x{index}"


def mnemonic(selectors, funct3: int):
    """Lower-case selector name, or None if funct3 is not a member"""
    try:
        return selectors(funct3).name.lower()
    except ValueError:
        return None


def disassemble(ins: Instruction) -> str:
    """Disassemble instruction to assembly string"""
    opcode = ins.opcode
    rd, rs1, rs2 = reg(ins.rd), reg(ins.rs1), reg(ins.rs2)
    funct3 = ins.funct3

    if opcode == Opcode.LUI:
        return f"lui {rd},{fmt_imm((ins.imm_u >> 12) & 0xFFFFF)}"

    if opcode == Opcode.AUIPC:
        return f"auipc {rd},{fmt_imm((ins.imm_u >> 12) & 0xFFFFF)}"

    if opcode == Opcode.JAL:
        return f"jal {rd},{fmt_imm(ins.imm_j)}"

    if opcode == Opcode.JALR:
        return f"jalr {rd},{rs1},{fmt_imm(ins.imm_i)}"

    if opcode == Opcode.BRANCH:
        op = mnemonic(BranchOp, funct3)
        if op:
            return f"{op} {rs1},{rs2},{fmt_imm(ins.imm_b)}"

    if opcode == Opcode.LOAD:
        op = mnemonic(LoadOp, funct3)
        if op:
            return f"{op} {rd},{fmt_imm(ins.imm_i)}({rs1})"

    if opcode == Opcode.STORE:
        op = mnemonic(StoreOp, funct3)
        if op:
            return f"{op} {rs2},{fmt_imm(ins.imm_s)}({rs1})"

    if opcode == Opcode.OP_IMM:
        if funct3 == ArithOp.SLL:
            return f"slli {rd},{rs1},{ins.imm_i & 0x1F}"
        if funct3 == ArithOp.SR:
            op = "srai" if ins.funct7 == ALT_FUNCT7 else "srli"
            return f"{op} {rd},{rs1},{ins.imm_i & 0x1F}"
        op = "sltiu" if funct3 == ArithOp.SLTU else ArithOp(funct3).name.lower() + "i"
        return f"{op} {rd},{rs1},{fmt_imm(ins.imm_i)}"

    if opcode == Opcode.OP:
        alt = ins.funct7 == ALT_FUNCT7
        if funct3 == ArithOp.ADD:
            op = "sub" if alt else "add"
        elif funct3 == ArithOp.SR:
            op = "sra" if alt else "srl"
        else:
            op = ArithOp(funct3).name.lower()
        return f"{op} {rd},{rs1},{rs2}"

    if opcode == Opcode.SYSTEM:
        if funct3 == SystemOp.PRIV:
            if ins.imm_i == 0:
                return "ecall"
            if ins.imm_i == 1:
                return "ebreak"
        elif funct3 != 0b100:
            op = SystemOp(funct3).name.lower()
            csr = fmt_imm(ins.imm_i & 0xFFF)
            # immediate forms carry a 5-bit zimm in the rs1 field
            src = str(ins.rs1) if funct3 & 0b100 else rs1
            return f"{op} {rd},{csr},{src}"

    if opcode == Opcode.MISC_MEM:
        return "fence"

    return f"unknown(0x{ins.word:08X})"

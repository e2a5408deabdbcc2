"""
RV32I instruction decoding: opcode classes, funct3 selectors and the
five immediate encodings (I, S, B, U, J)
"""

from dataclasses import dataclass
from enum import IntEnum

from .errors import DecodeFailure

# funct7 value selecting SUB / SRA / SRAI
ALT_FUNCT7 = 0b0100000


class Opcode(IntEnum):
    LUI = 0b0110111       # load upper immediate
    AUIPC = 0b0010111     # add upper immediate to pc
    LOAD = 0b0000011
    STORE = 0b0100011
    BRANCH = 0b1100011
    JAL = 0b1101111
    JALR = 0b1100111
    OP_IMM = 0b0010011
    OP = 0b0110011
    MISC_MEM = 0b0001111  # fence
    SYSTEM = 0b1110011


class ArithOp(IntEnum):
    ADD = 0b000  # SUB with the alternate form
    SLL = 0b001
    SLT = 0b010
    SLTU = 0b011
    XOR = 0b100
    SR = 0b101   # SRL, or SRA with the alternate form
    OR = 0b110
    AND = 0b111


class BranchOp(IntEnum):
    BEQ = 0b000
    BNE = 0b001
    BLT = 0b100
    BGE = 0b101
    BLTU = 0b110
    BGEU = 0b111


class LoadOp(IntEnum):
    LB = 0b000
    LH = 0b001
    LW = 0b010
    LBU = 0b100
    LHU = 0b101


class StoreOp(IntEnum):
    SB = 0b000
    SH = 0b001
    SW = 0b010


class SystemOp(IntEnum):
    PRIV = 0b000  # ecall / ebreak
    CSRRW = 0b001
    CSRRS = 0b010
    CSRRC = 0b011
    CSRRWI = 0b101
    CSRRSI = 0b110
    CSRRCI = 0b111


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction word, immediates already sign extended"""
    word: int
    opcode: Opcode
    rd: int
    rs1: int
    rs2: int
    funct3: int
    funct7: int
    imm_i: int
    imm_s: int
    imm_b: int
    imm_u: int
    imm_j: int


def sign_extend(value: int, bits: int) -> int:
    """Sign extend a ``bits`` wide value to a Python int"""
    value &= (1 << bits) - 1
    if value >> (bits - 1):
        return value - (1 << bits)
    return value


def to_signed32(value: int) -> int:
    """Convert 32-bit unsigned value to signed integer"""
    return sign_extend(value, 32)


def decode(inst: int) -> Instruction:
    """Decode RISC-V instruction word"""
    raw_opcode = inst & 0x7F
    try:
        opcode = Opcode(raw_opcode)
    except ValueError:
        raise DecodeFailure(f"0x{raw_opcode:02X} is not a valid opcode (inst 0x{inst:08X})") from None

    imm_i = (inst >> 20) & 0xFFF

    imm_s = ((inst >> 25) & 0x7F) << 5
    imm_s |= (inst >> 7) & 0x1F

    imm_b = ((inst >> 31) & 0x1) << 12
    imm_b |= ((inst >> 7) & 0x1) << 11
    imm_b |= ((inst >> 25) & 0x3F) << 5
    imm_b |= ((inst >> 8) & 0xF) << 1

    imm_u = inst & 0xFFFFF000

    imm_j = ((inst >> 31) & 0x1) << 20
    imm_j |= ((inst >> 21) & 0x3FF) << 1
    imm_j |= ((inst >> 20) & 0x1) << 11
    imm_j |= ((inst >> 12) & 0xFF) << 12

    return Instruction(
        word=inst,
        opcode=opcode,
        rd=(inst >> 7) & 0x1F,
        rs1=(inst >> 15) & 0x1F,
        rs2=(inst >> 20) & 0x1F,
        funct3=(inst >> 12) & 0x7,
        funct7=(inst >> 25) & 0x7F,
        imm_i=sign_extend(imm_i, 12),
        imm_s=sign_extend(imm_s, 12),
        imm_b=sign_extend(imm_b, 13),
        imm_u=sign_extend(imm_u, 32),
        imm_j=sign_extend(imm_j, 21),
    )

import pytest

from rv_iss import ExecutionEngine, SimConfig

BASE = 0x80000000


def encode_r_type(funct7, rs2, rs1, funct3, rd, opcode=0x33):
    return (
        ((funct7 & 0x7f) << 25)
        | ((rs2 & 0x1f) << 20)
        | ((rs1 & 0x1f) << 15)
        | ((funct3 & 0x7) << 12)
        | ((rd & 0x1f) << 7)
        | (opcode & 0x7f)
    )


def encode_i_type(imm, rs1, funct3, rd, opcode=0x13):
    imm &= 0xfff
    return (
        (imm << 20)
        | ((rs1 & 0x1f) << 15)
        | ((funct3 & 0x7) << 12)
        | ((rd & 0x1f) << 7)
        | (opcode & 0x7f)
    )


def encode_s_type(imm, rs2, rs1, funct3, opcode=0x23):
    imm &= 0xfff
    return (
        (((imm >> 5) & 0x7f) << 25)
        | ((rs2 & 0x1f) << 20)
        | ((rs1 & 0x1f) << 15)
        | ((funct3 & 0x7) << 12)
        | ((imm & 0x1f) << 7)
        | (opcode & 0x7f)
    )


def encode_b_type(imm, rs2, rs1, funct3, opcode=0x63):
    imm &= 0x1fff
    return (
        ((imm >> 12) & 0x1) << 31
        | ((imm >> 5) & 0x3f) << 25
        | ((rs2 & 0x1f) << 20)
        | ((rs1 & 0x1f) << 15)
        | ((funct3 & 0x7) << 12)
        | ((imm >> 1) & 0xf) << 8
        | ((imm >> 11) & 0x1) << 7
        | (opcode & 0x7f)
    )


def encode_u_type(imm, rd, opcode=0x37):
    return (imm & 0xfffff000) | ((rd & 0x1f) << 7) | (opcode & 0x7f)


def encode_j_type(imm, rd, opcode=0x6f):
    imm &= 0x1fffff
    return (
        ((imm >> 20) & 0x1) << 31
        | ((imm >> 12) & 0xff) << 12
        | ((imm >> 11) & 0x1) << 20
        | ((imm >> 1) & 0x3ff) << 21
        | ((rd & 0x1f) << 7)
        | (opcode & 0x7f)
    )


def addi(rd, rs1, imm):
    return encode_i_type(imm, rs1, 0b000, rd)


# csrw 0xC00, x0 -- the end-of-test sentinel
EXIT = encode_i_type(0xC00, 0, 0b001, 0, opcode=0x73)
ECALL = 0x00000073
NOP = 0x00000013


def program(*words):
    return b"".join(w.to_bytes(4, "little") for w in words)


@pytest.fixture
def engine():
    return ExecutionEngine(SimConfig())


@pytest.fixture
def load(engine):
    """Load instruction words at the entry point and point the PC at them."""
    def _load(*words):
        engine.write_bytes(BASE, program(*words))
        engine.set_pc(BASE)
        return engine
    return _load

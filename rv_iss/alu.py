"""Arithmetic/logic unit and branch condition evaluation"""

from .decoder import ArithOp, BranchOp, to_signed32
from .errors import InvalidOperation

MASK32 = 0xFFFFFFFF


def arith(func3: int, x: int, y: int, alt: bool = False) -> int:
    """Compute an OP/OP-IMM result; ``alt`` selects SUB and SRA"""
    shamt = y & 0x1F
    if func3 == ArithOp.ADD:
        result = x - y if alt else x + y
    elif func3 == ArithOp.SLL:
        result = x << shamt
    elif func3 == ArithOp.SLT:
        result = 1 if to_signed32(x) < to_signed32(y) else 0
    elif func3 == ArithOp.SLTU:
        result = 1 if (x & MASK32) < (y & MASK32) else 0
    elif func3 == ArithOp.XOR:
        result = x ^ y
    elif func3 == ArithOp.SR:
        if alt:
            # Arithmetic right shift: shift the signed value, wrap back to 32 bits
            result = to_signed32(x) >> shamt
        else:
            result = (x & MASK32) >> shamt
    elif func3 == ArithOp.OR:
        result = x | y
    elif func3 == ArithOp.AND:
        result = x & y
    else:
        raise InvalidOperation(f"invalid arith func3: {func3:#05b}")
    return result & MASK32


def cond(func3: int, vs1: int, vs2: int) -> bool:
    """Evaluate a branch predicate on two register values"""
    if func3 == BranchOp.BEQ:
        return vs1 == vs2
    if func3 == BranchOp.BNE:
        return vs1 != vs2
    if func3 == BranchOp.BLT:
        return to_signed32(vs1) < to_signed32(vs2)
    if func3 == BranchOp.BGE:
        return to_signed32(vs1) >= to_signed32(vs2)
    if func3 == BranchOp.BLTU:
        return (vs1 & MASK32) < (vs2 & MASK32)
    if func3 == BranchOp.BGEU:
        return (vs1 & MASK32) >= (vs2 & MASK32)
    raise InvalidOperation(f"invalid branch func3: {func3:#05b}")

"""RISC-V RV32I instruction set simulator"""

from .alu import arith, cond
from .config import SimConfig
from .decoder import Instruction, Opcode, decode, sign_extend
from .disasm import disassemble
from .errors import (DecodeFailure, GuestTestFailure, InvalidOperation,
                     OutOfBounds, SimulatorError, StepLimitExceeded)
from .iss import ExecutionEngine
from .memory import Memory
from .regfile import RegisterFile

__version__ = "0.1.0"

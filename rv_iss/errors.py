"""Fatal simulation errors. Each one aborts the current run only."""

from typing import Optional


class SimulatorError(Exception):
    """Base class for every fatal simulation condition"""

    def __init__(self, message: str):
        super().__init__(message)
        # Register dump attached by the engine when the error escapes step()
        self.state: Optional[str] = None


class OutOfBounds(SimulatorError):
    """Access outside the configured memory window"""

    def __init__(self, address: int, length: int):
        super().__init__(f"access out of bounds: 0x{address & 0xFFFFFFFF:08X} (+{length})")
        self.address = address
        self.length = length


class DecodeFailure(SimulatorError):
    """Opcode or width selector not recognized"""


class InvalidOperation(SimulatorError):
    """ALU or branch selector not recognized"""


class GuestTestFailure(SimulatorError):
    """The guest program reported a failure through ecall"""

    def __init__(self, value: int):
        # riscv-tests encode the failing test number as (n << 1) | 1
        super().__init__(f"FAILURE IN TEST {value >> 1} (report=0x{value:X})")
        self.value = value


class StepLimitExceeded(SimulatorError):
    """Driver-imposed cap on retired instructions was reached"""

    def __init__(self, steps: int):
        super().__init__(f"step limit of {steps} instructions exceeded")
        self.steps = steps

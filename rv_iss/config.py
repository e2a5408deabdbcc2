"""
Simulator configuration: memory window, entry point and the guest
test-harness conventions (sentinel exit CSR write, ecall report register)
"""

from dataclasses import dataclass

# 16k at 0x80000000
MEM_BASE = 0x80000000
MEM_SIZE = 0x4000
ENTRY_POINT = 0x80000000

# csrw with this immediate (0xC00 sign-extended) ends the run
EXIT_CSR_IMMEDIATE = -1024

# ecall convention: gp holds the report, anything above 1 is a failure
REPORT_REGISTER = 3
FAILURE_THRESHOLD = 1

MAX_STEPS = 1000000


@dataclass(frozen=True)
class SimConfig:
    """Settings for one simulation instance"""
    mem_base: int = MEM_BASE
    mem_size: int = MEM_SIZE
    entry_point: int = ENTRY_POINT
    exit_csr_immediate: int = EXIT_CSR_IMMEDIATE
    report_register: int = REPORT_REGISTER
    failure_threshold: int = FAILURE_THRESHOLD

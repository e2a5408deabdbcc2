import pytest

from rv_iss import RegisterFile
from rv_iss.regfile import REG_NAMES


@pytest.mark.parametrize("value", [0, 1, 0x12345678, 0xFFFFFFFF])
def test_x0_is_hardwired_zero(value):
    regs = RegisterFile()
    regs.write(0, value)
    assert regs.read(0) == 0


def test_write_masks_to_32_bits():
    regs = RegisterFile()
    regs.write(5, 0x1_2345_6789)
    assert regs.read(5) == 0x23456789
    regs.write(6, -1)
    assert regs.read(6) == 0xFFFFFFFF


def test_fresh_file_is_zeroed():
    regs = RegisterFile()
    assert all(regs.read(i) == 0 for i in range(32))
    assert regs.pc == 0


def test_pc_is_separate_and_masked():
    regs = RegisterFile()
    regs.pc = 0x1_8000_0004
    assert regs.pc == 0x80000004
    assert all(regs.read(i) == 0 for i in range(32))


def test_abi_names():
    assert len(REG_NAMES) == 32
    regs = RegisterFile()
    assert regs.get_name(0) == "x0"
    assert regs.get_name(2) == "sp"
    assert regs.get_name(3) == "gp"
    assert regs.get_name(10) == "a0"
    assert regs.get_name(31) == "t6"

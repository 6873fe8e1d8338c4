"""
ALU Tests for the Synacor VM: modulo-32768 arithmetic and 15-bit logic.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from synacor_vm.cpu import alu


class TestArithmetic:
    def test_add_wraps(self):
        assert alu.add15(32758, 15) == 5
        assert alu.add15(1, 2) == 3

    def test_mult_wraps(self):
        assert alu.mult15(32767, 2) == 32766
        assert alu.mult15(300, 300) == 90000 % 32768

    def test_mod(self):
        assert alu.mod15(10, 3) == 1
        assert alu.mod15(3, 10) == 3

    def test_mod_by_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            alu.mod15(5, 0)


class TestLogic:
    def test_and_or(self):
        assert alu.and15(0b1100, 0b1010) == 0b1000
        assert alu.or15(0b1100, 0b1010) == 0b1110

    def test_not_is_15_bit(self):
        assert alu.not15(0) == 32767
        assert alu.not15(32767) == 0
        assert alu.not15(1) == 32766
        assert alu.not15(0x5555) == 0x2AAA


class TestCompare:
    def test_eq(self):
        assert alu.eq(5, 5) == 1
        assert alu.eq(5, 6) == 0

    def test_gt(self):
        assert alu.gt(6, 5) == 1
        assert alu.gt(5, 5) == 0
        assert alu.gt(4, 5) == 0

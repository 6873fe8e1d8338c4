"""
Console Tests for the Synacor VM: input queue and output buffer.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from synacor_vm.periph.console import Console


class TestInputQueue:
    def test_fifo_order(self):
        con = Console()
        con.push_input("ab\n")
        assert con.input_pending == 3
        assert [con.read_char() for _ in range(3)] == ['a', 'b', '\n']
        assert con.read_char() is None

    def test_pushes_append(self):
        con = Console()
        con.push_input("a")
        con.push_input("b")
        assert con.read_char() == 'a'
        assert con.read_char() == 'b'


class TestOutputBuffer:
    def test_pending_does_not_drain(self):
        con = Console()
        con.write_char('H')
        con.write_char('i')
        assert con.output_pending
        assert con.pending_output == "Hi"
        assert con.pending_output == "Hi"

    def test_drain(self):
        con = Console()
        con.write_char('x')
        assert con.drain() == "x"
        assert not con.output_pending
        assert con.drain() == ""


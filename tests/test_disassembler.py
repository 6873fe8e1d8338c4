"""
Disassembler Tests for the Synacor VM.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from synacor_vm.disassembler import Disassembler, decompile


class TestLineFormat:
    def test_add_with_registers(self):
        listing = decompile([9, 32768, 32769, 4])
        assert listing == "00000: 0009 8000 8001 0004  add r0 r1 4\n"

    def test_out_literal_annotated(self):
        line = decompile([19, 65]).rstrip("\n")
        assert line.endswith("out 65  ; 'A'")

    def test_out_newline_annotated(self):
        assert "; '\\n'" in decompile([19, 10])

    def test_out_register_not_annotated(self):
        assert ";" not in decompile([19, 32775])

    def test_invalid_operand_marked(self):
        assert "push 40000?" in decompile([2, 40000])

    def test_no_operands(self):
        assert decompile([21]).rstrip().endswith("noop")


class TestSweep:
    def test_addresses_follow_pc_delta(self):
        dis = Disassembler()
        insts = dis.disassemble([1, 32768, 5, 21, 19, 66, 0])
        assert [i.address for i in insts] == [0, 3, 4, 6]
        assert [i.mnemonic for i in insts] == ['set', 'noop', 'out', 'halt']
        assert dis.error is None

    def test_unknown_opcode_continues(self):
        lines = decompile([22, 21]).splitlines()
        assert len(lines) == 2
        assert "unknown 22" in lines[0]
        assert lines[1].startswith("00001:")

    def test_truncated_stops_with_diagnostic(self):
        lines = decompile([21, 9, 1]).splitlines()
        assert len(lines) == 2
        assert lines[-1] == "Error: unable to parse 9 at 1"

    def test_error_recorded(self):
        dis = Disassembler()
        insts = dis.disassemble([19])
        assert insts == []
        assert dis.error == "Error: unable to parse 19 at 0"

    def test_base_addr(self):
        insts = Disassembler().disassemble([21, 21], base_addr=100)
        assert insts[1].address == 101
        assert insts[1].format().startswith("00101:")

    def test_max_instructions(self):
        insts = Disassembler().disassemble([21] * 10, max_instructions=3)
        assert len(insts) == 3

    def test_decode_one(self):
        inst = Disassembler().decode_one([0, 9, 1, 2, 3], offset=1)
        assert inst.words == (9, 1, 2, 3)
        assert inst.length == 4
        assert inst.hex_str == "0009 0001 0002 0003"

    def test_empty(self):
        assert decompile([]) == ""

"""
Synacor VM - Disassembler

Linear sweep from offset 0 to the end of the given words, one line per
decoded instruction. Purely a debugging view: nothing here touches a
Machine, and decoding uses the same cpu/decoder.py the machine does.

API Usage:
    from synacor_vm.disassembler import Disassembler, decompile

    dis = Disassembler()
    for inst in dis.disassemble(words):
        print(inst.format())    # "00000: 0015                 noop"

    print(decompile(words))     # whole listing as text

Operand rendering:
  register references   r0 .. r7
  literals              decimal
  invalid (>= 32776)    raw number followed by '?'
  `out` with a literal  the character is added as a comment

Unknown opcodes are listed as one-word `unknown` lines so the sweep can
continue past data. A truncated final instruction stops the sweep with a
diagnostic line.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .cpu.decoder import OUT, UNKNOWN, decode
from .mem.memory import REGISTER_OFFSET, MEMORY_SIZE


@dataclass
class DisassembledInstruction:
    """One decoded instruction with all formatting data."""
    address: int
    words: tuple            # opcode word + operand words, raw
    mnemonic: str
    operand_str: str
    comment: str = ""

    @property
    def length(self) -> int:
        return len(self.words)

    @property
    def hex_str(self) -> str:
        """Words formatted like '0009 8000 8001 0004'."""
        return " ".join(f"{w:04X}" for w in self.words)

    def format(self, hex_width: int = 20) -> str:
        """Format as a single disassembly line."""
        asm_s = f"{self.mnemonic} {self.operand_str}".strip()
        line = f"{self.address:05d}: {self.hex_str.ljust(hex_width)} {asm_s}"
        if self.comment:
            line += f"  ; {self.comment}"
        return line


class Disassembler:
    """
    Synacor disassembler.

    Usage:
        dis = Disassembler()
        results = dis.disassemble(words)
        single  = dis.decode_one(words, offset=0)
        if dis.error:
            print(dis.error)
    """

    def __init__(self):
        # Diagnostic for the last sweep that hit a truncated instruction
        self.error: Optional[str] = None

    # ── public API ──

    def disassemble(self, words: Sequence[int], base_addr: int = 0,
                    max_instructions: int = 0) -> List[DisassembledInstruction]:
        """Disassemble a block of words. Returns list of DisassembledInstruction."""
        self.error = None
        results: List[DisassembledInstruction] = []
        offset = 0
        while offset < len(words):
            inst = self.decode_one(words, offset, base_addr + offset)
            if inst is None:
                self.error = f"Error: unable to parse {words[offset]} at {base_addr + offset}"
                break
            results.append(inst)
            offset += inst.length
            if max_instructions and len(results) >= max_instructions:
                break
        return results

    def decode_one(self, words: Sequence[int], offset: int = 0,
                   base_addr: int = 0) -> Optional[DisassembledInstruction]:
        """Decode exactly one instruction at the given offset."""
        inst = decode(words, offset)
        if inst is None:
            return None

        if inst.is_unknown:
            return DisassembledInstruction(
                address=base_addr,
                words=(inst.opcode,),
                mnemonic=UNKNOWN,
                operand_str=str(inst.opcode),
            )

        operand_str = " ".join(self._format_operand(op) for op in inst.operands)
        comment = ""
        if inst.opcode == OUT:
            comment = self._char_comment(inst.operands[0])

        return DisassembledInstruction(
            address=base_addr,
            words=(inst.opcode,) + inst.operands,
            mnemonic=inst.mnemonic,
            operand_str=operand_str,
            comment=comment,
        )

    # ── operand formatting ──

    @staticmethod
    def _format_operand(value: int) -> str:
        if value < REGISTER_OFFSET:
            return str(value)
        if value < MEMORY_SIZE:
            return f"r{value - REGISTER_OFFSET}"
        return f"{value}?"

    @staticmethod
    def _char_comment(value: int) -> str:
        if value >= REGISTER_OFFSET:
            return ""
        if value == 10:
            return "'\\n'"
        ch = chr(value)
        return repr(ch) if ch.isprintable() else ""


# ═══════════════════════════════════════════════════════════════════════
# CONVENIENCE
# ═══════════════════════════════════════════════════════════════════════

def decompile(words: Sequence[int]) -> str:
    """Full listing of ``words``, one instruction per line.

    Ends with an ``Error: unable to parse ...`` line if the sweep hit an
    instruction whose operands run past the end of ``words``.
    """
    dis = Disassembler()
    lines = [inst.format() for inst in dis.disassemble(words)]
    if dis.error:
        lines.append(dis.error)
    return "\n".join(lines) + "\n" if lines else ""

"""
Synacor VM - Opcode Decoder / Dispatch Table

This module maps opcode words to (mnemonic, operand_count) and decodes
one instruction from a window of words starting at the program counter.

Instruction encoding (all values are 16-bit little-endian words):
  word 0        opcode (0-21)
  word 1..n     operands, n fixed per opcode (0-3)

Operand words are kept raw. Each one is either a literal (< 32768) or a
register reference (32768-32775). Turning an operand into a value is the
machine's job (Memory.resolve), never the decoder's.

Decode results:
  Instruction   opcode recognised and all operand words present
  UNKNOWN       opcode outside the table; length 1, faults only when run
  None          window too short for the opcode's operands (truncated
                program, or pc ran off the end of memory)
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple


# ──────────────────────────────────────────────
# Opcode numbers
# ──────────────────────────────────────────────

HALT = 0
SET  = 1
PUSH = 2
POP  = 3
EQ   = 4
GT   = 5
JMP  = 6
JT   = 7
JF   = 8
ADD  = 9
MULT = 10
MOD  = 11
AND  = 12
OR   = 13
NOT  = 14
RMEM = 15
WMEM = 16
CALL = 17
RET  = 18
OUT  = 19
IN   = 20
NOOP = 21

UNKNOWN = 'unknown'


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: opcode -> (mnemonic, operand_count)
#
# Operand letters follow the architecture notes: <a> is the destination
# for instructions that write, <b>/<c> are sources.

OPCODES: Dict[int, Tuple[str, int]] = {
    HALT: ('halt', 0),   # stop execution
    SET:  ('set',  2),   # set register <a> to <b>
    PUSH: ('push', 1),   # push <a> onto the stack
    POP:  ('pop',  1),   # pop into <a>; empty stack = error
    EQ:   ('eq',   3),   # <a> = 1 if <b> == <c> else 0
    GT:   ('gt',   3),   # <a> = 1 if <b> > <c> else 0
    JMP:  ('jmp',  1),   # jump to <a>
    JT:   ('jt',   2),   # if <a> != 0 jump to <b>
    JF:   ('jf',   2),   # if <a> == 0 jump to <b>
    ADD:  ('add',  3),   # <a> = (<b> + <c>) mod 32768
    MULT: ('mult', 3),   # <a> = (<b> * <c>) mod 32768
    MOD:  ('mod',  3),   # <a> = <b> mod <c>
    AND:  ('and',  3),   # <a> = <b> & <c>
    OR:   ('or',   3),   # <a> = <b> | <c>
    NOT:  ('not',  2),   # <a> = 15-bit inverse of <b>
    RMEM: ('rmem', 2),   # <a> = memory[<b>]
    WMEM: ('wmem', 2),   # memory[<a>] = <b>
    CALL: ('call', 1),   # push next pc, jump to <a>
    RET:  ('ret',  0),   # pop pc; empty stack = halt
    OUT:  ('out',  1),   # write character <a> to the terminal
    IN:   ('in',   1),   # read a character into <a>
    NOOP: ('noop', 0),   # no operation
}

# Reverse lookup for tests and the disassembler
MNEMONICS: Dict[str, int] = {name: op for op, (name, _) in OPCODES.items()}


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction.

    ``operands`` holds the raw operand words exactly as they appear in
    memory. For an UNKNOWN instruction ``opcode`` is the offending word
    and ``operands`` is empty.
    """
    opcode: int
    mnemonic: str
    operands: Tuple[int, ...] = ()

    @property
    def pc_delta(self) -> int:
        """Number of words to advance pc past this instruction."""
        return 1 + len(self.operands)

    @property
    def is_unknown(self) -> bool:
        return self.mnemonic == UNKNOWN

    def __str__(self) -> str:
        if self.is_unknown:
            return f"{UNKNOWN}({self.opcode})"
        return ' '.join([self.mnemonic] + [str(op) for op in self.operands])


def operand_count(opcode: int) -> int:
    """Operand words that follow ``opcode``. Unknown opcodes take none."""
    entry = OPCODES.get(opcode)
    return entry[1] if entry else 0


def decode(words: Sequence[int], pc: int = 0) -> Optional[Instruction]:
    """Decode the instruction at ``words[pc]``.

    ``words`` is any indexable sequence with a length (a list of words or
    the machine's Memory). Returns None when ``pc`` is past the end of
    ``words`` or fewer operand words remain than the opcode needs.
    """
    if pc < 0 or pc >= len(words):
        return None

    opcode = words[pc]
    entry = OPCODES.get(opcode)
    if entry is None:
        return Instruction(opcode, UNKNOWN)

    mnemonic, count = entry
    if pc + count >= len(words):
        return None

    operands = tuple(words[pc + 1 + i] for i in range(count))
    return Instruction(opcode, mnemonic, operands)

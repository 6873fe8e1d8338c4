"""
Synacor VM - Flat Word Memory with Register Window

Memory map:
  0     - 32767   General memory (15-bit address space)
  32768 - 32775   Registers r0-r7

The registers are not a separate container: they are the top eight cells
of the same array. That keeps operand resolution a single comparison
against REGISTER_OFFSET, and lets instructions whose destination is a raw
address (pop, eq, add, in, ...) write either memory or a register without
special cases.

Cells hold raw 16-bit words. Program text uses values >= 32768 for
register operands, and rmem/wmem can copy those around, so a cell is not
limited to 15 bits. Arithmetic results are always 15-bit (see alu.py).

Writes to an address outside the array, or of a value that is not a
16-bit word, raise MachineFault so the machine can stop with a
diagnostic instead of corrupting state.
"""

from typing import Iterable, List, Union

from ..cpu.alu import WORD_LIMIT
from ..errors import MachineFault


REGISTER_OFFSET = WORD_LIMIT             # address of r0
NUM_REGISTERS   = 8
MEMORY_SIZE     = REGISTER_OFFSET + NUM_REGISTERS
CELL_MAX        = 0xFFFF


class Memory:
    """Fixed-size word memory. Size never changes after construction."""

    def __init__(self, program: Iterable[int] = ()):
        self._mem: List[int] = [0] * MEMORY_SIZE
        self.load_program(program)

    # --- Sequence protocol (read-only view used by the decoder) ---

    def __len__(self) -> int:
        return MEMORY_SIZE

    def __getitem__(self, index: Union[int, slice]):
        return self._mem[index]

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        """Read the cell at a raw address (memory or register)."""
        self._check_address(addr)
        return self._mem[addr]

    def write(self, addr: int, value: int):
        """Write a value to a raw address (memory or register)."""
        self._check_address(addr)
        if not 0 <= value <= CELL_MAX:
            raise MachineFault(f"value {value} does not fit in a 16-bit cell")
        self._mem[addr] = value

    def resolve(self, arg: int) -> int:
        """Operand value: literals evaluate to themselves, register
        references to the register contents.
        """
        if arg < REGISTER_OFFSET:
            return arg
        if arg < MEMORY_SIZE:
            return self._mem[arg]
        raise MachineFault(f"invalid operand {arg}: neither a literal nor a register")

    @staticmethod
    def is_register(addr: int) -> bool:
        return REGISTER_OFFSET <= addr < MEMORY_SIZE

    def _check_address(self, addr: int):
        if not 0 <= addr < MEMORY_SIZE:
            raise MachineFault(f"address {addr} is outside memory")

    # --- Registers ---

    @property
    def registers(self) -> List[int]:
        """Copy of r0-r7 in order."""
        return self._mem[REGISTER_OFFSET:MEMORY_SIZE]

    def display_registers(self) -> str:
        """One-line register dump for traces."""
        return ' '.join(f"r{i}={v:5d}" for i, v in enumerate(self.registers))

    # --- Bulk load ---

    def load_program(self, program: Iterable[int]):
        """Copy a program into low memory, starting at address 0.

        The rest of memory (including the registers) is zeroed, so a
        Memory that has been loaded twice holds only the second program.
        """
        words = list(program)
        if len(words) > REGISTER_OFFSET:
            raise ValueError(
                f"program is {len(words)} words; at most {REGISTER_OFFSET} fit in memory")
        for i, word in enumerate(words):
            if not 0 <= word <= CELL_MAX:
                raise ValueError(f"word {word} at offset {i} is not a 16-bit value")
        self._mem = words + [0] * (MEMORY_SIZE - len(words))

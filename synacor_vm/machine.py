"""
Synacor VM - Main Machine Class

This is the top-level class that integrates:
  - Memory + register window (mem/memory.py)
  - Opcode decoder (cpu/decoder.py)
  - ALU operations (cpu/alu.py)
  - Console input queue / output buffer (periph/console.py)

Execution model (one call to step()):
  1. Halt / Error are absorbing: return them unchanged
  2. InputNeeded: stay suspended until the input queue has data
  3. BufferedOutput: the caller has the text, carry on
  4. Decode the instruction at pc (failure -> Error)
  5. Pending output and the next instruction is not `out`:
     hand the text back as BufferedOutput, do NOT execute yet
  6. Execute; any MachineFault -> Error with a diagnostic

The machine never reads the keyboard or prints. Output comes back inside
the run state and input goes in through push_input(), so a driver (or a
test) decides when and how to talk to the user.

Run states:
  CONTINUE         mid-execution, call step() again
  BUFFERED_OUTPUT  text ready for display (payload = text)
  INPUT_NEEDED     blocked on `in` with an empty input queue
  HALT             `halt`, or `ret` on an empty stack
  ERROR            malformed / faulting instruction (payload = message)
"""

import logging
from dataclasses import dataclass
from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, List, Sequence

from .cpu import alu
from .cpu.decoder import Instruction, decode
from .errors import MachineFault
from .cpu.alu import WORD_LIMIT
from .mem.memory import Memory, MEMORY_SIZE
from .periph.console import Console

log = logging.getLogger(__name__)

# Most recent trace lines kept while tracing is on
TRACE_LIMIT = 10000


class StateKind(Enum):
    CONTINUE = 'Continue'
    BUFFERED_OUTPUT = 'BufferedOutput'
    INPUT_NEEDED = 'InputNeeded'
    HALT = 'Halt'
    ERROR = 'Error'


@dataclass(frozen=True, repr=False)
class RunState:
    """What the machine is doing after a step.

    ``payload`` carries the text of BUFFERED_OUTPUT and the message of
    ERROR; it is empty for the other kinds.
    """
    kind: StateKind
    payload: str = ''

    # --- Constructors ---

    @classmethod
    def running(cls) -> 'RunState':
        return cls(StateKind.CONTINUE)

    @classmethod
    def buffered_output(cls, text: str) -> 'RunState':
        return cls(StateKind.BUFFERED_OUTPUT, text)

    @classmethod
    def input_needed(cls) -> 'RunState':
        return cls(StateKind.INPUT_NEEDED)

    @classmethod
    def halted(cls) -> 'RunState':
        return cls(StateKind.HALT)

    @classmethod
    def error(cls, message: str) -> 'RunState':
        return cls(StateKind.ERROR, message)

    # --- Queries ---

    @property
    def is_terminal(self) -> bool:
        return self.kind in (StateKind.HALT, StateKind.ERROR)

    @property
    def text(self) -> str:
        return self.payload if self.kind is StateKind.BUFFERED_OUTPUT else ''

    @property
    def message(self) -> str:
        return self.payload if self.kind is StateKind.ERROR else ''

    def __repr__(self) -> str:
        if self.kind in (StateKind.BUFFERED_OUTPUT, StateKind.ERROR):
            return f"{self.kind.value}({self.payload!r})"
        return self.kind.value


class Machine:
    """Synacor architecture virtual machine.

    Usage:
        machine = Machine(load_program('challenge.bin'))
        state = machine.run()
        if state.kind is StateKind.BUFFERED_OUTPUT:
            print(state.text, end='')
        elif state.kind is StateKind.INPUT_NEEDED:
            machine.push_input(input() + '\\n')
    """

    def __init__(self, program: Sequence[int] = ()):
        self.memory = Memory(program)
        self.console = Console()
        self.stack: List[int] = []
        self.pc: int = 0
        self.run_state = RunState.running()

        # Instructions executed so far
        self.steps: int = 0

        # Where execute() sends pc once the handler returns
        self._next_pc: int = 0

        # Trace output
        self._trace = False
        self._trace_output: Deque[str] = deque(maxlen=TRACE_LIMIT)

        # Instruction dispatch table (built in _build_dispatch)
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> RunState:
        """Decode and execute at most one instruction."""
        state = self.run_state

        if state.is_terminal:
            return state

        if state.kind is StateKind.INPUT_NEEDED:
            if not self.console.input_pending:
                return state
            self.run_state = RunState.running()
        elif state.kind is StateKind.BUFFERED_OUTPUT:
            self.run_state = RunState.running()

        inst = decode(self.memory, self.pc)
        if inst is None:
            word = self.memory[self.pc] if 0 <= self.pc < MEMORY_SIZE else 'end of memory'
            self.run_state = RunState.error(
                f"could not parse instruction at {self.pc}: {word}")
            log.warning("%s", self.run_state.message)
            return self.run_state

        # Output stops here: deliver it before running anything else
        if inst.mnemonic != 'out' and self.console.output_pending:
            self.run_state = RunState.buffered_output(self.console.drain())
            return self.run_state

        if log.isEnabledFor(logging.DEBUG):
            log.debug("pc: %d instruction: %s", self.pc, inst)
        if self._trace:
            self._trace_output.append(
                f"{self.pc:5d}: {str(inst):24s} {self.memory.display_registers()}")

        try:
            self._execute(inst)
        except MachineFault as e:
            self.run_state = RunState.error(f"Error processing instruction: {e}, pc: {self.pc}")
            log.warning("%s", self.run_state.message)
            if self._trace:
                self._trace_output.append(f"  ERROR: {e}")
            return self.run_state

        self.steps += 1
        if self.run_state.kind is StateKind.HALT:
            log.info("halted at pc %d after %d instructions", self.pc, self.steps)
        return self.run_state

    def run(self) -> RunState:
        """Step until the machine stops being in the CONTINUE state.

        There is no step limit: a program that neither halts, prints nor
        reads loops here forever. Drivers that need a bound should call
        step() themselves.
        """
        while self.step().kind is StateKind.CONTINUE:
            pass
        return self.run_state

    # ══════════════════════════════════════════════
    # Console API
    # ══════════════════════════════════════════════

    def push_input(self, text: str):
        """Queue console input. Lines should include their newline."""
        self.console.push_input(text)

    def flush_output_buffer(self) -> str:
        """Drain and return any output not yet delivered."""
        return self.console.drain()

    @property
    def pending_output(self) -> str:
        return self.console.pending_output

    @property
    def registers(self) -> List[int]:
        """r0-r7, in order."""
        return self.memory.registers

    # ══════════════════════════════════════════════
    # Instruction execution
    # ══════════════════════════════════════════════

    def _execute(self, inst: Instruction):
        """Run one instruction handler and move pc.

        Handlers leave ``_next_pc`` alone to fall through to the next
        instruction, or overwrite it to jump / stay put. A handler that
        raises leaves pc on the faulting instruction.
        """
        if inst.is_unknown:
            raise MachineFault(f"unknown opcode {inst.opcode} at {self.pc}")
        handler = self._dispatch[inst.mnemonic]
        self._next_pc = self.pc + inst.pc_delta
        handler(*inst.operands)
        self.pc = self._next_pc

    def _val(self, arg: int) -> int:
        """Resolve an operand: literal or register contents."""
        return self.memory.resolve(arg)

    def _build_dispatch(self) -> Dict[str, Callable]:
        """Build mnemonic -> handler dispatch table."""
        return {
            # ── Control ──
            'halt': self._op_halt,
            'jmp':  self._op_jmp,
            'jt':   self._op_jt,
            'jf':   self._op_jf,
            'call': self._op_call,
            'ret':  self._op_ret,
            'noop': self._op_noop,

            # ── Registers / stack ──
            'set':  self._op_set,
            'push': self._op_push,
            'pop':  self._op_pop,

            # ── Compare ──
            'eq':   self._op_eq,
            'gt':   self._op_gt,

            # ── Arithmetic / logic ──
            'add':  self._op_add,
            'mult': self._op_mult,
            'mod':  self._op_mod,
            'and':  self._op_and,
            'or':   self._op_or,
            'not':  self._op_not,

            # ── Memory ──
            'rmem': self._op_rmem,
            'wmem': self._op_wmem,

            # ── Console ──
            'out':  self._op_out,
            'in':   self._op_in,
        }

    # ── Control handlers ──

    def _op_halt(self):
        self._next_pc = self.pc
        self.run_state = RunState.halted()

    def _op_jmp(self, a):
        self._next_pc = self._val(a)

    def _op_jt(self, a, b):
        if self._val(a) != 0:
            self._next_pc = self._val(b)

    def _op_jf(self, a, b):
        if self._val(a) == 0:
            self._next_pc = self._val(b)

    def _op_call(self, a):
        target = self._val(a)
        self.stack.append(self._next_pc)
        self._next_pc = target

    def _op_ret(self):
        if not self.stack:
            log.debug("ret with empty stack = halt")
            self._next_pc = self.pc
            self.run_state = RunState.halted()
            return
        self._next_pc = self.stack.pop()

    def _op_noop(self):
        pass

    # ── Register / stack handlers ──

    def _op_set(self, a, b):
        if not self.memory.is_register(a):
            raise MachineFault(f"set: register argument out of bounds: {a}")
        self.memory.write(a, self._val(b))

    def _op_push(self, a):
        self.stack.append(self._val(a))

    def _op_pop(self, a):
        if not self.stack:
            raise MachineFault("attempted to pop empty stack")
        self.memory.write(a, self.stack[-1])
        self.stack.pop()

    # ── Compare handlers ──

    def _op_eq(self, a, b, c):
        self.memory.write(a, alu.eq(self._val(b), self._val(c)))

    def _op_gt(self, a, b, c):
        self.memory.write(a, alu.gt(self._val(b), self._val(c)))

    # ── Arithmetic / logic handlers ──

    def _op_add(self, a, b, c):
        self.memory.write(a, alu.add15(self._val(b), self._val(c)))

    def _op_mult(self, a, b, c):
        self.memory.write(a, alu.mult15(self._val(b), self._val(c)))

    def _op_mod(self, a, b, c):
        lhs, rhs = self._val(b), self._val(c)
        if rhs == 0:
            raise MachineFault(f"mod: division by zero ({lhs} mod 0)")
        self.memory.write(a, alu.mod15(lhs, rhs))

    def _op_and(self, a, b, c):
        self.memory.write(a, alu.and15(self._val(b), self._val(c)))

    def _op_or(self, a, b, c):
        self.memory.write(a, alu.or15(self._val(b), self._val(c)))

    def _op_not(self, a, b):
        self.memory.write(a, alu.not15(self._val(b)))

    # ── Memory handlers ──

    def _op_rmem(self, a, b):
        self.memory.write(a, self.memory.read(self._val(b)))

    def _op_wmem(self, a, b):
        addr = self._val(a)
        self.memory.write(addr, self._val(b))

    # ── Console handlers ──

    def _op_out(self, a):
        value = self._val(a)
        try:
            ch = chr(value)
            ch.encode('utf-8')
        except (ValueError, UnicodeEncodeError):
            raise MachineFault(f"could not convert {value} to a character")
        self.console.write_char(ch)

    def _op_in(self, a):
        ch = self.console.read_char()
        if ch is None:
            self._next_pc = self.pc
            self.run_state = RunState.input_needed()
            return
        code = ord(ch)
        if code >= WORD_LIMIT:
            raise MachineFault(f"input character {ch!r} does not fit in a 15-bit word")
        self.memory.write(a, code)

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True, limit: int = TRACE_LIMIT):
        """Enable instruction trace logging, keeping the last ``limit`` lines."""
        self._trace = enable
        if limit != self._trace_output.maxlen:
            self._trace_output = deque(self._trace_output, maxlen=limit)

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

"""
Synacor VM
==========
A virtual machine for the Synacor challenge architecture: 15-bit words,
eight registers mapped above general memory, an unbounded stack and a
22-instruction set with character console I/O.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌───────────┐
    │ .bin     │───>│  Loader  │───>│ Machine  │<──>│  Session  │<──> terminal
    │ (words)  │    │ (words)  │    │ (states) │    │ (driver)  │
    └──────────┘    └──────────┘    └──────────┘    └───────────┘
                                                          │
                                                    ┌───────────┐
                                                    │  Replays  │
                                                    │ replay_<n>│
                                                    └───────────┘

    - loader.py:       little-endian word parsing of program binaries
    - cpu/decoder.py:  opcode table, Instruction, decode()
    - cpu/alu.py:      modulo-32768 arithmetic and 15-bit logic
    - mem/memory.py:   32768 cells + r0-r7 in one flat array
    - periph/console.py: input queue and batched output
    - machine.py:      step()/run() state machine, mnemonic dispatch
    - driver.py:       turns run states into terminal I/O
    - replay.py:       records input lines, persists/reloads replay logs
    - disassembler.py: linear-sweep listing for debugging
"""

__version__ = "0.1.0"

from .errors import SynacorError, MachineFault, LoaderError
from .cpu.decoder import Instruction, decode, OPCODES
from .mem.memory import Memory, REGISTER_OFFSET, NUM_REGISTERS, MEMORY_SIZE
from .machine import Machine, RunState, StateKind
from .loader import load_program, parse_words, words_to_bytes, DEFAULT_PROGRAM
from .replay import ReplayManager, REPLAY_SAVE_DIR
from .disassembler import Disassembler, DisassembledInstruction, decompile
from .driver import Session

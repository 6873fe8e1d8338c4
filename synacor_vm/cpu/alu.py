"""
Synacor VM - ALU Operations

All values are 15-bit words (0-32767). Every function takes already
resolved operand values and returns a word, so the result can go
straight into a register or memory cell.

Wraparound rules from the architecture notes:
  add, mult   result modulo 32768
  and, or     operands are already 15-bit; reduced mod 32768 anyway
  not         16-bit complement, then reduced mod 32768 (= 15-bit inverse)
  mod         plain remainder; divisor 0 is the caller's problem
"""

WORD_LIMIT = 32768       # exclusive upper bound of a word


def add15(a: int, b: int) -> int:
    """(a + b) mod 32768"""
    return (a + b) % WORD_LIMIT


def mult15(a: int, b: int) -> int:
    """(a * b) mod 32768. Python ints do not overflow, so no widening needed."""
    return (a * b) % WORD_LIMIT


def mod15(a: int, b: int) -> int:
    """a mod b. Raises ZeroDivisionError when b == 0."""
    return a % b


def and15(a: int, b: int) -> int:
    return (a & b) % WORD_LIMIT


def or15(a: int, b: int) -> int:
    return (a | b) % WORD_LIMIT


def not15(a: int) -> int:
    """Bitwise inverse over the full 16-bit word, reduced to 15 bits.

    not15(0) == 32767, not15(32767) == 0.
    """
    return (~a & 0xFFFF) % WORD_LIMIT


def eq(a: int, b: int) -> int:
    return 1 if a == b else 0


def gt(a: int, b: int) -> int:
    return 1 if a > b else 0
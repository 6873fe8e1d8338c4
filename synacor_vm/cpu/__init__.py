# Instruction set: opcode table / decoder and 15-bit ALU helpers

# Flat word memory with the register window at 32768-32775

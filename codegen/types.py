"""
LLVM types used by the Ore code generator.

Every Ore value is a 32-bit signed integer; comparisons produce i1.
"""
from llvmlite import ir

INT_TYPE = ir.IntType(32)
BOOL_TYPE = ir.IntType(1)

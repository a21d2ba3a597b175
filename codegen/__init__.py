"""
Ore LLVM Code Generator Package

This package generates LLVM IR from the Ore program tree.

    codegen/
    ├── __init__.py      # package exports (this file)
    ├── core.py          # CodeGenerator: module, builtins, main(), backend
    ├── context.py       # Shared compilation context (cursor, variables)
    ├── types.py         # LLVM types (i32 values, i1 comparisons)
    ├── variables.py     # Variable slots
    ├── expressions.py   # Expression generation
    ├── statements.py    # Statement generation
    └── loops.py         # while loops
"""

from codegen.core import CodeGenerator

__all__ = ['CodeGenerator']

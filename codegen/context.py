"""
Shared compilation context for the Ore code generator.

One GenerationContext exists per compilation. It owns the module under
construction, the function being filled in, and the IRBuilder whose insertion
point is the current block. Generators receive the context instead of reading
module-level state.
"""
from dataclasses import dataclass, field
from typing import Optional

from llvmlite import ir

from codegen.variables import VariableTable


@dataclass
class GenerationContext:
    """Cursor and symbol state for a single compilation"""
    module: ir.Module
    function: Optional[ir.Function] = None
    builder: Optional[ir.IRBuilder] = None
    print_number: Optional[ir.Function] = None
    variables: VariableTable = field(default_factory=VariableTable)

    @property
    def block(self) -> ir.Block:
        """The block receiving newly generated instructions"""
        return self.builder.block

    def append_block(self, name: str) -> ir.Block:
        return self.function.append_basic_block(name)

    def move_to(self, block: ir.Block):
        """Make `block` the current block"""
        self.builder.position_at_end(block)

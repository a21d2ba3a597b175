"""
Expressions Module for Ore Code Generator

Lowers a tree node in value position to an LLVM value:
- Symbols: variable reads (fresh load from the variable's slot)
- Literals: i32 constants
- Sequences: nested instructions, whose last produced value is the result
"""
import re
from typing import TYPE_CHECKING

from llvmlite import ir

from codegen.types import INT_TYPE
from errors import InternalError
from tree_nodes import Literal, Symbol, TreeNode

if TYPE_CHECKING:
    from codegen.core import CodeGenerator

# Leading integer token, the way strtoul reads it
_INT_TOKEN = re.compile(r'\s*([+-]?)(\d*)')


def literal_value(text: str) -> int:
    """Parse an integer literal and wrap it to a signed 32-bit value."""
    sign, digits = _INT_TOKEN.match(text).groups()
    value = int(digits) if digits else 0
    if sign == '-':
        value = -value
    value &= 0xFFFFFFFF
    if value & 0x80000000:
        value -= 1 << 32
    return value


class ExpressionsGenerator:
    """Generates code for Ore expressions."""

    def __init__(self, codegen: 'CodeGenerator'):
        """Initialize with reference to parent CodeGenerator instance."""
        self.codegen = codegen

    @property
    def builder(self) -> ir.IRBuilder:
        return self.codegen.context.builder

    @property
    def variables(self):
        return self.codegen.context.variables

    # ========================================================================
    # Main Expression Dispatcher
    # ========================================================================

    def generate_expression(self, node: TreeNode) -> ir.Value:
        """Generate code for a node whose value is needed."""
        if isinstance(node, Symbol):
            return self.generate_variable(node)
        if isinstance(node, Literal):
            return self.generate_literal(node)

        value, _ = self.codegen.statements.generate(node.items, 0)
        if value is None:
            raise InternalError("Instruction produces no value.")
        return value

    def generate_int(self, node: TreeNode) -> ir.Value:
        """Generate an expression that must produce an i32."""
        value = self.generate_expression(node)
        if value.type != INT_TYPE:
            raise InternalError(f"Expected i32 operand, got {value.type}.")
        return value

    def generate_slot(self, node: TreeNode) -> ir.AllocaInstr:
        """Resolve the operand of `get` to a variable slot."""
        if isinstance(node, Symbol):
            return self.variables.read(node.name)

        slot = self.generate_expression(node)
        if not isinstance(slot, ir.AllocaInstr):
            raise InternalError("Operand of 'get' is not a variable.")
        return slot

    # ========================================================================
    # Leaves
    # ========================================================================

    def generate_variable(self, node: Symbol) -> ir.Value:
        slot = self.variables.read(node.name)
        return self.builder.load(slot)

    def generate_literal(self, node: Literal) -> ir.Constant:
        return ir.Constant(INT_TYPE, literal_value(node.text))

    # ========================================================================
    # Operators
    # ========================================================================

    def generate_add(self, left: TreeNode, right: TreeNode) -> ir.Value:
        lv = self.generate_int(left)
        rv = self.generate_int(right)
        return self.builder.add(lv, rv, name="add")

    def generate_less_equal(self, left: TreeNode, right: TreeNode) -> ir.Value:
        lv = self.generate_int(left)
        rv = self.generate_int(right)
        return self.builder.icmp_signed("<=", lv, rv, name="cond")

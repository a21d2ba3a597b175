"""
Statements Module for Ore Code Generator

Every instruction is a list whose head names the operator:

    step   any number of nested statements, lowered in order
    set    ["set", name, expr]
    get    ["get", name]
    while  ["while", cond, body]
    <=     ["<=", lhs, rhs]
    +      ["+", lhs, rhs]
    print  ["print", expr]

A list without an operator head is a plain list of statements.
"""
from typing import TYPE_CHECKING, Optional, Sequence as PySequence, Tuple

from llvmlite import ir

from errors import ArgumentCountIncorrect, OreSyntaxError, UnknownOperator
from tree_nodes import Sequence, Symbol, TreeNode

if TYPE_CHECKING:
    from codegen.core import CodeGenerator

GenerateResult = Tuple[Optional[ir.Value], int]


class StatementsGenerator:
    """Generates code for Ore statements."""

    def __init__(self, codegen: 'CodeGenerator'):
        """Initialize with reference to parent CodeGenerator instance."""
        self.codegen = codegen
        self.operators = {
            "step": self.generate_step,
            "set": self.generate_set,
            "get": self.generate_get,
            "while": self.generate_while,
            "<=": self.generate_less_equal,
            "+": self.generate_add,
            "print": self.generate_print,
        }

    @property
    def builder(self) -> ir.IRBuilder:
        return self.codegen.context.builder

    @property
    def expressions(self):
        return self.codegen.expressions

    # ========================================================================
    # Main Statement Dispatcher
    # ========================================================================

    def generate(self, statements: PySequence[TreeNode],
                 position: int = 0) -> GenerateResult:
        """Lower statements[position:].

        Returns the last value produced (None if the last statement has no
        value) and the number of elements consumed.
        """
        pos = position
        value = None
        while pos < len(statements):
            node = statements[pos]
            if isinstance(node, Sequence):
                value, _ = self.generate(node.items, 0)
                pos += 1
            elif isinstance(node, Symbol):
                # Instructions are self-contained lists, so an operator can
                # only ever appear at the head
                if pos != 0:
                    raise OreSyntaxError(f"Unexpected '{node.name}'.")
                value, consumed = self.generate_instruction(statements)
                pos += consumed
            else:
                raise OreSyntaxError(f"Unexpected literal {node.text}.")
        return value, pos - position

    def generate_block(self, node: TreeNode) -> GenerateResult:
        """Lower a node that must be a list of statements (a loop body)."""
        if not isinstance(node, Sequence):
            raise OreSyntaxError("Expected a list of statements.")
        return self.generate(node.items, 0)

    def generate_instruction(self, statements: PySequence[TreeNode]) -> GenerateResult:
        op = statements[0].name
        handler = self.operators.get(op)
        if handler is None:
            raise UnknownOperator(op)
        return handler(statements)

    @staticmethod
    def _check_arity(statements: PySequence[TreeNode], count: int):
        if len(statements) != count + 1:
            raise ArgumentCountIncorrect()

    # ========================================================================
    # Operators
    # ========================================================================

    def generate_step(self, statements) -> GenerateResult:
        """Sequencing wrapper: the rest of the list is plain statements"""
        value, consumed = self.generate(statements, 1)
        return value, 1 + consumed

    def generate_set(self, statements) -> GenerateResult:
        self._check_arity(statements, 2)
        target = statements[1]
        if not isinstance(target, Symbol):
            raise OreSyntaxError("Assignment target must be a name.")

        value = self.expressions.generate_int(statements[2])
        self.codegen.context.variables.assign(self.builder, target.name, value)
        return None, len(statements)

    def generate_get(self, statements) -> GenerateResult:
        self._check_arity(statements, 1)
        slot = self.expressions.generate_slot(statements[1])
        return self.builder.load(slot), len(statements)

    def generate_while(self, statements) -> GenerateResult:
        self._check_arity(statements, 2)
        self.codegen.loops.generate_while(statements[1], statements[2])
        return None, len(statements)

    def generate_less_equal(self, statements) -> GenerateResult:
        self._check_arity(statements, 2)
        value = self.expressions.generate_less_equal(statements[1], statements[2])
        return value, len(statements)

    def generate_add(self, statements) -> GenerateResult:
        self._check_arity(statements, 2)
        value = self.expressions.generate_add(statements[1], statements[2])
        return value, len(statements)

    def generate_print(self, statements) -> GenerateResult:
        self._check_arity(statements, 1)
        value = self.expressions.generate_int(statements[1])
        self.builder.call(self.codegen.context.print_number, [value])
        return None, len(statements)

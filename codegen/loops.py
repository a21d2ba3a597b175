"""
Loop Code Generation for Ore.

`while` is the only control construct. It is lowered to three blocks:

    pre:    br while_cond
    cond:   <condition>
            br i1 %cond, while_body, while_exit
    body:   <body>
            br while_cond
    exit:   <following statements>
"""
from typing import TYPE_CHECKING

from codegen.types import BOOL_TYPE
from errors import InternalError
from tree_nodes import TreeNode

if TYPE_CHECKING:
    from codegen.core import CodeGenerator


class LoopGenerator:
    """Generates loop-related LLVM IR for the Ore compiler."""

    def __init__(self, cg: 'CodeGenerator'):
        """Initialize with reference to parent CodeGenerator instance."""
        self.cg = cg

    def generate_while(self, condition: TreeNode, body: TreeNode):
        """Generate a while loop and leave the cursor on its exit block."""
        ctx = self.cg.context
        builder = ctx.builder

        cond_block = ctx.append_block("while_cond")
        body_block = ctx.append_block("while_body")
        exit_block = ctx.append_block("while_exit")

        # Jump to condition check
        builder.branch(cond_block)

        ctx.move_to(cond_block)
        cond_val = self.cg.expressions.generate_expression(condition)
        if cond_val.type != BOOL_TYPE:
            raise InternalError("Loop condition is not a comparison.")
        # The condition may itself have moved the cursor
        builder.cbranch(cond_val, body_block, exit_block)

        ctx.move_to(body_block)
        self.cg.statements.generate_block(body)
        # Back-edge from whichever block the body finished in
        builder.branch(cond_block)

        ctx.move_to(exit_block)
        return exit_block

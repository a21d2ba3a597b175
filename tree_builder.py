"""
Ore Tree Builder

Reads the list-literal source notation (JSON arrays, strings, numbers and
booleans) and constructs the tree the code generator consumes.
"""

import json

from errors import OreSyntaxError
from tree_nodes import Literal, Sequence, Symbol, TreeNode


class TreeBuilder:
    """Converts decoded JSON values to Ore tree nodes"""

    def build(self, source: str) -> Sequence:
        """Build the program tree from source text"""
        try:
            value = json.loads(source)
            if not isinstance(value, list):
                raise OreSyntaxError("Program must be a list.")
            return self.visit(value)
        except json.JSONDecodeError as e:
            raise OreSyntaxError(f"Line {e.lineno}:{e.colno} - {e.msg}") from e
        except RecursionError as e:
            raise OreSyntaxError("Program is nested too deeply.") from e

    def visit(self, value) -> TreeNode:
        # bool is a subclass of int, so it is checked first
        if isinstance(value, bool):
            return Literal("1" if value else "0")
        if isinstance(value, list):
            return Sequence(tuple(self.visit(item) for item in value))
        if isinstance(value, str):
            return Symbol(value)
        if isinstance(value, int):
            return Literal(str(value))
        if isinstance(value, float) and value.is_integer():
            return Literal(str(int(value)))
        raise OreSyntaxError(f"Unsupported value {value!r}.")


def parse_program(source: str) -> Sequence:
    """Parse Ore source code from string."""
    return TreeBuilder().build(source)


def parse_file(source_path: str) -> Sequence:
    """Parse an Ore source file"""
    try:
        with open(source_path, 'r', encoding='utf-8') as f:
            source = f.read()
    except UnicodeDecodeError as e:
        raise OreSyntaxError(f"{source_path} is not valid UTF-8.") from e
    return parse_program(source)

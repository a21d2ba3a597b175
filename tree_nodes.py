"""
Ore Tree Node Definitions

A program is a nested list whose first element names an operator:

    ["step", ["set", "i", 1], ["print", ["get", "i"]]]

The tree has exactly three node kinds. Nodes are immutable once built.
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Sequence:
    """A bracketed list: an instruction or a list of statements"""
    items: Tuple['TreeNode', ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True)
class Symbol:
    """An operator or variable name"""
    name: str


@dataclass(frozen=True)
class Literal:
    """An integer literal, kept as its source text"""
    text: str


TreeNode = Union[Sequence, Symbol, Literal]


def format_tree(node: TreeNode, indent: int = 0) -> str:
    """Pretty print a tree (for --emit-tree)"""
    pad = "  " * indent
    if isinstance(node, Symbol):
        return f"{pad}Symbol {node.name}"
    if isinstance(node, Literal):
        return f"{pad}Literal {node.text}"
    lines = [f"{pad}Sequence"]
    for child in node.items:
        lines.append(format_tree(child, indent + 1))
    return "\n".join(lines)

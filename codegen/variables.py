"""
Variable slots for the Ore code generator.

Each variable lives in an i32 stack slot. Slots are created on first
assignment, in whichever block is current at that moment, and are reused by
every later assignment and read.
"""
from typing import Dict

from llvmlite import ir

from codegen.types import INT_TYPE
from errors import InternalError, VariableNotFound


class VariableTable:
    """Maps variable names to their alloca slots"""

    def __init__(self):
        self.slots: Dict[str, ir.AllocaInstr] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.slots

    def __len__(self) -> int:
        return len(self.slots)

    def slot_for(self, builder: ir.IRBuilder, name: str) -> ir.AllocaInstr:
        """Return the slot for `name`, allocating it at the cursor if new."""
        slot = self.slots.get(name)
        if slot is None:
            slot = builder.alloca(INT_TYPE, name=name)
            self.slots[name] = slot
        elif not isinstance(slot, ir.AllocaInstr):
            raise InternalError(f"'{name}' is not bound to a stack slot.")
        return slot

    def assign(self, builder: ir.IRBuilder, name: str, value: ir.Value):
        slot = self.slot_for(builder, name)
        builder.store(value, slot)

    def read(self, name: str) -> ir.AllocaInstr:
        try:
            return self.slots[name]
        except KeyError:
            raise VariableNotFound(name) from None

"""
In-process tests for the code generator: module layout, variable slots,
literal handling and determinism.
"""

import pytest
from llvmlite import ir

from codegen import CodeGenerator
from codegen.expressions import literal_value
from codegen.variables import VariableTable
from errors import VariableNotFound
from tree_builder import parse_program


def generate(source: str) -> CodeGenerator:
    codegen = CodeGenerator()
    codegen.generate(parse_program(source))
    return codegen


def opnames(block: ir.Block):
    return [i.opname for i in block.instructions]


class TestModuleLayout:

    def test_functions(self):
        codegen = generate('["print", 1]')
        names = [f.name for f in codegen.module.functions]
        assert names == ["printf", "fflush", "print_number", "main"]

    def test_print_number_helper(self):
        codegen = generate('[]')
        helper = codegen.module.get_global("print_number")
        assert helper.function_type.return_type == ir.VoidType()
        assert helper.function_type.args == (ir.IntType(32),)
        assert opnames(helper.blocks[0]) == ["bitcast", "call", "call", "ret void"]

    def test_main_signature(self):
        codegen = generate('[]')
        main = codegen.module.get_global("main")
        assert main.function_type.return_type == ir.IntType(32)
        assert main.function_type.args == ()

    def test_empty_program_returns_zero(self):
        codegen = generate('[]')
        entry = codegen.context.function.blocks[0]
        assert opnames(entry) == ["ret"]
        assert entry.terminator.operands[0].constant == 0

    def test_generated_module_verifies(self):
        codegen = generate('["step", ["set", "x", 1], ["print", ["get", "x"]]]')
        codegen.verify()

    def test_generator_is_single_use(self):
        codegen = generate('[]')
        with pytest.raises(Exception):
            codegen.generate(parse_program('[]'))


class TestDeterminism:

    @pytest.mark.parametrize("source", [
        '["print", 1]',
        '["step", ["set", "i", 1], ["while", ["<=", ["get", "i"], 3],'
        ' ["set", "i", ["+", ["get", "i"], 1]]]]',
    ])
    def test_same_program_same_ir(self, generate_ir, source):
        assert generate_ir(source) == generate_ir(source)


class TestStoreLoad:

    def test_get_loads_the_stored_slot(self):
        codegen = generate('["step", ["set", "x", 7], ["print", ["get", "x"]]]')
        entry = codegen.context.function.blocks[0]
        alloca, store, load, call, ret = entry.instructions

        assert alloca.opname == "alloca"
        assert store.operands[0].constant == 7
        assert store.operands[1] is alloca
        assert load.operands[0] is alloca
        assert call.operands[-1] is load

    def test_slot_reused_on_reassignment(self):
        codegen = generate('["step", ["set", "x", 1], ["set", "x", 2]]')
        entry = codegen.context.function.blocks[0]
        assert opnames(entry) == ["alloca", "store", "store", "ret"]

    def test_each_read_is_a_fresh_load(self):
        codegen = generate('["step", ["set", "x", 1], ["print", "x"], ["print", "x"]]')
        entry = codegen.context.function.blocks[0]
        assert opnames(entry).count("load") == 2

    def test_slot_allocated_in_current_block(self):
        codegen = generate('''
["step",
  ["set", "i", 0],
  ["while", ["<=", ["get", "i"], 0],
    ["step", ["set", "t", 1], ["set", "i", 1]]]]
''')
        body = codegen.context.function.blocks[2]
        assert body.name == "while_body"
        assert opnames(body)[:2] == ["alloca", "store"]
        assert codegen.context.variables.read("t") is body.instructions[0]


class TestVariableTable:

    def setup_method(self):
        module = ir.Module(name="test")
        func = ir.Function(module, ir.FunctionType(ir.VoidType(), []), name="f")
        self.block = func.append_basic_block("entry")
        self.builder = ir.IRBuilder(self.block)
        self.table = VariableTable()

    def test_read_unknown(self):
        with pytest.raises(VariableNotFound):
            self.table.read("x")

    def test_assign_allocates_once(self):
        one = ir.Constant(ir.IntType(32), 1)
        self.table.assign(self.builder, "x", one)
        self.table.assign(self.builder, "x", one)
        assert len(self.table) == 1
        assert "x" in self.table
        assert [i.opname for i in self.block.instructions] == ["alloca", "store", "store"]

    def test_slot_for_returns_existing(self):
        first = self.table.slot_for(self.builder, "x")
        assert self.table.slot_for(self.builder, "x") is first
        assert self.table.read("x") is first
        assert first.name == "x"
        assert isinstance(first, ir.AllocaInstr)


class TestLiteralValue:

    @pytest.mark.parametrize("text, expected", [
        ("0", 0),
        ("10", 10),
        ("2147483647", 2147483647),
        ("2147483648", -2147483648),
        ("4294967295", -1),
        ("4294967296", 0),
        ("-5", -5),
        ("+3", 3),
        ("", 0),
    ])
    def test_wraps_to_i32(self, text, expected):
        assert literal_value(text) == expected

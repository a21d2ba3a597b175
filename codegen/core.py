"""
Ore LLVM Code Generator

Generates LLVM IR from an Ore program tree using llvmlite.
"""

import ctypes

from llvmlite import ir, binding

from codegen.context import GenerationContext
from codegen.types import INT_TYPE
from codegen.expressions import ExpressionsGenerator
from codegen.loops import LoopGenerator
from codegen.statements import StatementsGenerator
from errors import InternalError, OreSyntaxError
from tree_nodes import Sequence

try:
    binding.initialize()
except RuntimeError:
    # Newer llvmlite versions don't need explicit initialization
    pass
binding.initialize_native_target()
binding.initialize_native_asmprinter()


class CodeGenerator:
    """Generates LLVM IR from an Ore program tree"""

    def __init__(self):
        # Create module
        module = ir.Module(name="ore_module")
        module.triple = binding.get_default_triple()
        self.context = GenerationContext(module=module)

        self.expressions = ExpressionsGenerator(self)
        self.statements = StatementsGenerator(self)
        self.loops = LoopGenerator(self)

        # Declare external functions
        self._declare_builtins()

    @property
    def module(self) -> ir.Module:
        return self.context.module

    def _declare_builtins(self):
        """Declare built-in functions"""
        # printf
        printf_ty = ir.FunctionType(ir.IntType(32), [ir.IntType(8).as_pointer()], var_arg=True)
        self.printf = ir.Function(self.module, printf_ty, name="printf")

        # fflush for output synchronization (NULL argument flushes all output streams)
        fflush_ty = ir.FunctionType(ir.IntType(32), [ir.IntType(8).as_pointer()])
        self.fflush = ir.Function(self.module, fflush_ty, name="fflush")

        self._int_fmt = self._create_global_string("%d\n", "int_fmt")
        self.context.print_number = self._create_print_number()

    def _create_global_string(self, value: str, name: str) -> ir.GlobalVariable:
        """Create a global string constant"""
        value_bytes = bytearray((value + "\0").encode("utf8"))
        str_type = ir.ArrayType(ir.IntType(8), len(value_bytes))
        global_str = ir.GlobalVariable(self.module, str_type, name=name)
        global_str.global_constant = True
        global_str.linkage = 'private'
        global_str.initializer = ir.Constant(str_type, value_bytes)
        return global_str

    def _create_print_number(self) -> ir.Function:
        """Define print_number(i32): prints the integer and a newline."""
        func_ty = ir.FunctionType(ir.VoidType(), [INT_TYPE])
        func = ir.Function(self.module, func_ty, name="print_number")
        func.args[0].name = "n"

        builder = ir.IRBuilder(func.append_basic_block("entry"))
        fmt_ptr = builder.bitcast(self._int_fmt, ir.IntType(8).as_pointer())
        builder.call(self.printf, [fmt_ptr, func.args[0]])

        # Flush stdout to ensure output appears in correct order
        null_ptr = ir.Constant(ir.IntType(8).as_pointer(), None)
        builder.call(self.fflush, [null_ptr])
        builder.ret_void()
        return func

    def generate(self, program: Sequence) -> str:
        """Generate LLVM IR for entire program"""
        ctx = self.context
        if ctx.function is not None:
            raise InternalError("CodeGenerator instances compile one program.")

        # main() -> i32
        main_ty = ir.FunctionType(INT_TYPE, [])
        ctx.function = ir.Function(self.module, main_ty, name="main")
        ctx.builder = ir.IRBuilder(ctx.function.append_basic_block("entry"))

        try:
            self.statements.generate(program.items, 0)
        except RecursionError as e:
            raise OreSyntaxError("Program is nested too deeply.") from e

        # return 0 from wherever the program finished
        ctx.builder.ret(ir.Constant(INT_TYPE, 0))

        return self.get_ir()

    def get_ir(self) -> str:
        """Get LLVM IR as string"""
        return str(self.module)

    # ========================================================================
    # Backend
    # ========================================================================

    def verify(self) -> binding.ModuleRef:
        """Parse and verify the generated module"""
        try:
            mod = binding.parse_assembly(self.get_ir())
            mod.verify()
        except RuntimeError as e:
            # Verifier output spans several lines; errors are reported on one
            detail = " ".join(str(e).split())
            raise InternalError(f"LLVM IR error: {detail}") from e
        return mod

    def compile_to_object(self, output_path: str):
        """Compile module to object file"""
        mod = self.verify()

        target = binding.Target.from_default_triple()
        target_machine = target.create_target_machine()

        with open(output_path, "wb") as f:
            f.write(target_machine.emit_object(mod))

    def run(self) -> int:
        """JIT-compile the module and call main()"""
        mod = self.verify()

        target_machine = binding.Target.from_default_triple().create_target_machine()
        engine = binding.create_mcjit_compiler(mod, target_machine)
        engine.finalize_object()
        engine.run_static_constructors()

        func_ptr = engine.get_function_address("main")
        main = ctypes.CFUNCTYPE(ctypes.c_int32)(func_ptr)
        return main()

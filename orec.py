#!/usr/bin/env python3
"""
Ore Compiler

Usage:
    python orec.py [source_file] [-o output] [--emit-ir] [--emit-tree] [--run]

Examples:
    python orec.py                          # Print LLVM IR for the built-in sample
    python orec.py sum.ore                  # Print LLVM IR
    python orec.py sum.ore -o sum.ll        # Write LLVM IR to sum.ll
    python orec.py sum.ore -o sum.o         # Produces sum.o (object file only)
    python orec.py sum.ore -o sum           # Produces sum (linked executable)
    python orec.py sum.ore --run            # JIT-compile and run main()
    cat sum.ore | python orec.py -          # Read the program from stdin
"""

import sys
import os
import argparse
import subprocess

from codegen import CodeGenerator
from errors import OreError, OreSyntaxError
from tree_builder import parse_file, parse_program
from tree_nodes import format_tree

# Sum of 1..10, prints 55
SAMPLE_PROGRAM = """
["step",
  ["set", "sum", 0 ],
  ["set", "i", 1 ],
  ["while", ["<=", ["get", "i"], 10],
    ["step",
      ["set", "sum", ["+", ["get", "sum"], ["get", "i"]]],
      ["set", "i", ["+", ["get", "i"], 1]]]],
  ["print", ["get", "sum"]]]
"""


def log(verbose: bool, msg: str):
    if verbose:
        print(msg, file=sys.stderr)


def load_program(source_path: str = None, verbose: bool = False):
    """Parse the program from a file, stdin ('-'), or the built-in sample"""
    if source_path is None:
        log(verbose, "Parsing built-in sample...")
        return parse_program(SAMPLE_PROGRAM)
    if source_path == "-":
        log(verbose, "Parsing <stdin>...")
        try:
            source = sys.stdin.read()
        except UnicodeDecodeError as e:
            raise OreSyntaxError("<stdin> is not valid UTF-8.") from e
        return parse_program(source)
    log(verbose, f"Parsing {source_path}...")
    return parse_file(source_path)


def link_executable(obj_path: str, exe_path: str):
    """Link an object file with clang"""
    result = subprocess.run(
        ["clang", obj_path, "-o", exe_path],
        capture_output=True,
        text=True
    )
    if result.returncode != 0:
        raise OreError(f"Linking failed: {result.stderr.strip()}")


def compile_ore(source_path: str = None, output_path: str = None,
                emit_ir: bool = False, emit_tree: bool = False,
                verify: bool = False, run: bool = False,
                verbose: bool = False) -> int:
    """
    Compile an Ore program.

    Args:
        source_path: Path to the source file, '-' for stdin, None for the sample
        output_path: .ll for IR text, .o for an object file, else an executable
        emit_ir: Print LLVM IR to stdout
        emit_tree: Print the parsed tree instead of compiling
        verify: Run the LLVM verifier on the generated module
        run: JIT-compile and execute main()

    Returns the exit status for the process.
    """
    program = load_program(source_path, verbose)

    if emit_tree:
        print(format_tree(program))
        return 0

    log(verbose, "Generating LLVM IR...")
    codegen = CodeGenerator()
    llvm_ir = codegen.generate(program)

    if verify:
        log(verbose, "Verifying module...")
        codegen.verify()

    if emit_ir or (output_path is None and not run):
        sys.stdout.write(llvm_ir)
        sys.stdout.flush()

    if output_path is not None:
        if output_path.endswith(".ll"):
            log(verbose, f"Writing {output_path}...")
            with open(output_path, "w") as f:
                f.write(llvm_ir)
        else:
            obj_path = output_path if output_path.endswith(".o") else output_path + ".o"
            log(verbose, f"Compiling to {obj_path}...")
            codegen.compile_to_object(obj_path)

            if not output_path.endswith(".o"):
                log(verbose, f"Linking to {output_path}...")
                try:
                    link_executable(obj_path, output_path)
                finally:
                    # Clean up object file
                    os.remove(obj_path)

    if run:
        log(verbose, "Running main()...")
        return codegen.run()
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Ore Compiler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                        Print LLVM IR for the built-in sample
  %(prog)s sum.ore                Print LLVM IR
  %(prog)s sum.ore -o sum.ll      Write LLVM IR to sum.ll
  %(prog)s sum.ore -o sum.o       Compile to sum.o (object only)
  %(prog)s sum.ore -o sum         Compile and link to sum
  %(prog)s sum.ore --run          JIT-compile and run
        """
    )

    parser.add_argument("source", nargs="?",
                        help="Source file ('-' for stdin, omit for the built-in sample)")
    parser.add_argument("-o", "--output", help="Output file (.ll, .o, or executable)")
    parser.add_argument("--emit-ir", action="store_true",
                        help="Print LLVM IR to stdout")
    parser.add_argument("--emit-tree", action="store_true",
                        help="Print the parsed tree to stdout")
    parser.add_argument("--verify", action="store_true",
                        help="Run the LLVM verifier on the generated module")
    parser.add_argument("--run", action="store_true",
                        help="JIT-compile and execute main()")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print progress messages to stderr")

    args = parser.parse_args()

    try:
        status = compile_ore(
            args.source,
            args.output,
            emit_ir=args.emit_ir,
            emit_tree=args.emit_tree,
            verify=args.verify,
            run=args.run,
            verbose=args.verbose
        )
    except OreError as e:
        print(f"error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Internal compiler error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(2)
    sys.exit(status)


if __name__ == "__main__":
    main()

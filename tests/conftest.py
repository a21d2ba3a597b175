"""
Pytest configuration and fixtures for Ore compiler tests.

Provides reusable fixtures for:
- Compiling and running Ore programs through the orec.py command line
- Verifying expected output
- Checking compilation errors
- Generating IR in-process
"""

import pytest
import subprocess
import tempfile
import os
import sys
from pathlib import Path

from codegen import CodeGenerator
from tree_builder import parse_program


class CompilerResult:
    """Result of compiling and optionally running an Ore program."""

    def __init__(self, compile_success: bool, stdout: str, stderr: str,
                 run_output: str = None, ir: str = None):
        self.compile_success = compile_success
        self.stdout = stdout
        self.stderr = stderr
        self.compile_output = stdout + stderr
        self.run_output = run_output
        self.ir = ir


@pytest.fixture
def compiler_root():
    """Path to compiler root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def run_orec(compiler_root):
    """
    Fixture that returns a function running orec.py with the given arguments.

    Usage:
        result = run_orec(["--run"], source)
        assert result.returncode == 0
    """
    def _run(args, source: str = None) -> subprocess.CompletedProcess:
        orec = os.path.join(compiler_root, "orec.py")
        return subprocess.run(
            [sys.executable, orec] + list(args),
            input=source,
            capture_output=True,
            text=True,
            cwd=compiler_root
        )

    return _run


@pytest.fixture
def compile_ore(run_orec):
    """
    Fixture that returns a function to compile Ore source code.

    Usage:
        result = compile_ore(source_code)
        assert result.compile_success
        assert result.run_output == "42\\n"
    """
    def _compile(source: str, run: bool = True) -> CompilerResult:
        with tempfile.TemporaryDirectory() as tmpdir:
            source_path = os.path.join(tmpdir, "test.ore")
            with open(source_path, 'w') as f:
                f.write(source)

            args = [source_path, "--verify"]
            if run:
                args.append("--run")

            result = run_orec(args)
            compile_success = result.returncode == 0

            if run:
                return CompilerResult(compile_success, result.stdout, result.stderr,
                                      run_output=result.stdout if compile_success else None)
            return CompilerResult(compile_success, result.stdout, result.stderr,
                                  ir=result.stdout)

    return _compile


@pytest.fixture
def expect_output(compile_ore):
    """
    Fixture that compiles and runs code and asserts expected output.

    Usage:
        expect_output(source_code, "expected output\\n")
    """
    def _expect(source: str, expected: str):
        result = compile_ore(source)
        assert result.compile_success, f"Compilation failed:\n{result.compile_output}"
        assert result.run_output == expected, \
            f"Output mismatch:\nExpected: {expected!r}\nGot: {result.run_output!r}"

    return _expect


@pytest.fixture
def expect_compile_error(compile_ore):
    """
    Fixture that verifies compilation fails with the expected error line.

    Usage:
        expect_compile_error(bad_code, "Unknown operator 'bogus'.")
    """
    def _expect(source: str, error_substring: str = None):
        result = compile_ore(source, run=False)
        assert not result.compile_success, \
            f"Expected compilation to fail but it succeeded.\nOutput: {result.compile_output}"
        assert result.stdout == "", f"Unexpected IR on stdout:\n{result.stdout}"
        assert result.stderr.startswith("error: "), \
            f"Expected an 'error:' line but got:\n{result.stderr}"
        if error_substring:
            assert error_substring in result.stderr, \
                f"Expected error containing '{error_substring}' but got:\n{result.stderr}"

    return _expect


@pytest.fixture
def generate_ir():
    """
    Fixture that returns a function generating IR in-process.

    Usage:
        ir_text = generate_ir('["print", 1]')
    """
    def _generate(source: str) -> str:
        return CodeGenerator().generate(parse_program(source))

    return _generate

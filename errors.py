"""
Ore Compiler Errors

Every error the compiler reports is fatal. Errors are raised where they are
detected and reported once by the command line driver.
"""

from typing import Optional


class OreError(Exception):
    """Base class for compilation errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OreSyntaxError(OreError):
    """Operator token in a non-head position, or malformed input tree"""

    def __init__(self, detail: Optional[str] = None):
        message = "Syntax error."
        if detail:
            message += f" {detail}"
        super().__init__(message)


class UnknownOperator(OreError):
    def __init__(self, name: str):
        super().__init__(f"Unknown operator '{name}'.")
        self.name = name


class ArgumentCountIncorrect(OreError):
    def __init__(self):
        super().__init__("Argument count incorrect.")


class VariableNotFound(OreError):
    def __init__(self, name: str):
        super().__init__(f"Variable not found '{name}'.")
        self.name = name


class InternalError(OreError):
    """A consistency check in the generator failed"""

    def __init__(self, detail: Optional[str] = None):
        message = "Internal error."
        if detail:
            message += f" {detail}"
        super().__init__(message)

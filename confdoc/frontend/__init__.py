"""Front-ends that turn annotated Python classes into raw definitions."""

from .annotations import Arg, arg, generate, register, rename_all
from .discovery import iter_source_files
from .scanner import SourceScanner

__all__ = [
    "Arg",
    "SourceScanner",
    "arg",
    "generate",
    "iter_source_files",
    "register",
    "rename_all",
]
